import logging
import os
import sys
from pathlib import Path

# 프로젝트 루트 디렉토리를 sys.path에 추가
# 상단에 위치 필수 !
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.app.common.exceptions import register_exception_handlers
from src.config.database import database_models  # noqa: F401
from src.config.database.postgresql import engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# 여기부터 router 추가
from src.app.router import connection_router, teacher_router

load_dotenv()

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))

# 쉼표로 구분된 허용 origin 목록
origins = [
    origin.strip()
    for origin in os.environ.get("CORS_ALLOWED_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if origin.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Study connect API starting up")
    yield

    # Ensure clean shutdown
    await engine.dispose()
    logger.info("Study connect API shut down")


main_router = APIRouter(prefix="/api")


# 각 라우터를 메인 라우터에 포함
main_router.include_router(connection_router)
main_router.include_router(teacher_router)


@main_router.get("/health", tags=["Health"])
async def health() -> dict:
    return {"status": "ok"}


app = FastAPI(title="Study Connect API", lifespan=lifespan)
app.include_router(main_router)
register_exception_handlers(app)


app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host=API_HOST, port=API_PORT)
