import logging
from typing import AsyncGenerator

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.common.exceptions import UnauthorizedError
from src.app.common.utils.consts import UserRole
from src.app.common.utils.security import verify_access_token
from src.app.v1.user.schema.responseDto import Principal
from src.config.database.postgresql import SessionLocal

logger = logging.getLogger(__name__)

# OAuth2 스키마 정의 (토큰 누락 시 직접 401 처리)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


# DB 세션 의존성
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session


async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
) -> Principal:
    if not token:
        logger.warning("Access Token is missing.")
        raise UnauthorizedError("Access token is missing")

    payload = verify_access_token(token)

    user_id = payload.get("sub")
    role = payload.get("role")

    if not user_id or role not in {r.value for r in UserRole}:
        logger.warning(f"Invalid token payload: {payload}")
        raise UnauthorizedError("Invalid token")

    logger.info(f"User authenticated successfully: user_id={user_id}, role={role}")
    return Principal(user_id=str(user_id), role=UserRole(role))
