from src.app.router.v1.connection import router as connection_router
from src.app.router.v1.teacher import router as teacher_router

__all__ = ["connection_router", "teacher_router"]
