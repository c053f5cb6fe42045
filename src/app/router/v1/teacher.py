from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.common.utils.dependency import get_current_user, get_session
from src.app.v1.user.repository.user_repository import UserRepository
from src.app.v1.user.schema.responseDto import Principal, TeacherDirectoryResponse
from src.app.v1.user.service.teacher_directory import TeacherDirectory

router = APIRouter(prefix="/teachers", tags=["Teachers"])
teacher_directory = TeacherDirectory(UserRepository())


# 교사 목록 조회
@router.get("", response_model=list[TeacherDirectoryResponse])
async def list_teachers(
    current_user: Principal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await teacher_directory.list_teachers(session)
