from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.common.utils.dependency import get_current_user, get_session
from src.app.v1.connection.repository.connection_repository import ConnectionRepository
from src.app.v1.connection.schema.requestDto import (
    ConnectionCreateRequest,
    InviteCreateRequest,
    InviteRespondRequest,
)
from src.app.v1.connection.schema.responseDto import (
    ConnectionResponse,
    ConnectionWithCounterpartResponse,
)
from src.app.v1.connection.service.connection_service import ConnectionService
from src.app.v1.user.repository.user_repository import UserRepository
from src.app.v1.user.schema.responseDto import Principal
from src.app.v1.user.service.teacher_directory import TeacherDirectory

router = APIRouter(prefix="/connections", tags=["Connections"])
user_repo = UserRepository()
connection_service = ConnectionService(
    connection_repo=ConnectionRepository(),
    user_repo=user_repo,
    teacher_directory=TeacherDirectory(user_repo),
)


# 교사 -> 학생 초대
@router.post("/invite", response_model=ConnectionResponse, status_code=status.HTTP_201_CREATED)
async def send_invite(
    payload: InviteCreateRequest,
    current_user: Principal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await connection_service.create_invite(session, current_user, payload.student_id)


# 학생 -> 초대 수락 / 거절
@router.patch("/invite/{connection_id}/respond", response_model=ConnectionResponse)
async def respond_to_invite(
    connection_id: str,
    payload: InviteRespondRequest,
    current_user: Principal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await connection_service.respond_to_invite(session, current_user, connection_id, payload.action)


# 내 연결 목록 조회
@router.get("", response_model=list[ConnectionWithCounterpartResponse])
async def list_connections(
    current_user: Principal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await connection_service.list_connections(session, current_user)


# 학생 -> 교사 연결 요청 (교사 식별자 또는 교사 코드)
@router.post("/request", response_model=ConnectionResponse, status_code=status.HTTP_201_CREATED)
async def request_connection(
    payload: ConnectionCreateRequest,
    current_user: Principal = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    return await connection_service.create_request(session, current_user, payload.teacher_id)
