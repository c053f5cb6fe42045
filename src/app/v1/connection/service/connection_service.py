import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.common.exceptions import (
    ConflictError,
    ForbiddenError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
)
from src.app.common.utils.consts import ConnectionAction, UserRole
from src.app.v1.connection.entity.connection import Connection
from src.app.v1.connection.repository.connection_repository import ConnectionRepository
from src.app.v1.connection.schema.responseDto import (
    ConnectionResponse,
    ConnectionWithCounterpartResponse,
)
from src.app.v1.user.repository.user_repository import UserRepository
from src.app.v1.user.schema.responseDto import Principal, UserSummary
from src.app.v1.user.service.teacher_directory import TeacherDirectory

logger = logging.getLogger(__name__)

# 생성 주체별 중복 메시지
CONFLICT_MESSAGES = {
    UserRole.TEACHER: "Invite already exists",
    UserRole.STUDENT: "Request already exists",
}


class ConnectionService:
    """교사 초대 / 학생 요청 → 학생 수락 / 거절 흐름을 관리"""

    def __init__(
        self,
        connection_repo: ConnectionRepository,
        user_repo: UserRepository,
        teacher_directory: TeacherDirectory,
    ):
        self.connection_repo = connection_repo
        self.user_repo = user_repo
        self.teacher_directory = teacher_directory

    @staticmethod
    def _require_role(principal: Principal, role: UserRole) -> None:
        if principal.role != role:
            logger.warning(f"Unauthorized role: user_id={principal.user_id}, role={principal.role.value}")
            raise ForbiddenError("Forbidden")

    async def _create_connection(
        self, session: AsyncSession, initiator: UserRole, teacher_id: str, student_id: str
    ) -> Connection:
        # 초대와 요청 모두 같은 모양의 pending 레코드를 만든다
        existing = await self.connection_repo.get_connection_by_pair(session, teacher_id, student_id)
        if existing:
            logger.warning(f"Connection already exists: teacher={teacher_id}, student={student_id}")
            raise ConflictError(CONFLICT_MESSAGES[initiator])

        try:
            connection = await self.connection_repo.create_connection(session, teacher_id, student_id)
        except IntegrityError:
            # 동시 생성 경합에서 진 쪽
            await session.rollback()
            logger.warning(f"Unique constraint hit: teacher={teacher_id}, student={student_id}")
            raise ConflictError(CONFLICT_MESSAGES[initiator])

        logger.info(
            f"Connection created by {initiator.value}: id={connection.id}, teacher={teacher_id}, student={student_id}"
        )
        return connection

    async def create_invite(self, session: AsyncSession, principal: Principal, student_id: str) -> ConnectionResponse:
        self._require_role(principal, UserRole.TEACHER)

        try:
            student = await self.user_repo.get_student_by_external_id(session, student_id)
            if student is None:
                raise NotFoundError("Student not found")

            connection = await self._create_connection(
                session, UserRole.TEACHER, teacher_id=principal.user_id, student_id=student.external_id
            )
            return ConnectionResponse.model_validate(connection)
        except SQLAlchemyError as e:
            logger.error(f"Failed to send invite: {e}")
            raise InternalError("Failed to send invite")

    async def create_request(
        self, session: AsyncSession, principal: Principal, teacher_identifier: str
    ) -> ConnectionResponse:
        self._require_role(principal, UserRole.STUDENT)
        logger.info(f"Connection request: student={principal.user_id}, teacher_identifier={teacher_identifier}")

        try:
            teacher_id = await self.teacher_directory.resolve_teacher(session, teacher_identifier)
            connection = await self._create_connection(
                session, UserRole.STUDENT, teacher_id=teacher_id, student_id=principal.user_id
            )
            return ConnectionResponse.model_validate(connection)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create connection request: {e}")
            raise InternalError("Failed to create connection request")

    async def respond_to_invite(
        self, session: AsyncSession, principal: Principal, connection_id: str, action: str | None
    ) -> ConnectionResponse:
        self._require_role(principal, UserRole.STUDENT)

        try:
            parsed_action = ConnectionAction(action)
        except ValueError:
            logger.warning(f"Invalid action: {action}")
            raise InvalidArgumentError("Invalid action")

        try:
            connection = await self.connection_repo.get_connection(session, connection_id)
            if connection is None:
                raise NotFoundError("Invite not found")

            # 초대든 요청이든 응답 권한은 항상 학생에게 있다
            if connection.student_id != principal.user_id:
                logger.warning(f"Responder mismatch: connection={connection_id}, responder={principal.user_id}")
                raise ForbiddenError("Forbidden")

            if not connection.is_pending:
                logger.warning(f"Connection already resolved: id={connection_id}, status={connection.status.value}")
                raise ConflictError("Invite already responded")

            # 조회 이후 다른 응답이 먼저 반영된 경우
            if not await self.connection_repo.update_status_if_pending(
                session, connection, parsed_action.resulting_status
            ):
                logger.warning(f"Connection resolved concurrently: id={connection_id}")
                raise ConflictError("Invite already responded")
            response = ConnectionResponse.model_validate(connection)
        except SQLAlchemyError as e:
            logger.error(f"Failed to respond to invite: {e}")
            raise InternalError("Failed to respond to invite")

        logger.info(f"Connection {connection_id} -> {response.status.value}")
        if parsed_action is ConnectionAction.ACCEPT:
            await self._push_profiles(session, teacher_id=response.teacher_id, student_id=response.student_id)
        return response

    async def _push_profiles(self, session: AsyncSession, teacher_id: str, student_id: str) -> None:
        # 두 프로필 갱신은 서로 독립적이며 상태 변경을 되돌리지 않는다
        try:
            await self.user_repo.push_connected_student(session, teacher_id, student_id)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Failed to add student {student_id} to teacher {teacher_id}: {e}")

        try:
            await self.user_repo.push_connected_teacher(session, student_id, teacher_id)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Failed to add teacher {teacher_id} to student {student_id}: {e}")

    async def list_connections(
        self, session: AsyncSession, principal: Principal
    ) -> list[ConnectionWithCounterpartResponse]:
        try:
            if principal.role == UserRole.TEACHER:
                connections = await self.connection_repo.get_connections_by_teacher(session, principal.user_id)
                counterparts = [c.student for c in connections]
            else:
                connections = await self.connection_repo.get_connections_by_student(session, principal.user_id)
                counterparts = [c.teacher for c in connections]
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch connections: {e}")
            raise InternalError("Failed to fetch connections")

        return [
            ConnectionWithCounterpartResponse(
                **ConnectionResponse.model_validate(connection).model_dump(),
                counterpart=UserSummary.model_validate(counterpart) if counterpart else None,
            )
            for connection, counterpart in zip(connections, counterparts)
        ]
