import logging

from sqlalchemy import JSON, String, cast, func, literal_column, update
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from src.app.common.utils.consts import UserRole
from src.app.v1.user.entity.student_profile import StudentProfile
from src.app.v1.user.entity.teacher_profile import TeacherProfile
from src.app.v1.user.entity.user import User

logger = logging.getLogger(__name__)


def _json_array_append(session: AsyncSession, column, value: str):
    """JSON 배열 끝에 값을 추가하는 SQL 식

    목록을 읽어서 다시 쓰지 않고 UPDATE 한 번으로 처리해야 동시 수락 시 항목이 사라지지 않는다.
    """
    if session.get_bind().dialect.name == "postgresql":
        current = func.coalesce(cast(column, JSONB), literal_column("'[]'::jsonb"))
        return cast(current.op("||")(func.jsonb_build_array(cast(value, String))), JSON)
    # sqlite: '$[#]' 는 배열의 끝 위치
    return func.json_insert(func.coalesce(column, literal_column("'[]'")), "$[#]", value)


class UserRepository:

    async def get_user_by_external_id(self, session: AsyncSession, external_id: str) -> User | None:
        query = select(User).where(User.external_id == external_id)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def get_student_by_external_id(self, session: AsyncSession, external_id: str) -> User | None:
        query = select(User).where(User.external_id == external_id, User.role == UserRole.STUDENT)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def get_teacher_profile_by_user_id(self, session: AsyncSession, user_id: str) -> TeacherProfile | None:
        query = select(TeacherProfile).where(TeacherProfile.user_id == user_id)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def get_teacher_profile_by_code(self, session: AsyncSession, code: str) -> TeacherProfile | None:
        query = select(TeacherProfile).where(TeacherProfile.code == code)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def get_student_profile_by_user_id(self, session: AsyncSession, user_id: str) -> StudentProfile | None:
        query = select(StudentProfile).where(StudentProfile.user_id == user_id)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def get_all_teacher_profiles(self, session: AsyncSession) -> list[TeacherProfile]:
        query = select(TeacherProfile).options(selectinload(TeacherProfile.user)).order_by(TeacherProfile.id)
        result = await session.execute(query)
        return list(result.scalars().all())

    # 연결 수락 시 교사 프로필에 학생 추가 (중복 검사 없음)
    async def push_connected_student(self, session: AsyncSession, teacher_id: str, student_id: str) -> bool:
        query = (
            update(TeacherProfile)
            .where(TeacherProfile.user_id == teacher_id)
            .values(connected_students=_json_array_append(session, TeacherProfile.connected_students, student_id))
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(query)
        await session.commit()

        if result.rowcount == 0:
            logger.warning(f"Teacher profile not found for user_id={teacher_id}; connected_students unchanged")
            return False
        return True

    # 연결 수락 시 학생 프로필에 교사 추가
    async def push_connected_teacher(self, session: AsyncSession, student_id: str, teacher_id: str) -> bool:
        query = (
            update(StudentProfile)
            .where(StudentProfile.user_id == student_id)
            .values(connected_teachers=_json_array_append(session, StudentProfile.connected_teachers, teacher_id))
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(query)
        await session.commit()

        if result.rowcount == 0:
            logger.warning(f"Student profile not found for user_id={student_id}; connected_teachers unchanged")
            return False
        return True
