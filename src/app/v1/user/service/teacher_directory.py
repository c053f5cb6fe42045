import logging
import re

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.app.common.exceptions import InternalError, NotFoundError
from src.app.common.utils.consts import IDENTITY_LENGTH
from src.app.v1.user.repository.user_repository import UserRepository
from src.app.v1.user.schema.responseDto import TeacherDirectoryResponse, UserSummary

logger = logging.getLogger(__name__)

IDENTITY_PATTERN = re.compile(rf"^[0-9a-fA-F]{{{IDENTITY_LENGTH}}}$")


def is_identity(identifier: str) -> bool:
    """식별자 형식인지 문법적으로만 판별 (DB 조회 없음)"""
    return bool(IDENTITY_PATTERN.match(identifier))


class TeacherDirectory:
    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def resolve_teacher(self, session: AsyncSession, identifier: str) -> str:
        """교사 식별자 또는 교사 코드를 교사의 정식 식별자로 변환

        식별자 형식이면 user_id로만, 아니면 code로만 한 번 조회한다.
        """
        if is_identity(identifier):
            # 저장된 식별자는 소문자 hex
            profile = await self.user_repo.get_teacher_profile_by_user_id(session, identifier.lower())
            logger.info(f"Teacher lookup by id: identifier={identifier}, found={profile is not None}")
            if profile is None:
                raise NotFoundError("Teacher not found by id")
            return profile.user_id

        profile = await self.user_repo.get_teacher_profile_by_code(session, identifier)
        logger.info(f"Teacher lookup by code: code={identifier}, found={profile is not None}")
        if profile is None:
            raise NotFoundError("Teacher not found by code")
        return profile.user_id

    async def list_teachers(self, session: AsyncSession) -> list[TeacherDirectoryResponse]:
        try:
            profiles = await self.user_repo.get_all_teacher_profiles(session)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch teachers: {e}")
            raise InternalError("Failed to fetch teachers")

        return [
            TeacherDirectoryResponse(
                id=profile.id,
                teacher=UserSummary.model_validate(profile.user),
                code=profile.code,
            )
            for profile in profiles
        ]
