from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from src.app.common.utils.consts import UserRole


class Principal(BaseModel):
    """토큰에서 복원한 인증 사용자 (모든 서비스 호출에 명시적으로 전달)"""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: UserRole


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(validation_alias=AliasChoices("external_id", "id"))
    name: str
    email: str


class TeacherDirectoryResponse(BaseModel):
    id: int
    teacher: UserSummary
    code: str | None = None
