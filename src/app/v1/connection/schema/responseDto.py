from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from src.app.common.utils.consts import ConnectionStatus
from src.app.v1.user.schema.responseDto import UserSummary


class ConnectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    teacher_id: str = Field(
        validation_alias=AliasChoices("teacher_id", "teacherId"), serialization_alias="teacherId"
    )
    student_id: str = Field(
        validation_alias=AliasChoices("student_id", "studentId"), serialization_alias="studentId"
    )
    status: ConnectionStatus
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"), serialization_alias="createdAt"
    )


class ConnectionWithCounterpartResponse(ConnectionResponse):
    # 교사는 학생 정보, 학생은 교사 정보
    counterpart: UserSummary | None = None
