from pydantic import BaseModel, ConfigDict, Field


class InviteCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_id: str = Field(..., alias="studentId", min_length=1, description="초대할 학생 식별자")


class ConnectionCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    teacher_id: str = Field(..., alias="teacherId", min_length=1, description="교사 식별자 또는 교사 코드")


class InviteRespondRequest(BaseModel):
    # accept / reject 이외의 값은 서비스에서 InvalidArgument로 처리
    action: str | None = Field(None, description="accept 또는 reject")
