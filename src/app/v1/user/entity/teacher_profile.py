from sqlalchemy import JSON, BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.app.common.utils.consts import DIRECTORY_CODE_MAX_LENGTH, IDENTITY_LENGTH
from src.config.database import Base


class TeacherProfile(Base):
    __tablename__ = "teacher_profiles"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(
        String(IDENTITY_LENGTH), ForeignKey("users.external_id", ondelete="CASCADE"), unique=True, nullable=False
    )
    # 학생에게 공유하는 짧은 교사 코드
    code: Mapped[str | None] = mapped_column(String(DIRECTORY_CODE_MAX_LENGTH), unique=True, nullable=True)
    connected_students: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    user = relationship("User", uselist=False)
