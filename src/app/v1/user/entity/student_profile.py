from sqlalchemy import JSON, BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.app.common.utils.consts import IDENTITY_LENGTH
from src.config.database import Base


class StudentProfile(Base):
    __tablename__ = "student_profiles"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(
        String(IDENTITY_LENGTH), ForeignKey("users.external_id", ondelete="CASCADE"), unique=True, nullable=False
    )
    connected_teachers: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    user = relationship("User", uselist=False)
