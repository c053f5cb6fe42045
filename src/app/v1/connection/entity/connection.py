import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.app.common.utils.consts import IDENTITY_LENGTH, ConnectionStatus
from src.config.database import Base


class Connection(Base):
    __tablename__ = "connections"
    # (teacher, student) 쌍마다 하나의 연결만 허용
    __table_args__ = (UniqueConstraint("teacher_id", "student_id", name="uq_connections_teacher_student"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    teacher_id: Mapped[str] = mapped_column(
        String(IDENTITY_LENGTH), ForeignKey("users.external_id", ondelete="CASCADE"), nullable=False, index=True
    )
    student_id: Mapped[str] = mapped_column(
        String(IDENTITY_LENGTH), ForeignKey("users.external_id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[ConnectionStatus] = mapped_column(
        Enum(ConnectionStatus, name="connection_status_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ConnectionStatus.PENDING,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.now, server_default=func.now()
    )

    teacher = relationship("User", foreign_keys=[teacher_id], uselist=False)
    student = relationship("User", foreign_keys=[student_id], uselist=False)

    @property
    def is_pending(self) -> bool:
        return self.status == ConnectionStatus.PENDING
