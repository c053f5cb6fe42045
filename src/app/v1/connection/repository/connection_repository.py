from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from src.app.common.utils.consts import ConnectionStatus
from src.app.v1.connection.entity.connection import Connection


class ConnectionRepository:

    async def get_connection(self, session: AsyncSession, connection_id: str) -> Connection | None:
        query = select(Connection).where(Connection.id == connection_id)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def get_connection_by_pair(self, session: AsyncSession, teacher_id: str, student_id: str) -> Connection | None:
        query = select(Connection).where(Connection.teacher_id == teacher_id, Connection.student_id == student_id)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    async def create_connection(self, session: AsyncSession, teacher_id: str, student_id: str) -> Connection:
        """(teacher, student) 쌍이 이미 있으면 commit 시 IntegrityError 발생"""
        connection = Connection(teacher_id=teacher_id, student_id=student_id, status=ConnectionStatus.PENDING)
        session.add(connection)
        await session.commit()
        return connection

    async def update_status_if_pending(self, session: AsyncSession, connection: Connection, status: ConnectionStatus) -> bool:
        """pending 상태일 때만 전이. 이미 다른 응답이 반영됐으면 False"""
        query = (
            update(Connection)
            .where(Connection.id == connection.id, Connection.status == ConnectionStatus.PENDING)
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(query)
        await session.commit()

        if result.rowcount == 0:
            return False
        await session.refresh(connection)
        return True

    async def get_connections_by_teacher(self, session: AsyncSession, teacher_id: str) -> list[Connection]:
        query = (
            select(Connection)
            .options(selectinload(Connection.student))
            .where(Connection.teacher_id == teacher_id)
            .order_by(Connection.created_at)
        )
        result = await session.execute(query)
        return list(result.scalars().all())

    async def get_connections_by_student(self, session: AsyncSession, student_id: str) -> list[Connection]:
        query = (
            select(Connection)
            .options(selectinload(Connection.teacher))
            .where(Connection.student_id == student_id)
            .order_by(Connection.created_at)
        )
        result = await session.execute(query)
        return list(result.scalars().all())
