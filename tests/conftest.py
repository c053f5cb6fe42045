import os

# 앱 모듈 import 전에 테스트용 환경 변수 설정
os.environ.setdefault("PG_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test_secret_key")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.app.common.utils.consts import UserRole
from src.app.common.utils.dependency import get_session
from src.app.common.utils.security import create_access_token
from src.app.v1.user.entity.student_profile import StudentProfile
from src.app.v1.user.entity.teacher_profile import TeacherProfile
from src.app.v1.user.entity.user import User
from src.config.database import Base
from src.main import app


# 비동기 세션 팩토리 픽스처 (in-memory sqlite 하나를 공유)
@pytest_asyncio.fixture(scope="function")
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_teacher(session_factory):
    async def _make_teacher(name: str = "Ms Johnson", code: str | None = "ABC123") -> User:
        async with session_factory() as session:
            email = f"{name.replace(' ', '').lower()}@example.com"
            user = User(name=name, email=email, role=UserRole.TEACHER)
            session.add(user)
            await session.flush()
            session.add(TeacherProfile(user_id=user.external_id, code=code, connected_students=[]))
            await session.commit()
            return user

    return _make_teacher


@pytest.fixture
def make_student(session_factory):
    async def _make_student(name: str = "Sam Park", with_profile: bool = True) -> User:
        async with session_factory() as session:
            email = f"{name.replace(' ', '').lower()}@example.com"
            user = User(name=name, email=email, role=UserRole.STUDENT)
            session.add(user)
            await session.flush()
            if with_profile:
                session.add(StudentProfile(user_id=user.external_id, connected_teachers=[]))
            await session.commit()
            return user

    return _make_student


@pytest.fixture
def auth_header():
    def _auth_header(user: User) -> dict:
        token = create_access_token({"sub": user.external_id, "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _auth_header
