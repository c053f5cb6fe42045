import os

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

load_dotenv()


DATABASE_URL = os.environ.get("PG_DATABASE_URL")
DB_ECHO = os.environ.get("DB_ECHO", "false").lower() == "true"
DB_TIMEZONE = os.environ.get("DB_TIMEZONE", "Asia/Seoul")


# DATABASE_URL이 None인 경우 처리
if DATABASE_URL is None:
    raise ValueError("PG_DATABASE_URL environment variable is not set")

# server_settings는 asyncpg 전용 옵션
connect_args = {"server_settings": {"timezone": DB_TIMEZONE}} if DATABASE_URL.startswith("postgresql+asyncpg") else {}

engine = create_async_engine(
    DATABASE_URL,
    echo=DB_ECHO,
    connect_args=connect_args,
)

SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,  # 트랜잭션 커밋 후에도 객체가 만료되지 않는 설정 값
    autocommit=False,
    autoflush=False,
)

Base = declarative_base()
