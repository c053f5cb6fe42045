import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import asyncio
import random
import string

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.common.utils.consts import UserRole
from src.app.common.utils.security import create_access_token
from src.app.v1.user.entity.student_profile import StudentProfile
from src.app.v1.user.entity.teacher_profile import TeacherProfile
from src.app.v1.user.entity.user import User
from src.config.database import database_models  # noqa: F401
from src.config.database.postgresql import Base, SessionLocal, engine

FIRST_NAMES = ["Alex", "Sam", "Jordan", "Taylor", "Morgan", "Casey", "Riley", "Jamie", "Avery", "Quinn"]
LAST_NAMES = ["Kim", "Park", "Lee", "Choi", "Jung", "Kang", "Cho", "Yoon", "Jang", "Lim"]

# 중복 데이터 방지
generated_emails: set[str] = set()
generated_codes: set[str] = set()


def random_string(length: int) -> str:
    return "".join(random.choices(string.ascii_uppercase + string.digits, k=length))


def generate_name() -> str:
    return f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}"


# 중복되지 않는 이메일 생성
def generate_unique_email() -> str:
    while True:
        email = f"{random_string(6).lower()}@example.com"
        if email not in generated_emails:
            generated_emails.add(email)
            return email


# 중복되지 않는 교사 코드 생성 (6자리)
def generate_unique_code() -> str:
    while True:
        code = random_string(6)
        if code not in generated_codes:
            generated_codes.add(code)
            return code


async def insert_users_async(
    session: AsyncSession, num_teachers: int = 3, num_students: int = 5
) -> tuple[list[User], dict[str, str]]:
    users: list[User] = []
    codes: dict[str, str] = {}
    try:
        for _ in range(num_teachers):
            user = User(name=generate_name(), email=generate_unique_email(), role=UserRole.TEACHER)
            session.add(user)
            await session.flush()
            codes[user.external_id] = generate_unique_code()
            session.add(TeacherProfile(user_id=user.external_id, code=codes[user.external_id], connected_students=[]))
            users.append(user)

        for _ in range(num_students):
            user = User(name=generate_name(), email=generate_unique_email(), role=UserRole.STUDENT)
            session.add(user)
            await session.flush()
            session.add(StudentProfile(user_id=user.external_id, connected_teachers=[]))
            users.append(user)

        await session.commit()
    except Exception as e:
        print(f"데이터 삽입 중 오류 발생: {e}")
        await session.rollback()
        raise

    print(f"교사 {num_teachers}명, 학생 {num_students}명의 데이터가 생성되었습니다.")
    return users, codes


async def main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as session:
        users, codes = await insert_users_async(session)

    for user in users:
        token = create_access_token({"sub": user.external_id, "role": user.role.value})
        code = f" code={codes[user.external_id]}" if user.external_id in codes else ""
        print(f"[{user.role.value}] {user.name} <{user.email}> id={user.external_id}{code}\n  token={token}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
