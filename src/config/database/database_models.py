from src.app.v1.connection.entity.connection import Connection
from src.app.v1.user.entity.student_profile import StudentProfile
from src.app.v1.user.entity.teacher_profile import TeacherProfile
from src.app.v1.user.entity.user import User

from sqlalchemy.orm import configure_mappers

# 모든 모델이 import된 후에 configure_mappers 호출
configure_mappers()
# alembic이 인식 가능하게 model import

__all__ = ["Connection", "StudentProfile", "TeacherProfile", "User"]
