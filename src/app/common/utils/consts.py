from enum import Enum


class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"


class ConnectionStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ConnectionAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"

    @property
    def resulting_status(self) -> ConnectionStatus:
        if self is ConnectionAction.ACCEPT:
            return ConnectionStatus.ACCEPTED
        if self is ConnectionAction.REJECT:
            return ConnectionStatus.REJECTED
        raise ValueError(f"Unhandled action: {self.value}")


class NotificationVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskType(str, Enum):
    PERSONAL = "personal"
    ASSIGNED = "assigned"


# 32자리 hex 형식의 사용자 식별자
IDENTITY_LENGTH = 32
DIRECTORY_CODE_MAX_LENGTH = 16
