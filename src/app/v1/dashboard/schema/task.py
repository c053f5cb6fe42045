from pydantic import BaseModel, Field

from src.app.common.utils.consts import NotificationVariant, TaskPriority, TaskType


class Task(BaseModel):
    id: str
    title: str
    subject: str = ""
    description: str = ""
    due_date: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    completed: bool = False
    type: TaskType = TaskType.PERSONAL
    teacher_name: str | None = None


class NewTaskForm(BaseModel):
    title: str = ""
    subject: str = ""
    description: str = ""
    due_date: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM


class Notification(BaseModel):
    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT


class DashboardStats(BaseModel):
    total: int
    completed: int
    pending: int
    progress: int = Field(..., ge=0, le=100, description="완료율 (%)")
