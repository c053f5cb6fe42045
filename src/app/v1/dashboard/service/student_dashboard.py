import logging
import time
from datetime import datetime, timezone

import httpx

from src.app.common.utils.consts import NotificationVariant, TaskPriority, TaskType
from src.app.v1.dashboard.client.api_client import DashboardApiClient
from src.app.v1.dashboard.schema.task import DashboardStats, NewTaskForm, Notification, Task

logger = logging.getLogger(__name__)

# 첫 로딩 전에 보여주는 예시 과제
PLACEHOLDER_TASKS = [
    Task(
        id="1",
        title="Complete Math Homework",
        subject="Mathematics",
        description="Chapter 5 exercises 1-20",
        due_date="2025-01-05",
        priority=TaskPriority.HIGH,
        completed=False,
        type=TaskType.PERSONAL,
    ),
    Task(
        id="2",
        title="Physics Lab Report",
        subject="Physics",
        description="Write report on pendulum experiment",
        due_date="2025-01-08",
        priority=TaskPriority.MEDIUM,
        completed=True,
        type=TaskType.ASSIGNED,
        teacher_name="Ms. Johnson",
    ),
    Task(
        id="3",
        title="Read History Chapter",
        subject="History",
        description="Chapter 12: World War II",
        due_date="2025-01-10",
        priority=TaskPriority.LOW,
        completed=False,
        type=TaskType.ASSIGNED,
        teacher_name="Mr. Smith",
    ),
]


def format_due_date(value) -> str:
    """ISO 날짜/시간 문자열을 UTC 기준 YYYY-MM-DD로 변환"""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return ""
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def map_task(raw: dict) -> Task:
    """서버 과제 문서를 대시보드 Task로 변환"""
    assigned_by = raw.get("assignedBy")
    assigned_to = raw.get("assignedTo")
    is_assigned = bool(assigned_by) and str(assigned_by) != str(assigned_to)

    return Task(
        id=str(raw.get("_id") or raw.get("id")),
        title=raw.get("title", ""),
        subject=raw.get("subject") or "",
        description=raw.get("description") or "",
        due_date=format_due_date(raw.get("dueDate")),
        priority=raw.get("priority") or TaskPriority.MEDIUM,
        completed=raw.get("status") == "completed",
        type=TaskType.ASSIGNED if is_assigned else TaskType.PERSONAL,
        teacher_name=raw.get("assignedByName") or None,
    )


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return default
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return default


class StudentDashboard:
    """학생 대시보드 화면 상태

    과제 목록은 처음 마운트될 때 한 번만 서버에서 받아온다.
    완료 토글과 삭제는 로컬 상태만 바꾸며 서버에 저장하지 않는다.
    """

    def __init__(self, api_client: DashboardApiClient):
        self.api_client = api_client
        self.tasks: list[Task] = [task.model_copy() for task in PLACEHOLDER_TASKS]
        self.new_task = NewTaskForm()
        self.is_add_dialog_open = False
        self.teacher_code = ""
        self.notifications: list[Notification] = []
        self._mounted = False

    def _notify(self, title: str, description: str, destructive: bool = False) -> Notification:
        notification = Notification(
            title=title,
            description=description,
            variant=NotificationVariant.DESTRUCTIVE if destructive else NotificationVariant.DEFAULT,
        )
        self.notifications.append(notification)
        return notification

    @property
    def last_notification(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None

    def dismiss_notifications(self) -> None:
        self.notifications.clear()

    @property
    def stats(self) -> DashboardStats:
        total = len(self.tasks)
        completed = sum(1 for task in self.tasks if task.completed)
        progress = round(completed / total * 100) if total else 0
        return DashboardStats(total=total, completed=completed, pending=total - completed, progress=progress)

    @property
    def personal_tasks(self) -> list[Task]:
        return [task for task in self.tasks if task.type == TaskType.PERSONAL]

    @property
    def assigned_tasks(self) -> list[Task]:
        return [task for task in self.tasks if task.type == TaskType.ASSIGNED]

    async def load(self) -> None:
        if self._mounted:
            return
        self._mounted = True

        try:
            response = await self.api_client.fetch_tasks()
            if not response.is_success:
                logger.info(f"Task fetch returned {response.status_code}; keeping current tasks")
                return
            data = response.json()
            raw_tasks = data
            if isinstance(data, dict) and data.get("tasks") is not None:
                raw_tasks = data["tasks"]
            if not isinstance(raw_tasks, list):
                raise ValueError(f"Unexpected task payload: {type(raw_tasks).__name__}")
            tasks = [map_task(raw) for raw in raw_tasks]
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            # 로딩 실패는 조용히 무시
            logger.debug(f"Task fetch failed: {e}")
            return

        self.tasks = tasks

    def toggle_complete(self, task_id: str) -> None:
        # 로컬 상태만 변경 (서버 저장 없음)
        self.tasks = [
            task.model_copy(update={"completed": not task.completed}) if task.id == task_id else task
            for task in self.tasks
        ]
        self._notify("Task updated", "Task status has been changed.")

    def delete_task(self, task_id: str) -> None:
        self.tasks = [task for task in self.tasks if task.id != task_id]
        self._notify("Task deleted", "The task has been removed.")

    async def add_task(self) -> Task | None:
        form = self.new_task
        if not form.title or not form.subject:
            self._notify("Missing fields", "Please fill in all required fields.", destructive=True)
            return None

        payload = {
            "title": form.title,
            "description": form.description,
            "priority": form.priority.value,
        }
        if form.due_date:
            payload["dueDate"] = form.due_date

        try:
            response = await self.api_client.create_task(payload)
            if not response.is_success:
                self._notify("Create failed", _error_message(response, "Failed to create task"), destructive=True)
                return None
            created = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._notify("Network error", str(e) or "Failed to contact server", destructive=True)
            return None

        task = Task(
            id=str(created.get("_id") or created.get("id") or int(time.time() * 1000)),
            title=created.get("title") or form.title,
            subject=created.get("subject") or form.subject,
            description=created.get("description") or form.description,
            due_date=format_due_date(created.get("dueDate")) or form.due_date,
            priority=created.get("priority") or form.priority,
            completed=created.get("status") == "completed",
            type=TaskType.PERSONAL,
        )
        self.tasks = [*self.tasks, task]
        self.new_task = NewTaskForm()
        self.is_add_dialog_open = False
        self._notify("Task created!", "Your new task has been added.")
        return task

    async def request_connection(self) -> bool:
        code = self.teacher_code.strip()
        if not code:
            self._notify("Enter code", "Please enter teacher code", destructive=True)
            return False

        try:
            response = await self.api_client.request_connection(code)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._notify("Network error", str(e) or "Failed to contact server", destructive=True)
            return False

        if not response.is_success:
            message = data.get("message") if isinstance(data, dict) else None
            self._notify("Request failed", message or "Failed to send request", destructive=True)
            return False

        self._notify("Request sent", "Connection request sent to teacher.")
        self.teacher_code = ""
        return True
