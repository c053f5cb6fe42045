import os

import httpx
from dotenv import load_dotenv

load_dotenv()

API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8000")


class DashboardApiClient:
    """학생 대시보드가 사용하는 REST 호출 모음"""

    TASKS_PATH = "/api/tasks"
    CONNECTION_REQUEST_PATH = "/api/connections/request"

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str = API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_token = access_token
        self.base_url = base_url
        self.transport = transport

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.access_token}"} if self.access_token else {}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, headers=self._headers(), transport=self.transport)

    async def fetch_tasks(self) -> httpx.Response:
        async with self._client() as client:
            return await client.get(self.TASKS_PATH)

    async def create_task(self, payload: dict) -> httpx.Response:
        async with self._client() as client:
            return await client.post(self.TASKS_PATH, json=payload)

    async def request_connection(self, teacher_code: str) -> httpx.Response:
        async with self._client() as client:
            return await client.post(self.CONNECTION_REQUEST_PATH, json={"teacherId": teacher_code})
