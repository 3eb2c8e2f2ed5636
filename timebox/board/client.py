"""
TIMEBOX Board - API Client

Async HTTP client for the task API, used by board sessions.
"""

import logging
from typing import Optional

import httpx

from timebox.config import settings
from timebox.tasks.schemas import TaskBoardResponse, TaskResponse

logger = logging.getLogger(__name__)


class TasksApiClient:
    """
    Thin wrapper over the /tasks endpoints for one authenticated owner.

    Non-2xx responses raise httpx.HTTPStatusError.
    """

    def __init__(
        self,
        access_token: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.API_BASE_URL
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=timeout or settings.API_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "TasksApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = await self._client.request(method, url, **kwargs)
        if response.is_error:
            logger.warning("%s %s failed with %s", method, url, response.status_code)
        response.raise_for_status()
        return response

    async def fetch_board(self, query: Optional[str] = None) -> TaskBoardResponse:
        params = {"q": query} if query else None
        response = await self._request("GET", "/tasks", params=params)
        return TaskBoardResponse.model_validate(response.json())

    async def get_task(self, task_id: str) -> TaskResponse:
        response = await self._request("GET", f"/tasks/{task_id}")
        return TaskResponse.model_validate(response.json())

    async def create_task(self, payload: dict) -> TaskResponse:
        response = await self._request("POST", "/tasks", json=payload)
        return TaskResponse.model_validate(response.json())

    async def update_task(self, task_id: str, payload: dict) -> TaskResponse:
        response = await self._request("PUT", f"/tasks/{task_id}", json=payload)
        return TaskResponse.model_validate(response.json())

    async def set_completed(self, task_id: str, completed: bool) -> TaskResponse:
        response = await self._request(
            "PATCH", f"/tasks/{task_id}/complete", json={"completed": completed}
        )
        return TaskResponse.model_validate(response.json())

    async def renew_task(self, task_id: str) -> TaskResponse:
        response = await self._request("POST", f"/tasks/{task_id}/renew")
        return TaskResponse.model_validate(response.json())

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")
