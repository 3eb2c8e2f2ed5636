"""
TIMEBOX Board - Session

Client-side board state with optimistic updates.

Toggle, renew and delete are applied to the local snapshot first, then
written to the API. If the write fails the snapshot is rolled back,
refreshed from the server, and the error is re-raised, so the local view
never silently diverges from what is stored.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from timebox.board.client import TasksApiClient
from timebox.tasks.errors import NotFoundError
from timebox.tasks.schemas import TaskBoardResponse, TaskResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

GROUPS = ("today", "overdue", "upcoming")


def _with_groups(board: TaskBoardResponse, groups: dict) -> TaskBoardResponse:
    """Copy of ``board`` with new groups and the counters recomputed from them."""
    today = groups["today"]
    done = sum(1 for t in today if t.completed)
    return board.model_copy(update={
        **groups,
        "total": sum(len(tasks) for tasks in groups.values()),
        "today_completion": done / len(today) * 100 if today else 0.0,
    })


def _map_task(
    board: TaskBoardResponse,
    task_id: str,
    change: Callable[[TaskResponse], TaskResponse],
) -> TaskBoardResponse:
    return _with_groups(board, {
        group: [change(t) if t.id == task_id else t for t in getattr(board, group)]
        for group in GROUPS
    })


def _without(board: TaskBoardResponse, task_id: str) -> TaskBoardResponse:
    return _with_groups(board, {
        group: [t for t in getattr(board, group) if t.id != task_id]
        for group in GROUPS
    })


class BoardSession:
    """Holds the latest board snapshot for one owner."""

    def __init__(self, client: TasksApiClient, query: Optional[str] = None):
        self.client = client
        self.query = query
        self.board = TaskBoardResponse()

    def find(self, task_id: str) -> Optional[TaskResponse]:
        for group in GROUPS:
            for task in getattr(self.board, group):
                if task.id == task_id:
                    return task
        return None

    def _require(self, task_id: str) -> TaskResponse:
        task = self.find(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    async def refresh(self) -> TaskBoardResponse:
        """Replace the snapshot with a freshly classified board, filtered by ``query``."""
        self.board = await self.client.fetch_board(self.query)
        return self.board

    async def _apply(
        self,
        speculative: TaskBoardResponse,
        write: Callable[[], Awaitable[T]],
    ) -> T:
        previous = self.board
        self.board = speculative
        try:
            return await write()
        except asyncio.CancelledError:
            self.board = previous
            raise
        except Exception:
            self.board = previous
            try:
                await self.refresh()
            except Exception as e:
                logger.warning("Refresh after failed write also failed: %s", e)
            raise

    async def toggle_complete(self, task_id: str) -> TaskResponse:
        """Flip completion locally, then persist it."""
        task = self._require(task_id)
        completed = not task.completed

        speculative = _map_task(
            self.board, task_id, lambda t: t.model_copy(update={"completed": completed})
        )
        stored = await self._apply(
            speculative, lambda: self.client.set_completed(task_id, completed)
        )
        self.board = _map_task(self.board, task_id, lambda t: stored)
        return stored

    async def renew_task(self, task_id: str) -> TaskResponse:
        """Move a task into today locally, then reschedule it on the server."""
        task = self._require(task_id)
        renewed = task.model_copy(update={"completed": False, "overdue_days": None})

        remaining = _without(self.board, task_id)
        speculative = _with_groups(remaining, {
            "today": [*remaining.today, renewed],
            "overdue": remaining.overdue,
            "upcoming": remaining.upcoming,
        })
        stored = await self._apply(speculative, lambda: self.client.renew_task(task_id))
        self.board = _map_task(self.board, task_id, lambda t: stored)
        return stored

    async def delete_task(self, task_id: str) -> None:
        """Drop a task locally, then delete it on the server."""
        self._require(task_id)
        await self._apply(_without(self.board, task_id), lambda: self.client.delete_task(task_id))

    async def create_task(self, payload: dict) -> TaskResponse:
        created = await self.client.create_task(payload)
        await self.refresh()
        return created

    async def update_task(self, task_id: str, payload: dict) -> TaskResponse:
        updated = await self.client.update_task(task_id, payload)
        await self.refresh()
        return updated
