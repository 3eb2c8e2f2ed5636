"""
TIMEBOX API - Task Service

Business logic for task operations: validation, completion, renewal and
board classification.
"""

import logging
from datetime import datetime, timezone, tzinfo
from typing import Callable, List, Optional

from timebox.config import settings
from timebox.tasks.classification import ClassifiedTask, TaskBoard, classify_task, classify_tasks
from timebox.tasks.errors import NotFoundError, ParseError
from timebox.tasks.models import Task
from timebox.tasks.repository import TaskRepositoryInterface
from timebox.tasks.schemas import (
    TaskBoardResponse,
    TaskCreateRequest,
    TaskResponse,
    TaskUpdateRequest,
)
from timebox.tasks.timeslots import format_time_slot, renew_window
from timebox.tasks.validation import validate_task_fields

logger = logging.getLogger(__name__)


def _wire_timestamp(value):
    """Datetimes and None pass through; other stored values go out as text."""
    if value is None or isinstance(value, datetime):
        return value
    return str(value)


def matches_query(task: Task, query: str) -> bool:
    """Case-insensitive substring match on title, description or category."""
    needle = query.lower()
    return any(
        needle in (text or "").lower()
        for text in (task.title, task.description, task.category)
    )


def completion_percentage(tasks: List[ClassifiedTask]) -> float:
    """Share of completed tasks as a percentage, 0 for an empty group."""
    if not tasks:
        return 0.0
    done = sum(1 for item in tasks if item.task.completed)
    return done / len(tasks) * 100


class TaskService:
    """Service layer for task business logic."""

    def __init__(
        self,
        repository: TaskRepositoryInterface,
        clock: Optional[Callable[[], datetime]] = None,
        tz: Optional[tzinfo] = None,
    ):
        """
        Initialize the task service.

        Args:
            repository: Task repository implementation
            clock: Optional clock function for testing (returns current datetime)
            tz: Zone used for calendar-day comparisons (defaults to DISPLAY_TIMEZONE)
        """
        self.repository = repository
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.tz = tz or settings.display_tz

    def _now(self) -> datetime:
        """Get current time using the configured clock."""
        return self._clock()

    def _task_to_response(
        self,
        task: Task,
        now: datetime,
        overdue_days: Optional[int] = None,
    ) -> TaskResponse:
        """Convert a Task model to TaskResponse with derived fields."""
        time_slot = task.time_slot
        return TaskResponse(
            id=task.id,
            owner_id=task.owner_id,
            title=task.title,
            description=task.description,
            category=task.category,
            priority=task.priority,
            start_time=_wire_timestamp(task.start_time),
            end_time=_wire_timestamp(task.end_time),
            time_slot=time_slot,
            time_slot_label=format_time_slot(time_slot, now, self.tz),
            color=task.color,
            completed=task.completed,
            overdue_days=overdue_days,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    def _classified_to_response(self, item: ClassifiedTask, now: datetime) -> TaskResponse:
        return self._task_to_response(item.task, now, item.overdue_days)

    def _single_response(self, task: Task) -> TaskResponse:
        """Response for one task, annotated with overdue_days when overdue."""
        now = self._now()
        try:
            _, days = classify_task(task, now, self.tz)
        except ParseError:
            days = None
        return self._task_to_response(task, now, days)

    async def _get_or_raise(self, task_id: str, owner_id: str) -> Task:
        task = await self.repository.get_by_id(task_id, owner_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    async def get_board(self, owner_id: str, query: Optional[str] = None) -> TaskBoardResponse:
        """
        Fetch the owner's tasks and classify them.

        When ``query`` is given, only tasks whose title, description or
        category contain it (case-insensitive) are classified.
        """
        tasks = await self.repository.list_by_owner(owner_id)
        if query:
            tasks = [task for task in tasks if matches_query(task, query)]
        now = self._now()
        board: TaskBoard = classify_tasks(tasks, now, self.tz)
        if board.skipped:
            logger.warning(
                "Skipped %d task(s) with unreadable windows for owner %s",
                len(board.skipped), owner_id,
            )
        return TaskBoardResponse(
            today=[self._classified_to_response(item, now) for item in board.today],
            overdue=[self._classified_to_response(item, now) for item in board.overdue],
            upcoming=[self._classified_to_response(item, now) for item in board.upcoming],
            skipped=board.skipped,
            total=board.total,
            today_completion=completion_percentage(board.today),
        )

    async def create_task(
        self,
        owner_id: str,
        request: TaskCreateRequest,
    ) -> TaskResponse:
        """Create a new task for the owner."""
        start_time, end_time = request.window()
        fields = validate_task_fields(
            title=request.title,
            category=request.category,
            priority=request.priority,
            start_time=start_time,
            end_time=end_time,
            description=request.description,
        )
        task = Task.create(owner_id=owner_id, **fields)
        await self.repository.create(task)
        logger.info("Created task %s for owner %s", task.id, owner_id)
        return self._single_response(task)

    async def get_task(self, task_id: str, owner_id: str) -> TaskResponse:
        """Get a task by ID, scoped to owner."""
        task = await self._get_or_raise(task_id, owner_id)
        return self._single_response(task)

    async def update_task(
        self,
        task_id: str,
        owner_id: str,
        request: TaskUpdateRequest,
    ) -> TaskResponse:
        """
        Edit a task, scoped to owner.

        Completion and colour are left untouched, even when the category
        changes.
        """
        await self._get_or_raise(task_id, owner_id)

        start_time, end_time = request.window()
        fields = validate_task_fields(
            title=request.title,
            category=request.category,
            priority=request.priority,
            start_time=start_time,
            end_time=end_time,
            description=request.description,
            require_description=False,
        )
        fields["priority"] = fields["priority"].value

        task = await self.repository.update(task_id, owner_id, fields)
        if task is None:
            raise NotFoundError(task_id)
        return self._single_response(task)

    async def set_completed(self, task_id: str, owner_id: str, completed: bool) -> TaskResponse:
        """Set the completion flag unconditionally."""
        task = await self.repository.update(task_id, owner_id, {"completed": completed})
        if task is None:
            raise NotFoundError(task_id)
        return self._single_response(task)

    async def renew_task(self, task_id: str, owner_id: str) -> TaskResponse:
        """
        Reinstate a task into today's group.

        The new window starts now and keeps the original duration, cut off at
        the end of the current day. The task is marked not completed.
        """
        task = await self._get_or_raise(task_id, owner_id)
        start_time, end_time = renew_window(task.start_time, task.end_time, self._now(), self.tz)

        renewed = await self.repository.update(
            task_id,
            owner_id,
            {"start_time": start_time, "end_time": end_time, "completed": False},
        )
        if renewed is None:
            raise NotFoundError(task_id)
        logger.info("Renewed task %s for owner %s", task_id, owner_id)
        return self._single_response(renewed)

    async def delete_task(self, task_id: str, owner_id: str) -> None:
        """Delete a task, scoped to owner."""
        if not await self.repository.delete(task_id, owner_id):
            raise NotFoundError(task_id)
