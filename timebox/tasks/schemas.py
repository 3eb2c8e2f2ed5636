"""
TIMEBOX API - Task Schemas

Pydantic models for task API requests and responses.
"""

from datetime import datetime
from typing import Optional, List, Tuple, Union

from pydantic import BaseModel, Field, StrictBool

from timebox.tasks.enums import TaskPriority
from timebox.tasks.errors import ValidationError
from timebox.tasks.timeslots import split_time_slot


class TaskWriteRequest(BaseModel):
    """
    Fields shared by create and update.

    The window is given either as start_time/end_time or as a single
    ``time_slot`` string "<start ISO> - <end ISO>". Required-field rules
    are enforced by the service so that errors name the offending field.
    """

    title: Optional[str] = Field(default=None, max_length=500, description="Task title")
    category: Optional[str] = Field(default=None, max_length=50, description="Task category")
    priority: Optional[str] = Field(default=None, description="Task priority (high, medium, low)")
    description: Optional[str] = Field(default=None, max_length=5000, description="Task description")
    start_time: Optional[datetime] = Field(default=None, description="Window start")
    end_time: Optional[datetime] = Field(default=None, description="Window end")
    time_slot: Optional[str] = Field(default=None, description='Window as "<start> - <end>"')

    def window(self) -> Tuple[Optional[datetime], Optional[datetime]]:
        """Explicit start/end win over time_slot."""
        if self.start_time is not None or self.end_time is not None or not self.time_slot:
            return self.start_time, self.end_time
        parsed = split_time_slot(self.time_slot)
        if parsed is None:
            raise ValidationError("time_slot", 'Time slot must look like "<start> - <end>"')
        return parsed


class TaskCreateRequest(TaskWriteRequest):
    """Request model for creating a task."""


class TaskUpdateRequest(TaskWriteRequest):
    """Request model for editing a task. Omitting description keeps it."""


class TaskCompleteRequest(BaseModel):
    """Request model for the completion toggle."""

    completed: StrictBool = Field(description="New completion state")


class TaskResponse(BaseModel):
    """Response model for a single task."""

    id: str = Field(description="Task ID")
    owner_id: str = Field(description="Owner user ID")
    title: str = Field(description="Task title")
    description: str = Field(description="Task description")
    category: str = Field(description="Task category")
    priority: Union[TaskPriority, str] = Field(union_mode="left_to_right", description="Task priority; legacy values are passed through")
    start_time: Optional[Union[datetime, str]] = Field(default=None, union_mode="left_to_right", description="Window start, raw when unreadable")
    end_time: Optional[Union[datetime, str]] = Field(default=None, union_mode="left_to_right", description="Window end, raw when unreadable")
    time_slot: str = Field(description='Window as "<start> - <end>"')
    time_slot_label: str = Field(description="Today / Tomorrow / Yesterday or a date range")
    color: str = Field(description="Card colour derived from the category at creation")
    completed: bool = Field(description="Completion flag")
    overdue_days: Optional[int] = Field(default=None, description="Whole days past end_time, overdue tasks only")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")


class TaskBoardResponse(BaseModel):
    """Response model for the classified task board."""

    today: List[TaskResponse] = Field(default_factory=list, description="Tasks starting today")
    overdue: List[TaskResponse] = Field(default_factory=list, description="Tasks whose window has ended")
    upcoming: List[TaskResponse] = Field(default_factory=list, description="All other tasks")
    skipped: List[str] = Field(default_factory=list, description="IDs left out because of unreadable timestamps")
    total: int = Field(default=0, description="Number of classified tasks")
    today_completion: float = Field(default=0.0, description="Percent of today's tasks completed, 0 when none")


class TaskDeleteResponse(BaseModel):
    """Response model for task deletion."""

    message: str = Field(description="Success message")
    id: str = Field(description="Deleted task ID")
