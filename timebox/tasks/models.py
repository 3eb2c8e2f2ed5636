"""
TIMEBOX API - Task Models

Internal task model for database operations.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Union
import uuid

from timebox.tasks.enums import TaskPriority, color_for_category


# Legacy documents may hold ISO strings, garbage or nothing instead of datetimes.
Timestamp = Union[datetime, str, None]


def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _coerce_timestamp(value):
    """Return a datetime for ISO strings; anything unparseable is kept raw."""
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


def coerce_priority(value) -> Union[TaskPriority, str]:
    """Known levels become TaskPriority; legacy values are kept as text."""
    try:
        return TaskPriority(value)
    except ValueError:
        return "" if value is None else str(value)


@dataclass
class Task:
    """Task entity for database storage."""

    id: str
    owner_id: str
    title: str
    description: str
    category: str
    priority: Union[TaskPriority, str]
    start_time: Timestamp
    end_time: Timestamp
    color: str
    completed: bool = False
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def create(
        cls,
        owner_id: str,
        title: str,
        description: str,
        category: str,
        priority: TaskPriority,
        start_time: datetime,
        end_time: datetime,
    ) -> "Task":
        """Create a new task with generated ID and category colour."""
        now = _utcnow()
        return cls(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            title=title,
            description=description,
            category=category,
            priority=priority,
            start_time=start_time,
            end_time=end_time,
            color=color_for_category(category),
            completed=False,
            created_at=now,
            updated_at=now,
        )

    @property
    def time_slot(self) -> str:
        """Window as ``"<start> - <end>"``, the format the web client sends."""
        return f"{_isoformat(self.start_time)} - {_isoformat(self.end_time)}"

    def to_dict(self) -> dict:
        """Convert task to dictionary for MongoDB storage."""
        return {
            "_id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "priority": self.priority.value if isinstance(self.priority, TaskPriority) else self.priority,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "color": self.color,
            "completed": self.completed,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create task from MongoDB document."""
        category = data.get("category") or ""
        return cls(
            id=data["_id"],
            owner_id=data["owner_id"],
            title=data["title"],
            description=data.get("description") or "",
            category=category,
            priority=coerce_priority(data.get("priority")),
            start_time=_coerce_timestamp(data.get("start_time")),
            end_time=_coerce_timestamp(data.get("end_time")),
            color=data.get("color") or color_for_category(category),
            completed=bool(data.get("completed", False)),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )


def _isoformat(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return str(value)
