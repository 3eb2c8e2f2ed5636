"""
TIMEBOX API - Task Enums

Enums for task-related fields.
"""

from enum import Enum


class TaskPriority(str, Enum):
    """Task priority levels."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskCategory(str, Enum):
    """Known task categories. Other category strings are stored as given."""
    WORK = "work"
    HEALTH = "health"
    LEARNING = "learning"
    PERSONAL = "personal"
    FINANCE = "finance"
    TRAVEL = "travel"


class TaskBucket(str, Enum):
    """Board group a task is classified into."""
    TODAY = "today"
    OVERDUE = "overdue"
    UPCOMING = "upcoming"


DEFAULT_COLOR = "gray"

CATEGORY_COLORS: dict[str, str] = {
    TaskCategory.WORK.value: "blue",
    TaskCategory.HEALTH.value: "purple",
    TaskCategory.LEARNING.value: "teal",
    TaskCategory.PERSONAL.value: "pink",
    TaskCategory.FINANCE.value: "green",
    TaskCategory.TRAVEL.value: "yellow",
}


def color_for_category(category: str) -> str:
    """Colour assigned to a new task of the given category."""
    return CATEGORY_COLORS.get(category, DEFAULT_COLOR)
