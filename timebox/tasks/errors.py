"""
TIMEBOX API - Task Errors

Domain exceptions raised by the task service and classification engine.
Routers translate them to HTTP responses.
"""

from typing import Any


class TaskError(Exception):
    """Base class for task domain errors."""


class ValidationError(TaskError):
    """Missing or malformed input for a specific field."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(TaskError):
    """No task with this id exists for the owner."""

    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class ParseError(TaskError):
    """A stored timestamp cannot be interpreted as an instant."""

    def __init__(self, value: Any):
        super().__init__(f"Cannot parse timestamp: {value!r}")
        self.value = value
