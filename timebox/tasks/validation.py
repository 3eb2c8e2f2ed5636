"""
TIMEBOX API - Task Validation

Field rules shared by task creation and editing.
"""

from datetime import datetime
from typing import Optional

from timebox.tasks.enums import TaskPriority
from timebox.tasks.errors import ParseError, ValidationError
from timebox.tasks.timeslots import parse_instant


def _require_text(field: str, value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValidationError(field, f"{field.capitalize()} is required")
    return value


def validate_priority(value: Optional[str]) -> TaskPriority:
    _require_text("priority", value)
    try:
        return TaskPriority(value.strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in TaskPriority)
        raise ValidationError("priority", f"Priority must be one of: {allowed}")


def validate_window(start, end) -> tuple[datetime, datetime]:
    """Both ends must be instants and start must come strictly before end."""
    if start is None:
        raise ValidationError("start_time", "Start time is required")
    if end is None:
        raise ValidationError("end_time", "End time is required")
    try:
        start_at = parse_instant(start)
    except ParseError:
        raise ValidationError("start_time", "Start time is not a valid timestamp")
    try:
        end_at = parse_instant(end)
    except ParseError:
        raise ValidationError("end_time", "End time is not a valid timestamp")

    if start_at >= end_at:
        raise ValidationError("end_time", "End time must be after start time")
    return start_at, end_at


def validate_task_fields(
    title: Optional[str],
    category: Optional[str],
    priority: Optional[str],
    start_time,
    end_time,
    description: Optional[str] = None,
    require_description: bool = True,
) -> dict:
    """
    Validate create/update input and return normalized field values.

    Raises ValidationError naming the first offending field.
    """
    fields = {
        "title": _require_text("title", title).strip(),
        "category": _require_text("category", category).strip().lower(),
        "priority": validate_priority(priority),
    }

    if require_description or description is not None:
        fields["description"] = _require_text("description", description)

    fields["start_time"], fields["end_time"] = validate_window(start_time, end_time)
    return fields
