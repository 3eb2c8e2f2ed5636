"""
TIMEBOX API - Time Slots

Timestamp parsing and calendar-day helpers shared by classification,
renewal and the time-slot label shown on task cards.
"""

from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Tuple

from timebox.tasks.errors import ParseError


ONE_DAY = timedelta(days=1)
DEFAULT_RENEW_DURATION = timedelta(hours=1)
TIME_SLOT_SEPARATOR = " - "


def parse_instant(value) -> datetime:
    """
    Interpret a stored timestamp as a timezone-aware instant.

    Accepts datetimes and ISO-8601 strings (a trailing ``Z`` is UTC).
    Naive values are taken as UTC. Raises ParseError for anything else.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise ParseError(value) from e
    else:
        raise ParseError(value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def local_day(instant: datetime, tz: tzinfo):
    """Calendar day of an aware instant in the given zone."""
    return instant.astimezone(tz).date()


def end_of_day(instant: datetime, tz: tzinfo) -> datetime:
    """Last representable instant of the calendar day containing ``instant``."""
    next_midnight = datetime.combine(local_day(instant, tz) + ONE_DAY, time.min, tzinfo=tz)
    return next_midnight - timedelta(microseconds=1)


def renew_window(
    start,
    end,
    now: datetime,
    tz: tzinfo,
) -> Tuple[datetime, datetime]:
    """
    Window for a renewed task: starts at ``now`` and keeps the original
    duration, clamped to end on the same calendar day as ``now``.
    """
    try:
        duration = parse_instant(end) - parse_instant(start)
    except ParseError:
        duration = DEFAULT_RENEW_DURATION
    if duration <= timedelta(0):
        duration = DEFAULT_RENEW_DURATION

    now = parse_instant(now)
    new_end = min(now + duration, end_of_day(now, tz))
    # Window stays non-empty when renewed at the last instant of the day
    new_end = max(new_end, now + timedelta(microseconds=1))
    return now.astimezone(timezone.utc), new_end.astimezone(timezone.utc)


def _clock_label(instant: datetime) -> str:
    hour = instant.hour
    suffix = "PM" if hour >= 12 else "AM"
    hour12 = 12 if hour == 0 else hour - 12 if hour > 12 else hour
    return f"{hour12}:{instant.minute:02d}{suffix}"


def format_window(start: datetime, end: datetime, now: datetime, tz: tzinfo) -> str:
    """
    Human label for a window.

    "Today", "Tomorrow" or "Yesterday" when both ends fall on that day,
    otherwise "M-D (h:mmAM) to M-D (h:mmPM)" in the display zone.
    """
    start = parse_instant(start).astimezone(tz)
    end = parse_instant(end).astimezone(tz)
    today = local_day(parse_instant(now), tz)

    for label, day in (
        ("Today", today),
        ("Tomorrow", today + ONE_DAY),
        ("Yesterday", today - ONE_DAY),
    ):
        if start.date() == day and end.date() == day:
            return label

    return (
        f"{start.month}-{start.day} ({_clock_label(start)}) to "
        f"{end.month}-{end.day} ({_clock_label(end)})"
    )


def format_time_slot(time_slot: str, now: datetime, tz: tzinfo) -> str:
    """Label a ``"<start> - <end>"`` slot; malformed input is returned unchanged."""
    parts = time_slot.split(TIME_SLOT_SEPARATOR)
    if len(parts) != 2:
        return time_slot
    try:
        return format_window(parts[0], parts[1], now, tz)
    except ParseError:
        return time_slot


def split_time_slot(time_slot: str) -> Optional[Tuple[datetime, datetime]]:
    """Parse a ``"<start> - <end>"`` slot into instants, or None if malformed."""
    parts = time_slot.split(TIME_SLOT_SEPARATOR)
    if len(parts) != 2:
        return None
    try:
        return parse_instant(parts[0]), parse_instant(parts[1])
    except ParseError:
        return None
