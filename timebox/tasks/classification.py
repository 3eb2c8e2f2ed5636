"""
TIMEBOX API - Task Classification

Partitions an owner's tasks into today / overdue / upcoming groups.

Rules, evaluated in this order:
- OVERDUE: end_time < now (strict). overdue_days is the number of whole
  days elapsed since end_time, truncated.
- TODAY: start_time falls on the same calendar day as now in the display
  time zone.
- UPCOMING: everything else, including windows that began on an earlier
  day and have not ended yet.

The partition is stable: each group keeps the input order. Tasks whose
timestamps cannot be parsed are left out of every group and reported in
``skipped``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import Iterable, List, Optional, Tuple

from timebox.tasks.enums import TaskBucket
from timebox.tasks.errors import ParseError
from timebox.tasks.models import Task
from timebox.tasks.timeslots import ONE_DAY, local_day, parse_instant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifiedTask:
    """A task together with its derived board fields."""

    task: Task
    bucket: TaskBucket
    overdue_days: Optional[int] = None


@dataclass
class TaskBoard:
    """Result of classifying one owner's tasks."""

    today: List[ClassifiedTask] = field(default_factory=list)
    overdue: List[ClassifiedTask] = field(default_factory=list)
    upcoming: List[ClassifiedTask] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.today) + len(self.overdue) + len(self.upcoming)

    def group(self, bucket: TaskBucket) -> List[ClassifiedTask]:
        return getattr(self, bucket.value)


def overdue_days(end: datetime, now: datetime) -> int:
    """Whole days elapsed since ``end``; 0 for anything under a day late."""
    return (now - end) // ONE_DAY


def classify_task(task: Task, now: datetime, tz: tzinfo = timezone.utc) -> Tuple[TaskBucket, Optional[int]]:
    """
    Bucket a single task. Raises ParseError if its window is unreadable.
    """
    start = parse_instant(task.start_time)
    end = parse_instant(task.end_time)
    now = parse_instant(now)

    if end < now:
        return TaskBucket.OVERDUE, overdue_days(end, now)

    if local_day(start, tz) == local_day(now, tz):
        return TaskBucket.TODAY, None

    return TaskBucket.UPCOMING, None


def classify_tasks(
    tasks: Iterable[Task],
    now: datetime,
    tz: tzinfo = timezone.utc,
) -> TaskBoard:
    """Classify a snapshot of tasks against ``now``. Inputs are not modified."""
    board = TaskBoard()

    for task in tasks:
        try:
            bucket, days = classify_task(task, now, tz)
        except ParseError as e:
            logger.warning("Skipping task %s during classification: %s", task.id, e)
            board.skipped.append(task.id)
            continue

        board.group(bucket).append(ClassifiedTask(task=task, bucket=bucket, overdue_days=days))

    return board
