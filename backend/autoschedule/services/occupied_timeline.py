"""
Occupied timeline for a single scheduling run.

The timeline is the run's working view of every commitment: stored tasks
(movable) and external calendar events (immovable). Only the owning run
mutates it; every mutation bumps the version.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from autoschedule.models.calendar import ExternalEvent
from autoschedule.models.schedule import OccupiedInterval
from autoschedule.models.task import Task
from autoschedule.utils.datetime_utils import coerce_datetime, to_local_datetime


def _local(value: Optional[datetime], timezone_name: str) -> Optional[datetime]:
    value = coerce_datetime(value)
    if value is None:
        return None
    return to_local_datetime(value, timezone_name)


def interval_from_task(task: Task, timezone_name: str) -> OccupiedInterval:
    return OccupiedInterval(
        start=_local(task.start_time, timezone_name),
        end=_local(task.end_time, timezone_name),
        title=task.title,
        movable=True,
        task_id=task.id,
    )


def interval_from_event(event: ExternalEvent, timezone_name: str) -> OccupiedInterval:
    return OccupiedInterval(
        start=_local(event.start_time, timezone_name),
        end=_local(event.end_time, timezone_name),
        title=event.title,
        movable=False,
    )


class OccupiedTimeline:
    """Versioned set of occupied intervals owned by one run."""

    def __init__(self, intervals: Iterable[OccupiedInterval] = ()):
        self._intervals: list[OccupiedInterval] = list(intervals)
        self._version = 0

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return len(self._intervals)

    def intervals(self) -> list[OccupiedInterval]:
        """Valid intervals only; malformed entries are kept but never checked."""
        return [interval for interval in self._intervals if interval.is_valid]

    def snapshot(self) -> list[OccupiedInterval]:
        return list(self._intervals)

    def add(self, interval: OccupiedInterval) -> int:
        self._intervals.append(interval)
        self._version += 1
        return self._version

    def remove(self, interval: OccupiedInterval) -> bool:
        for index, existing in enumerate(self._intervals):
            if existing is interval:
                del self._intervals[index]
                self._version += 1
                return True
        return False

    def find_task(self, task_id: UUID) -> Optional[OccupiedInterval]:
        for interval in self._intervals:
            if interval.task_id == task_id:
                return interval
        return None

    def find_matching(self, start: datetime, end: datetime) -> Optional[OccupiedInterval]:
        """Movable interval with exactly these bounds, for conflicts that lost their task_id."""
        for interval in self._intervals:
            if interval.movable and interval.start == start and interval.end == end:
                return interval
        return None

    def remove_task(self, task_id: UUID) -> list[OccupiedInterval]:
        removed = [i for i in self._intervals if i.task_id == task_id]
        if removed:
            self._intervals = [i for i in self._intervals if i.task_id != task_id]
            self._version += 1
        return removed
