"""
Conflict detection for specific-time tasks.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable

from autoschedule.models.schedule import OccupiedInterval


@dataclass
class ConflictPartition:
    """Overlapping intervals split by whether the scheduler may move them."""

    movable: list[OccupiedInterval] = field(default_factory=list)
    immovable: list[OccupiedInterval] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.movable or self.immovable)


def detect_conflicts(
    specified_time: datetime,
    duration_minutes: int,
    occupied: Iterable[OccupiedInterval],
) -> ConflictPartition:
    """
    Find every valid interval overlapping [specified_time, specified_time + duration).

    Intervals that only touch at an endpoint do not conflict.
    """
    end = specified_time + timedelta(minutes=duration_minutes)
    partition = ConflictPartition()
    for interval in occupied:
        if not interval.overlaps(specified_time, end):
            continue
        if interval.movable:
            partition.movable.append(interval)
        else:
            partition.immovable.append(interval)
    return partition
