"""
Slot finder for flexible-time tasks.

Walks forward from a reference time in slot-sized steps and returns the first
start where a task fits inside business hours, outside lunch, and clear of
every occupied interval.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from autoschedule.core.logger import setup_logger
from autoschedule.models.schedule import OccupiedInterval
from autoschedule.utils.business_hours import (
    DEFAULT_WINDOW,
    WorkWindow,
    clamp_to_business_window,
    crosses_lunch,
    is_lunch_time,
    is_within_business_hours,
    lunch_end,
    minutes_until_business_end,
    round_up_to_slot,
)
from autoschedule.utils.datetime_utils import to_local_datetime

logger = setup_logger(__name__)


@dataclass(frozen=True)
class SlotMatch:
    """A found slot; effective_minutes may be shorter than requested near business end."""

    start: datetime
    effective_minutes: int
    requested_minutes: int

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.effective_minutes)

    @property
    def capped(self) -> bool:
        return self.effective_minutes < self.requested_minutes


class SlotFinder:
    """
    Deterministic first-fit search over the business calendar.

    The search is bounded by search_days calendar days counted from the first
    candidate; exhausting the horizon is a normal outcome and returns None.
    """

    def __init__(
        self,
        window: WorkWindow = DEFAULT_WINDOW,
        search_days: int = 14,
        timezone_name: str = "UTC",
    ):
        self.window = window
        self.search_days = search_days
        self.timezone_name = timezone_name

    @classmethod
    def from_settings(cls, settings) -> "SlotFinder":
        return cls(
            window=WorkWindow.from_settings(settings),
            search_days=settings.SLOT_SEARCH_DAYS,
            timezone_name=settings.SCHEDULE_TIMEZONE,
        )

    def find_slot(
        self,
        after: datetime,
        duration_minutes: int,
        occupied: Iterable[OccupiedInterval],
    ) -> Optional[datetime]:
        """Return the start of the first free slot at or after `after`, or None."""
        match = self.find_slot_match(after, duration_minutes, occupied)
        return match.start if match else None

    def find_slot_match(
        self,
        after: datetime,
        duration_minutes: int,
        occupied: Iterable[OccupiedInterval],
    ) -> Optional[SlotMatch]:
        """
        Find the first free slot at or after `after`.

        Args:
            after: Earliest acceptable start
            duration_minutes: Requested length, must be positive
            occupied: Current commitments; invalid intervals are ignored

        Returns:
            SlotMatch with the start and the (possibly capped) length, or None
            when nothing fits within the search horizon
        """
        if duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")

        blocked = [
            (
                to_local_datetime(interval.start, self.timezone_name),
                to_local_datetime(interval.end, self.timezone_name),
            )
            for interval in occupied
            if interval.is_valid
        ]

        candidate = clamp_to_business_window(
            round_up_to_slot(to_local_datetime(after, self.timezone_name), self.window),
            self.window,
        )
        horizon = candidate + timedelta(days=self.search_days)
        step = timedelta(minutes=self.window.slot_minutes)

        while candidate < horizon:
            candidate = clamp_to_business_window(
                round_up_to_slot(candidate, self.window), self.window
            )
            if candidate >= horizon:
                break

            if is_lunch_time(candidate, self.window):
                candidate = lunch_end(candidate, self.window)
                continue

            effective = min(duration_minutes, minutes_until_business_end(candidate, self.window))
            end = candidate + timedelta(minutes=effective)

            if crosses_lunch(candidate, end, self.window):
                candidate = lunch_end(candidate, self.window)
                continue

            blocker_end = next(
                (b_end for b_start, b_end in blocked if candidate < b_end and b_start < end),
                None,
            )
            if blocker_end is not None:
                candidate = blocker_end
                continue

            if effective > 0 and is_within_business_hours(candidate, end, self.window):
                return SlotMatch(
                    start=candidate,
                    effective_minutes=effective,
                    requested_minutes=duration_minutes,
                )

            candidate += step

        logger.info(
            f"No free {duration_minutes}-minute slot within {self.search_days} days "
            f"after {after.isoformat()}"
        )
        return None
