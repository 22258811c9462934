"""
Business-hours rules for the auto-scheduler.

Pure functions over wall-clock time: weekday business hours, the lunch block
and slot granularity. Datetimes are evaluated in their own tzinfo, so callers
convert to the scheduling timezone first.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

MINUTES_PER_DAY = 24 * 60


def parse_time_to_minutes(value: str) -> Optional[int]:
    """Parse "HH:MM" into minutes after midnight, or None if malformed."""
    parts = value.split(":")
    if len(parts) != 2:
        return None
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError:
        return None
    if hours < 0 or hours > 23 or minutes < 0 or minutes > 59:
        return None
    return hours * 60 + minutes


@dataclass(frozen=True)
class WorkWindow:
    """Daily scheduling window, in minutes after midnight."""

    start_minutes: int = 9 * 60
    end_minutes: int = 17 * 60
    lunch_start_minutes: int = 12 * 60 + 30
    lunch_end_minutes: int = 13 * 60 + 30
    slot_minutes: int = 15

    def __post_init__(self) -> None:
        if not 0 <= self.start_minutes < self.end_minutes <= MINUTES_PER_DAY:
            raise ValueError("Business hours must satisfy 00:00 <= start < end <= 24:00")
        if not self.lunch_start_minutes <= self.lunch_end_minutes:
            raise ValueError("Lunch must end after it starts")
        if self.slot_minutes <= 0:
            raise ValueError("Slot granularity must be positive")

    @classmethod
    def from_settings(cls, settings) -> "WorkWindow":
        values = {
            "BUSINESS_HOURS_START": parse_time_to_minutes(settings.BUSINESS_HOURS_START),
            "BUSINESS_HOURS_END": parse_time_to_minutes(settings.BUSINESS_HOURS_END),
            "LUNCH_START": parse_time_to_minutes(settings.LUNCH_START),
            "LUNCH_END": parse_time_to_minutes(settings.LUNCH_END),
        }
        invalid = [name for name, minutes in values.items() if minutes is None]
        if invalid:
            raise ValueError(f"Invalid HH:MM value for {', '.join(invalid)}")
        return cls(
            start_minutes=values["BUSINESS_HOURS_START"],
            end_minutes=values["BUSINESS_HOURS_END"],
            lunch_start_minutes=values["LUNCH_START"],
            lunch_end_minutes=values["LUNCH_END"],
            slot_minutes=settings.SLOT_MINUTES,
        )


DEFAULT_WINDOW = WorkWindow()


def minutes_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def at_minutes(moment: datetime, minutes: int) -> datetime:
    """Same calendar day as moment, at the given minute of the day."""
    day_start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return day_start + timedelta(minutes=minutes)


def round_up_to_slot(moment: datetime, window: WorkWindow = DEFAULT_WINDOW) -> datetime:
    """Round up to the next slot boundary; aligned values are returned unchanged."""
    base = moment.replace(second=0, microsecond=0)
    remainder = minutes_of_day(base) % window.slot_minutes
    if remainder == 0 and base == moment:
        return moment
    return base + timedelta(minutes=window.slot_minutes - remainder)


def is_slot_aligned(moment: datetime, window: WorkWindow = DEFAULT_WINDOW) -> bool:
    return (
        moment.second == 0
        and moment.microsecond == 0
        and minutes_of_day(moment) % window.slot_minutes == 0
    )


def is_weekend(moment: datetime) -> bool:
    return moment.weekday() >= 5


def business_start(moment: datetime, window: WorkWindow = DEFAULT_WINDOW) -> datetime:
    return at_minutes(moment, window.start_minutes)


def business_end(moment: datetime, window: WorkWindow = DEFAULT_WINDOW) -> datetime:
    return at_minutes(moment, window.end_minutes)


def lunch_start(moment: datetime, window: WorkWindow = DEFAULT_WINDOW) -> datetime:
    return at_minutes(moment, window.lunch_start_minutes)


def lunch_end(moment: datetime, window: WorkWindow = DEFAULT_WINDOW) -> datetime:
    return at_minutes(moment, window.lunch_end_minutes)


def next_business_day_start(moment: datetime, window: WorkWindow = DEFAULT_WINDOW) -> datetime:
    """Business start of the first weekday strictly after moment's day."""
    day = moment + timedelta(days=1)
    while is_weekend(day):
        day += timedelta(days=1)
    return business_start(day, window)


def clamp_to_business_window(moment: datetime, window: WorkWindow = DEFAULT_WINDOW) -> datetime:
    """
    Move moment into business hours.

    Before opening -> opening of the same day; at/after closing or on a
    weekend -> opening of the next weekday. Lunch is not handled here.
    """
    if is_weekend(moment) or minutes_of_day(moment) >= window.end_minutes:
        return next_business_day_start(moment, window)
    if minutes_of_day(moment) < window.start_minutes:
        return business_start(moment, window)
    return moment


def is_lunch_time(moment: datetime, window: WorkWindow = DEFAULT_WINDOW) -> bool:
    return window.lunch_start_minutes <= minutes_of_day(moment) < window.lunch_end_minutes


def crosses_lunch(start: datetime, end: datetime, window: WorkWindow = DEFAULT_WINDOW) -> bool:
    """True when [start, end) touches the lunch block of start's day."""
    if window.lunch_start_minutes == window.lunch_end_minutes:
        return False
    return start < lunch_end(start, window) and lunch_start(start, window) < end


def minutes_until_business_end(moment: datetime, window: WorkWindow = DEFAULT_WINDOW) -> int:
    remaining = business_end(moment, window) - moment
    return max(0, int(remaining.total_seconds() // 60))


def is_within_business_hours(
    start: datetime,
    end: Optional[datetime] = None,
    window: WorkWindow = DEFAULT_WINDOW,
) -> bool:
    """
    Check that start falls on a weekday inside business hours and, when end is
    given, that the window closes no later than business end of the same day.
    """
    if is_weekend(start):
        return False
    start_minutes = minutes_of_day(start)
    if not window.start_minutes <= start_minutes < window.end_minutes:
        return False
    if end is None:
        return True
    return start < end <= business_end(start, window)
