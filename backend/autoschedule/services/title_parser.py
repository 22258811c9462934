"""
Regex-based task title parser.

Recognizes duration ("for 2 hours", "45 min", "1.5h"), weekday ("on friday",
"tue") and time-of-day ("at 3pm", "at 14:30", "3 o'clock") hints. Each hint is
removed from the title so the cleaned title can be stored back on the task.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Optional

from autoschedule.interfaces.title_parser import ITitleParser
from autoschedule.models.schedule import ParsedTitle

_UNIT = r"(?P<unit>hours?|hrs?|minutes?|mins?|h)"
_VALUE = r"(?P<value>\d+(?:\.\d+)?)"

DURATION_PATTERNS = [
    re.compile(rf"\bfor\s+{_VALUE}\s*{_UNIT}\b", re.IGNORECASE),
    re.compile(rf"\b{_VALUE}\s*{_UNIT}(?:\s*(?:long|duration))?\b", re.IGNORECASE),
]

_DAY_NAMES = r"monday|tuesday|wednesday|thursday|friday|saturday|sunday"
_DAY_ABBREVIATIONS = r"mon|tue|wed|thu|fri|sat|sun"

DAY_PATTERNS = [
    re.compile(rf"\bon\s+({_DAY_NAMES})\b", re.IGNORECASE),
    re.compile(rf"\b({_DAY_NAMES})\b", re.IGNORECASE),
    re.compile(rf"\bon\s+({_DAY_ABBREVIATIONS})\b", re.IGNORECASE),
    re.compile(rf"\b({_DAY_ABBREVIATIONS})\b", re.IGNORECASE),
]

# Python weekday numbering (Monday = 0)
WEEKDAYS = {
    "monday": 0, "mon": 0,
    "tuesday": 1, "tue": 1,
    "wednesday": 2, "wed": 2,
    "thursday": 3, "thu": 3,
    "friday": 4, "fri": 4,
    "saturday": 5, "sat": 5,
    "sunday": 6, "sun": 6,
}

TIME_PATTERNS = [
    re.compile(r"\bat\s+(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b", re.IGNORECASE),
    re.compile(r"\bat\s+(\d{1,2})\s*o['’]?clock\b", re.IGNORECASE),
    re.compile(r"\bat\s+(\d{1,2})(?::(\d{2}))?\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,2})\s*o['’]?clock\b", re.IGNORECASE),
]

_LEADING_PREPOSITION = re.compile(r"^(at|on|for|of)\s+", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def _remove(title: str, match: re.Match) -> str:
    cleaned = title[: match.start()] + title[match.end():]
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    return _LEADING_PREPOSITION.sub("", cleaned).strip()


def _group(match: re.Match, index: int) -> Optional[str]:
    if index > match.re.groups:
        return None
    return match.group(index)


def parse_duration(title: str) -> tuple[Optional[int], str]:
    """Duration hint in minutes and the title without it."""
    for pattern in DURATION_PATTERNS:
        match = pattern.search(title)
        if not match:
            continue
        value = float(match.group("value"))
        if value <= 0:
            continue
        unit = match.group("unit").lower()
        minutes = value * 60 if unit.startswith("h") else value
        minutes = int(round(minutes))
        if minutes <= 0:
            continue
        return minutes, _remove(title, match)
    return None, title


def parse_day(title: str, reference: datetime) -> tuple[Optional[date], str]:
    """
    Weekday hint resolved against reference.

    Today's weekday, or one already past this week, means next week.
    """
    for pattern in DAY_PATTERNS:
        match = pattern.search(title)
        if not match:
            continue
        target = WEEKDAYS.get(match.group(1).lower())
        if target is None:
            continue
        days_ahead = target - reference.weekday()
        if days_ahead <= 0:
            days_ahead += 7
        return (reference + timedelta(days=days_ahead)).date(), _remove(title, match)
    return None, title


def parse_time_of_day(title: str) -> tuple[Optional[time], str]:
    """Time-of-day hint; bare "at H" is read as 24-hour time."""
    for pattern in TIME_PATTERNS:
        match = pattern.search(title)
        if not match:
            continue
        hours = int(match.group(1))
        minutes_text = _group(match, 2)
        minutes = int(minutes_text) if minutes_text else 0
        meridiem = (_group(match, 3) or "").lower()
        if meridiem == "pm" and hours != 12:
            hours += 12
        elif meridiem == "am" and hours == 12:
            hours = 0
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return time(hours, minutes), _remove(title, match)
    return None, title


class RegexTitleParser(ITitleParser):
    """Title parser using fixed English patterns."""

    async def parse(self, title: str, reference: datetime) -> ParsedTitle:
        return self.parse_sync(title, reference)

    def parse_sync(self, title: str, reference: datetime) -> ParsedTitle:
        working = title
        duration, working = parse_duration(working)
        day, working = parse_day(working, reference)
        time_of_day, working = parse_time_of_day(working)

        specified_time = None
        if time_of_day is not None:
            base_day = day or reference.date()
            specified_time = datetime.combine(base_day, time_of_day, tzinfo=reference.tzinfo)

        return ParsedTitle(
            clean_title=working or title,
            has_time_specification=specified_time is not None,
            specified_time=specified_time,
            has_day_specification=day is not None,
            specified_day=day,
            has_duration_specification=duration is not None,
            specified_duration=duration,
        )
