"""
Unit tests for SlotFinder.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from autoschedule.models.schedule import OccupiedInterval
from autoschedule.services.slot_finder import SlotFinder
from autoschedule.utils.business_hours import is_slot_aligned, is_within_business_hours

UTC = timezone.utc


def _dt(day: int, hour: int, minute: int = 0) -> datetime:
    # January 2024: the 8th is a Monday, the 12th a Friday
    return datetime(2024, 1, day, hour, minute, tzinfo=UTC)


def _task(start: datetime, end: datetime, title: str = "task") -> OccupiedInterval:
    return OccupiedInterval(start=start, end=end, title=title, movable=True, task_id=uuid4())


def _event(start, end, title: str = "event") -> OccupiedInterval:
    return OccupiedInterval(start=start, end=end, title=title, movable=False)


@pytest.fixture
def finder() -> SlotFinder:
    return SlotFinder()


def test_rounds_up_to_next_slot(finder):
    assert finder.find_slot(_dt(8, 10, 3), 30, []) == _dt(8, 10, 15)


def test_jumps_past_overlapping_interval(finder):
    occupied = [_event(_dt(8, 10, 0), _dt(8, 10, 45))]
    assert finder.find_slot(_dt(8, 9, 50), 30, occupied) == _dt(8, 10, 45)


def test_blocker_end_off_grid_is_rounded_up(finder):
    occupied = [_event(_dt(8, 9, 0), _dt(8, 9, 50))]
    assert finder.find_slot(_dt(8, 9, 0), 30, occupied) == _dt(8, 10, 0)


def test_skips_lunch(finder):
    assert finder.find_slot(_dt(8, 12, 20), 30, []) == _dt(8, 13, 30)


def test_window_crossing_into_lunch_moves_after_lunch(finder):
    assert finder.find_slot(_dt(8, 12, 15), 30, []) == _dt(8, 13, 30)


def test_task_ending_at_lunch_start_fits(finder):
    assert finder.find_slot(_dt(8, 12, 0), 30, []) == _dt(8, 12, 0)


def test_friday_after_hours_rolls_to_monday(finder):
    assert finder.find_slot(_dt(12, 16, 50), 30, []) == _dt(15, 9, 0)


def test_weekend_start_rolls_to_monday(finder):
    assert finder.find_slot(_dt(13, 10, 0), 60, []) == _dt(15, 9, 0)


def test_before_opening_starts_at_opening(finder):
    assert finder.find_slot(_dt(9, 6, 0), 30, []) == _dt(9, 9, 0)


def test_adjacent_intervals_do_not_block(finder):
    occupied = [_task(_dt(8, 9, 0), _dt(8, 10, 0)), _task(_dt(8, 10, 30), _dt(8, 11, 0))]
    assert finder.find_slot(_dt(8, 9, 0), 30, occupied) == _dt(8, 10, 0)


def test_long_task_near_business_end_is_capped(finder):
    match = finder.find_slot_match(_dt(8, 16, 30), 60, [])

    assert match.start == _dt(8, 16, 30)
    assert match.effective_minutes == 30
    assert match.requested_minutes == 60
    assert match.capped
    assert match.end == _dt(8, 17, 0)


def test_uncapped_match(finder):
    match = finder.find_slot_match(_dt(8, 9, 0), 45, [])

    assert not match.capped
    assert match.end == _dt(8, 9, 45)


def test_invalid_intervals_are_ignored(finder):
    occupied = [
        _event(None, _dt(8, 11, 0)),
        _event(_dt(8, 9, 0), None),
        _event(_dt(8, 11, 0), _dt(8, 9, 0)),
    ]
    assert finder.find_slot(_dt(8, 9, 0), 30, occupied) == _dt(8, 9, 0)


def test_returns_none_when_horizon_exhausted():
    finder = SlotFinder(search_days=3)
    occupied = [_event(_dt(8, 0, 0), _dt(20, 0, 0))]
    assert finder.find_slot(_dt(8, 9, 0), 30, occupied) is None


def test_rejects_non_positive_duration(finder):
    with pytest.raises(ValueError):
        finder.find_slot(_dt(8, 9, 0), 0, [])


def test_is_idempotent(finder):
    occupied = [_task(_dt(8, 9, 0), _dt(8, 11, 20)), _event(_dt(8, 13, 30), _dt(8, 15, 0))]
    first = finder.find_slot_match(_dt(8, 8, 0), 90, occupied)
    second = finder.find_slot_match(_dt(8, 8, 0), 90, occupied)
    assert first == second


def test_naive_reference_is_local_time(finder):
    assert finder.find_slot(datetime(2024, 1, 8, 10, 3), 30, []) == _dt(8, 10, 15)


def test_scheduling_timezone_applies_business_hours_locally():
    finder = SlotFinder(timezone_name="America/New_York")
    # 14:00 UTC is 09:00 in New York (EST, UTC-5)
    start = finder.find_slot(_dt(8, 12, 0), 30, [])
    assert start == _dt(8, 14, 0)
    assert start.hour == 9


def test_consecutive_placements_never_overlap_and_stay_in_hours(finder):
    occupied = [
        _event(_dt(8, 9, 30), _dt(8, 10, 10)),
        _task(_dt(8, 11, 0), _dt(8, 11, 45)),
        _event(_dt(8, 14, 0), _dt(8, 16, 0)),
        _event(_dt(9, 9, 0), _dt(9, 12, 0)),
    ]
    cursor = _dt(8, 8, 55)
    for duration in [30, 45, 15, 60, 90, 30, 120, 15]:
        match = finder.find_slot_match(cursor, duration, occupied)
        assert match is not None
        assert is_slot_aligned(match.start)
        assert is_within_business_hours(match.start, match.end)
        assert not any(interval.overlaps(match.start, match.end) for interval in occupied)
        assert not (match.start < _dt(match.start.day, 13, 30) and _dt(match.start.day, 12, 30) < match.end)
        occupied.append(_task(match.start, match.end))
        cursor = match.end
