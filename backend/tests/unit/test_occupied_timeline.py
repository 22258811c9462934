from datetime import datetime, timezone
from uuid import uuid4

from autoschedule.models.calendar import ExternalEvent
from autoschedule.models.schedule import OccupiedInterval
from autoschedule.models.task import Task
from autoschedule.services.occupied_timeline import (
    OccupiedTimeline,
    interval_from_event,
    interval_from_task,
)

UTC = timezone.utc


def _dt(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 1, 8, hour, minute, tzinfo=UTC)


def _task(start, end) -> Task:
    return Task(
        id=uuid4(),
        user_id="u1",
        title="Existing",
        start_time=start,
        end_time=end,
        created_at=_dt(8),
        updated_at=_dt(8),
    )


def test_mutations_bump_version():
    timeline = OccupiedTimeline()
    interval = OccupiedInterval(start=_dt(9), end=_dt(10), movable=False)

    assert timeline.version == 0
    assert timeline.add(interval) == 1
    assert timeline.remove(interval) is True
    assert timeline.version == 2
    assert timeline.remove(interval) is False
    assert timeline.version == 2


def test_intervals_excludes_invalid_entries():
    valid = OccupiedInterval(start=_dt(9), end=_dt(10), movable=False)
    missing_end = OccupiedInterval(start=_dt(11), end=None, movable=False)
    timeline = OccupiedTimeline([valid, missing_end])

    assert timeline.intervals() == [valid]
    assert len(timeline.snapshot()) == 2


def test_find_and_remove_task():
    task_id = uuid4()
    owned = OccupiedInterval(start=_dt(9), end=_dt(10), movable=True, task_id=task_id)
    timeline = OccupiedTimeline([owned, OccupiedInterval(start=_dt(11), end=_dt(12), movable=False)])

    assert timeline.find_task(task_id) is owned
    assert timeline.find_matching(_dt(9), _dt(10)) is owned
    assert timeline.remove_task(task_id) == [owned]
    assert timeline.find_task(task_id) is None
    assert len(timeline) == 1


def test_interval_from_task_converts_to_scheduling_timezone():
    task = _task(_dt(14), _dt(15))

    interval = interval_from_task(task, "Asia/Tokyo")

    assert interval.movable
    assert interval.task_id == task.id
    assert interval.start.hour == 23
    assert interval.start == _dt(14)


def test_interval_from_event_is_immovable_and_tolerates_missing_times():
    event = ExternalEvent(calendar_id="work", title="All hands", start_time=None, end_time=_dt(10))

    interval = interval_from_event(event, "UTC")

    assert not interval.movable
    assert interval.start is None
    assert not interval.is_valid
