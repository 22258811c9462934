"""
Unit tests for Task repository.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from autoschedule.core.exceptions import NotFoundError, ValidationError
from autoschedule.infrastructure.local.task_repository import SqliteTaskRepository
from autoschedule.models.task import TaskCreate, TaskUpdate

UTC = timezone.utc
START = datetime(2024, 1, 8, 10, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_create_task(session_factory, test_user_id):
    """Test creating a task."""
    repo = SqliteTaskRepository(session_factory=session_factory)

    task = await repo.create(test_user_id, TaskCreate(title="Test Task", notes="Some notes"))

    assert task.id is not None
    assert task.title == "Test Task"
    assert task.notes == "Some notes"
    assert task.user_id == test_user_id
    assert not task.is_scheduled
    assert task.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_get_task(session_factory, test_user_id):
    """Test getting a task by ID."""
    repo = SqliteTaskRepository(session_factory=session_factory)
    created = await repo.create(test_user_id, TaskCreate(title="Test Task"))

    retrieved = await repo.get(test_user_id, created.id)

    assert retrieved is not None
    assert retrieved.id == created.id
    assert retrieved.title == "Test Task"


@pytest.mark.asyncio
async def test_get_task_is_user_scoped(session_factory, test_user_id):
    repo = SqliteTaskRepository(session_factory=session_factory)
    created = await repo.create(test_user_id, TaskCreate(title="Private"))

    assert await repo.get("someone_else", created.id) is None


@pytest.mark.asyncio
async def test_times_round_trip_as_utc(session_factory, test_user_id):
    repo = SqliteTaskRepository(session_factory=session_factory)
    tokyo = timezone(timedelta(hours=9))
    start = datetime(2024, 1, 8, 19, 0, tzinfo=tokyo)

    created = await repo.create(
        test_user_id,
        TaskCreate(title="Call", start_time=start, end_time=start + timedelta(minutes=30)),
    )
    retrieved = await repo.get(test_user_id, created.id)

    assert retrieved.start_time == start
    assert retrieved.start_time.tzinfo == UTC
    assert retrieved.start_time.hour == 10


@pytest.mark.asyncio
async def test_list_tasks_orders_scheduled_first(session_factory, test_user_id):
    """Test listing tasks."""
    repo = SqliteTaskRepository(session_factory=session_factory)
    await repo.create(test_user_id, TaskCreate(title="Unscheduled"))
    await repo.create(
        test_user_id,
        TaskCreate(title="Later", start_time=START + timedelta(hours=2), end_time=START + timedelta(hours=3)),
    )
    await repo.create(
        test_user_id,
        TaskCreate(title="Earlier", start_time=START, end_time=START + timedelta(hours=1)),
    )
    await repo.create("other_user", TaskCreate(title="Not mine"))

    tasks = await repo.list(test_user_id)

    assert [t.title for t in tasks] == ["Earlier", "Later", "Unscheduled"]
    assert all(task.user_id == test_user_id for task in tasks)


@pytest.mark.asyncio
async def test_list_filters(session_factory, test_user_id):
    repo = SqliteTaskRepository(session_factory=session_factory)
    scheduled = await repo.create(
        test_user_id, TaskCreate(title="Scheduled", start_time=START, end_time=START + timedelta(hours=1))
    )
    await repo.create(test_user_id, TaskCreate(title="Floating"))
    await repo.update(test_user_id, scheduled.id, TaskUpdate(completed_at=START))

    assert [t.title for t in await repo.list(test_user_id)] == ["Floating"]
    assert [t.title for t in await repo.list(test_user_id, include_completed=True, scheduled_only=True)] == [
        "Scheduled"
    ]


@pytest.mark.asyncio
async def test_update_sets_schedule_and_title(session_factory, test_user_id):
    repo = SqliteTaskRepository(session_factory=session_factory)
    created = await repo.create(test_user_id, TaskCreate(title="Call client at 2pm"))

    updated = await repo.update(
        test_user_id,
        created.id,
        TaskUpdate(title="Call client", start_time=START, end_time=START + timedelta(hours=1)),
    )

    assert updated.title == "Call client"
    assert updated.start_time == START
    assert updated.end_time == START + timedelta(hours=1)


@pytest.mark.asyncio
async def test_update_with_explicit_none_clears_times(session_factory, test_user_id):
    repo = SqliteTaskRepository(session_factory=session_factory)
    created = await repo.create(
        test_user_id, TaskCreate(title="Overdue", start_time=START, end_time=START + timedelta(hours=1))
    )

    updated = await repo.update(test_user_id, created.id, TaskUpdate(start_time=None, end_time=None))

    assert updated.start_time is None
    assert updated.end_time is None
    assert updated.title == "Overdue"


@pytest.mark.asyncio
async def test_update_rejects_half_scheduled_task(session_factory, test_user_id):
    repo = SqliteTaskRepository(session_factory=session_factory)
    created = await repo.create(test_user_id, TaskCreate(title="Task"))

    with pytest.raises(ValidationError):
        await repo.update(test_user_id, created.id, TaskUpdate(start_time=START))

    assert (await repo.get(test_user_id, created.id)).start_time is None


@pytest.mark.asyncio
async def test_update_missing_task_raises(session_factory, test_user_id):
    repo = SqliteTaskRepository(session_factory=session_factory)

    with pytest.raises(NotFoundError):
        await repo.update(test_user_id, uuid4(), TaskUpdate(title="Nope"))


@pytest.mark.asyncio
async def test_delete_task(session_factory, test_user_id):
    repo = SqliteTaskRepository(session_factory=session_factory)
    created = await repo.create(test_user_id, TaskCreate(title="Temp"))

    assert await repo.delete(test_user_id, created.id) is True
    assert await repo.get(test_user_id, created.id) is None
    assert await repo.delete(test_user_id, created.id) is False


@pytest.mark.asyncio
async def test_list_scheduled_between_returns_overlapping_tasks(session_factory, test_user_id):
    repo = SqliteTaskRepository(session_factory=session_factory)
    before = await repo.create(
        test_user_id,
        TaskCreate(title="Before", start_time=START - timedelta(hours=2), end_time=START - timedelta(hours=1)),
    )
    straddling = await repo.create(
        test_user_id,
        TaskCreate(title="Straddling", start_time=START - timedelta(minutes=30), end_time=START + timedelta(minutes=30)),
    )
    done = await repo.create(
        test_user_id,
        TaskCreate(title="Done", start_time=START + timedelta(hours=1), end_time=START + timedelta(hours=2)),
    )
    await repo.update(test_user_id, done.id, TaskUpdate(completed_at=START))
    await repo.create(
        test_user_id,
        TaskCreate(title="Touching end", start_time=START + timedelta(hours=4), end_time=START + timedelta(hours=5)),
    )
    await repo.create(test_user_id, TaskCreate(title="Floating"))
    await repo.create(
        "someone_else",
        TaskCreate(title="Other user", start_time=START, end_time=START + timedelta(hours=1)),
    )

    tasks = await repo.list_scheduled_between(test_user_id, START, START + timedelta(hours=4))

    assert [t.title for t in tasks] == ["Straddling", "Done"]
    assert before.id not in {t.id for t in tasks}
    assert straddling.id in {t.id for t in tasks}
