from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import HTTPException

from autoschedule.api.tasks import create_task, delete_task, get_task, list_tasks, update_task
from autoschedule.core.exceptions import NotFoundError, ValidationError
from autoschedule.models.task import Task, TaskCreate, TaskUpdate

NOW = datetime(2024, 1, 8, 9, 0, tzinfo=timezone.utc)


def _make_task(title: str = "Task") -> Task:
    return Task(id=uuid4(), user_id="owner-user", title=title, created_at=NOW, updated_at=NOW)


@pytest.mark.asyncio
async def test_create_task_uses_current_user() -> None:
    user = SimpleNamespace(id="owner-user")
    repo = AsyncMock()
    repo.create.return_value = _make_task("New")
    payload = TaskCreate(title="New")

    result = await create_task(task=payload, user=user, repo=repo)

    assert result.title == "New"
    repo.create.assert_awaited_once_with("owner-user", payload)


@pytest.mark.asyncio
async def test_list_tasks_passes_filters() -> None:
    user = SimpleNamespace(id="owner-user")
    repo = AsyncMock()
    repo.list.return_value = [_make_task()]

    result = await list_tasks(
        user=user, repo=repo, include_completed=True, scheduled_only=False, limit=10, offset=5
    )

    assert len(result) == 1
    repo.list.assert_awaited_once_with(
        "owner-user", include_completed=True, scheduled_only=False, limit=10, offset=5
    )


@pytest.mark.asyncio
async def test_get_task_not_found() -> None:
    repo = AsyncMock()
    repo.get.return_value = None

    with pytest.raises(HTTPException) as exc_info:
        await get_task(task_id=uuid4(), user=SimpleNamespace(id="owner-user"), repo=repo)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_update_task_maps_domain_errors() -> None:
    user = SimpleNamespace(id="owner-user")
    repo = AsyncMock()

    repo.update.side_effect = NotFoundError("Task not found")
    with pytest.raises(HTTPException) as exc_info:
        await update_task(task_id=uuid4(), update=TaskUpdate(title="x"), user=user, repo=repo)
    assert exc_info.value.status_code == 404

    repo.update.side_effect = ValidationError("start_time and end_time must be set together")
    with pytest.raises(HTTPException) as exc_info:
        await update_task(task_id=uuid4(), update=TaskUpdate(start_time=NOW), user=user, repo=repo)
    assert exc_info.value.status_code == 422


@pytest.mark.asyncio
async def test_delete_missing_task_returns_404() -> None:
    repo = AsyncMock()
    repo.delete.return_value = False

    with pytest.raises(HTTPException) as exc_info:
        await delete_task(task_id=uuid4(), user=SimpleNamespace(id="owner-user"), repo=repo)

    assert exc_info.value.status_code == 404


def test_task_create_requires_both_times() -> None:
    with pytest.raises(ValueError):
        TaskCreate(title="Half", start_time=NOW)
    with pytest.raises(ValueError):
        TaskCreate(title="Inverted", start_time=NOW, end_time=NOW)
