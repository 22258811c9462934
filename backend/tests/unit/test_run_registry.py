from datetime import date, datetime, timezone
from uuid import uuid4

import pytest

from autoschedule.core.exceptions import BusinessLogicError, NotFoundError
from autoschedule.models.enums import ScheduleMode
from autoschedule.services.run_registry import ScheduleRunRegistry
from autoschedule.services.schedule_run import ScheduleRun

NOW = datetime(2024, 1, 8, 9, 0, tzinfo=timezone.utc)


def _run(user_id: str = "u1") -> ScheduleRun:
    return ScheduleRun(user_id=user_id, mode=ScheduleMode.TODAY, now=NOW, target_date=date(2024, 1, 8))


def test_second_active_run_is_rejected():
    registry = ScheduleRunRegistry()
    registry.claim(_run())

    with pytest.raises(BusinessLogicError):
        registry.claim(_run())


def test_new_run_allowed_after_completion():
    registry = ScheduleRunRegistry()
    first = _run()
    registry.claim(first)
    first.completed = True

    second = _run()
    registry.claim(second)

    assert registry.current("u1") is second


def test_runs_are_per_user():
    registry = ScheduleRunRegistry()
    registry.claim(_run("u1"))
    registry.claim(_run("u2"))

    assert registry.current("u2").user_id == "u2"


def test_get_checks_owner_and_id():
    registry = ScheduleRunRegistry()
    run = _run("u1")
    registry.claim(run)

    assert registry.get("u1", run.run_id) is run
    with pytest.raises(NotFoundError):
        registry.get("u2", run.run_id)
    with pytest.raises(NotFoundError):
        registry.get("u1", uuid4())
