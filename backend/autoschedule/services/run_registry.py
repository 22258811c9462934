"""
In-memory registry of scheduling runs.

Keeps the latest run per user and refuses to start a new one while the
previous run is still running or waiting for a conflict decision.
"""

from uuid import UUID

from autoschedule.core.exceptions import BusinessLogicError, NotFoundError
from autoschedule.services.schedule_run import ScheduleRun


class ScheduleRunRegistry:
    """Latest scheduling run per user."""

    def __init__(self) -> None:
        self._runs: dict[str, ScheduleRun] = {}

    def claim(self, run: ScheduleRun) -> None:
        """
        Register run as the user's current run.

        Raises:
            BusinessLogicError: If the user already has an active run
        """
        current = self._runs.get(run.user_id)
        if current is not None and current.is_active:
            raise BusinessLogicError(
                "A scheduling run is already in progress for this user",
                details={"run_id": str(current.run_id), "status": current.status.value},
            )
        self._runs[run.user_id] = run

    def get(self, user_id: str, run_id: UUID) -> ScheduleRun:
        run = self._runs.get(user_id)
        if run is None or run.run_id != run_id:
            raise NotFoundError(f"Schedule run {run_id} not found")
        return run

    def current(self, user_id: str):
        return self._runs.get(user_id)
