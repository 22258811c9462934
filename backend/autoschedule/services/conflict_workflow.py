"""
Conflict resolution workflow.

Explicit state machine around a scheduling run's suspension on a conflict:

    IDLE --suspend--> AWAITING_RESOLUTION --begin_resolution--> RESOLVING --complete--> IDLE
    AWAITING_RESOLUTION --cancel--> ABORTED
    any non-terminal state --abort--> ABORTED
"""

from __future__ import annotations

from typing import Optional

from autoschedule.core.exceptions import InvalidTransitionError
from autoschedule.core.logger import setup_logger
from autoschedule.models.enums import ConflictAction, WorkflowState
from autoschedule.models.schedule import ConflictCase

logger = setup_logger(__name__)


class ConflictResolutionWorkflow:
    """Tracks where a run is in the suspend/resolve cycle."""

    def __init__(self) -> None:
        self._state = WorkflowState.IDLE
        self._conflict: Optional[ConflictCase] = None
        self._action: Optional[ConflictAction] = None
        self.history: list[tuple[WorkflowState, WorkflowState, str]] = []

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def conflict(self) -> Optional[ConflictCase]:
        return self._conflict

    @property
    def action(self) -> Optional[ConflictAction]:
        """Resolution currently being applied, while RESOLVING."""
        return self._action

    @property
    def is_terminal(self) -> bool:
        return self._state == WorkflowState.ABORTED

    def _transition(
        self,
        event: str,
        allowed: tuple[WorkflowState, ...],
        target: WorkflowState,
    ) -> None:
        if self._state not in allowed:
            raise InvalidTransitionError(self._state.value, event)
        logger.debug(f"Workflow {self._state.value} -> {target.value} on {event}")
        self.history.append((self._state, target, event))
        self._state = target

    def suspend(self, conflict: ConflictCase) -> None:
        self._transition("suspend", (WorkflowState.IDLE,), WorkflowState.AWAITING_RESOLUTION)
        self._conflict = conflict

    def begin_resolution(self, action: ConflictAction) -> ConflictCase:
        """
        Accept a resolution for the pending conflict.

        Cancel is not a resolution; use cancel() for it.
        """
        if action == ConflictAction.CANCEL:
            raise InvalidTransitionError(self._state.value, action.value)
        self._transition(
            action.value, (WorkflowState.AWAITING_RESOLUTION,), WorkflowState.RESOLVING
        )
        self._action = action
        return self._conflict

    def complete(self) -> None:
        self._transition("complete", (WorkflowState.RESOLVING,), WorkflowState.IDLE)
        self._conflict = None
        self._action = None

    def cancel(self) -> None:
        self._transition(
            ConflictAction.CANCEL.value,
            (WorkflowState.AWAITING_RESOLUTION,),
            WorkflowState.ABORTED,
        )
        self._conflict = None

    def abort(self) -> None:
        self._transition(
            "abort",
            (WorkflowState.IDLE, WorkflowState.AWAITING_RESOLUTION, WorkflowState.RESOLVING),
            WorkflowState.ABORTED,
        )
        self._conflict = None
        self._action = None
