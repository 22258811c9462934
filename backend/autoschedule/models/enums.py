"""
Enum definitions for the application.

These enums are used across models and provide type-safe status/mode values.
"""

from enum import Enum


class ScheduleMode(str, Enum):
    """Which task list a scheduling run was triggered from."""

    TODAY = "today"
    TOMORROW = "tomorrow"
    SOMEDAY = "someday"
    OVERDUE = "overdue"


class ConflictAction(str, Enum):
    """Resolution choices offered when a specific-time task conflicts."""

    CANCEL = "cancel"
    SCHEDULE_ANYWAY = "schedule_anyway"
    MOVE_MOVEABLE_TASKS = "move_moveable_tasks"
    RESCHEDULE_NEW_TASK = "reschedule_new_task"


class WorkflowState(str, Enum):
    """
    Conflict resolution workflow state.

    IDLE = orchestrator is free to run (initial, or resumed after a resolution)
    AWAITING_RESOLUTION = suspended on a ConflictCase until a decision arrives
    RESOLVING = applying the chosen resolution
    ABORTED = terminal, no further commits
    """

    IDLE = "IDLE"
    AWAITING_RESOLUTION = "AWAITING_RESOLUTION"
    RESOLVING = "RESOLVING"
    ABORTED = "ABORTED"


class ScheduleRunStatus(str, Enum):
    """Externally visible status of a scheduling run."""

    RUNNING = "RUNNING"
    AWAITING_RESOLUTION = "AWAITING_RESOLUTION"
    COMPLETED = "COMPLETED"
    ABORTED = "ABORTED"
