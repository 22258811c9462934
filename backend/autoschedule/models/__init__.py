"""Pydantic models (schemas) for the application."""

from autoschedule.models.calendar import CalendarInfo, ExternalEvent, ExternalEventCreate
from autoschedule.models.enums import ConflictAction, ScheduleMode, ScheduleRunStatus, WorkflowState
from autoschedule.models.schedule import (
    ConflictCase,
    ConflictResolutionRequest,
    OccupiedInterval,
    ParsedTitle,
    ScheduleCandidate,
    ScheduledPlacement,
    ScheduleRunRequest,
    ScheduleRunResponse,
)
from autoschedule.models.task import Task, TaskCreate, TaskUpdate

__all__ = [
    "CalendarInfo",
    "ConflictAction",
    "ConflictCase",
    "ConflictResolutionRequest",
    "ExternalEvent",
    "ExternalEventCreate",
    "OccupiedInterval",
    "ParsedTitle",
    "ScheduleCandidate",
    "ScheduleMode",
    "ScheduleRunRequest",
    "ScheduleRunResponse",
    "ScheduleRunStatus",
    "ScheduledPlacement",
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "WorkflowState",
]
