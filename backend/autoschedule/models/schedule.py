"""
Schedule models for auto-scheduling runs.

OccupiedInterval, ScheduleCandidate and ConflictCase only live for the
duration of one run; ScheduleRunResponse is what the API returns.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from autoschedule.models.enums import ConflictAction, ScheduleMode, ScheduleRunStatus, WorkflowState
from autoschedule.models.task import Task


class OccupiedInterval(BaseModel):
    """A commitment on the working timeline of a run."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    title: str = ""
    movable: bool = Field(..., description="True for app tasks, False for external events")
    task_id: Optional[UUID] = Field(None, description="Owning task for movable intervals")

    @property
    def is_valid(self) -> bool:
        """Intervals with a missing bound or a non-positive length are ignored."""
        return self.start is not None and self.end is not None and self.end > self.start

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Half-open overlap test: [start, end) vs [self.start, self.end)."""
        if not self.is_valid:
            return False
        return start < self.end and self.start < end

    @property
    def duration_minutes(self) -> int:
        if not self.is_valid:
            return 0
        return int((self.end - self.start).total_seconds() // 60)


class ParsedTitle(BaseModel):
    """Scheduling hints extracted from a task title."""

    clean_title: str
    has_time_specification: bool = False
    specified_time: Optional[datetime] = None
    has_day_specification: bool = False
    specified_day: Optional[date] = None
    has_duration_specification: bool = False
    specified_duration: Optional[int] = Field(None, ge=1, description="Minutes")


class ScheduleCandidate(BaseModel):
    """Per-task working record built before placement."""

    task: Task
    duration: int = Field(..., ge=1, description="Minutes")
    clean_title: str
    has_specific_time: bool = False
    specified_time: Optional[datetime] = None
    is_email: bool = False


class ConflictCase(BaseModel):
    """Raised when a specific-time candidate overlaps existing commitments."""

    task: Task
    specified_time: datetime
    duration: int
    movable_conflicts: list[OccupiedInterval] = Field(default_factory=list)
    immovable_conflicts: list[OccupiedInterval] = Field(default_factory=list)


class ScheduledPlacement(BaseModel):
    """A commit made by the engine during a run."""

    task_id: UUID
    title: str
    start_time: datetime
    end_time: datetime
    requested_minutes: int
    capped: bool = Field(False, description="Shortened to fit the remaining business day")
    moved: bool = Field(False, description="Existing task relocated during conflict resolution")
    forced: bool = Field(False, description="Committed over a conflict via schedule_anyway")


# ===========================================
# API schemas
# ===========================================


class ScheduleRunRequest(BaseModel):
    """Start an auto-scheduling run for a batch of tasks."""

    task_ids: list[UUID] = Field(..., min_length=1)
    mode: ScheduleMode = ScheduleMode.TODAY
    calendar_ids: Optional[list[str]] = Field(
        None, description="Calendars to treat as obstacles (None = all connected calendars)"
    )
    now: Optional[datetime] = Field(None, description="Reference time (defaults to server time)")


class ConflictResolutionRequest(BaseModel):
    """Decision for a suspended run."""

    action: ConflictAction


class ScheduleRunResponse(BaseModel):
    """Snapshot of a scheduling run."""

    run_id: UUID
    mode: ScheduleMode
    status: ScheduleRunStatus
    workflow_state: WorkflowState
    target_date: date
    placements: list[ScheduledPlacement] = Field(default_factory=list)
    skipped_task_ids: list[UUID] = Field(default_factory=list)
    pending_task_ids: list[UUID] = Field(default_factory=list)
    conflict: Optional[ConflictCase] = None
    error: Optional[str] = None
