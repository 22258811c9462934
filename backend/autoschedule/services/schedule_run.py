"""
State of a single auto-scheduling run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from autoschedule.models.enums import ScheduleMode, ScheduleRunStatus, WorkflowState
from autoschedule.models.schedule import ScheduleCandidate, ScheduledPlacement, ScheduleRunResponse
from autoschedule.services.conflict_workflow import ConflictResolutionWorkflow
from autoschedule.services.occupied_timeline import OccupiedTimeline


@dataclass
class ScheduleRun:
    """
    One batch being scheduled for one user.

    specific_queue and flexible_queue hold candidates not yet placed;
    conflict_candidate is the candidate the run is suspended on.
    """

    user_id: str
    mode: ScheduleMode
    now: datetime
    target_date: date
    run_id: UUID = field(default_factory=uuid4)
    timeline: OccupiedTimeline = field(default_factory=OccupiedTimeline)
    workflow: ConflictResolutionWorkflow = field(default_factory=ConflictResolutionWorkflow)
    specific_queue: list[ScheduleCandidate] = field(default_factory=list)
    flexible_queue: list[ScheduleCandidate] = field(default_factory=list)
    conflict_candidate: Optional[ScheduleCandidate] = None
    placements: list[ScheduledPlacement] = field(default_factory=list)
    skipped_task_ids: list[UUID] = field(default_factory=list)
    completed: bool = False
    error: Optional[str] = None

    @property
    def status(self) -> ScheduleRunStatus:
        state = self.workflow.state
        if state == WorkflowState.ABORTED:
            return ScheduleRunStatus.ABORTED
        if state == WorkflowState.AWAITING_RESOLUTION:
            return ScheduleRunStatus.AWAITING_RESOLUTION
        if self.completed:
            return ScheduleRunStatus.COMPLETED
        return ScheduleRunStatus.RUNNING

    @property
    def is_active(self) -> bool:
        return self.status in (ScheduleRunStatus.RUNNING, ScheduleRunStatus.AWAITING_RESOLUTION)

    @property
    def pending_task_ids(self) -> list[UUID]:
        pending = []
        if self.conflict_candidate is not None:
            pending.append(self.conflict_candidate.task.id)
        pending.extend(c.task.id for c in self.specific_queue)
        pending.extend(c.task.id for c in self.flexible_queue)
        return pending

    def discard_pending(self) -> None:
        self.specific_queue.clear()
        self.flexible_queue.clear()
        self.conflict_candidate = None

    def to_response(self) -> ScheduleRunResponse:
        return ScheduleRunResponse(
            run_id=self.run_id,
            mode=self.mode,
            status=self.status,
            workflow_state=self.workflow.state,
            target_date=self.target_date,
            placements=list(self.placements),
            skipped_task_ids=list(self.skipped_task_ids),
            pending_task_ids=self.pending_task_ids,
            conflict=self.workflow.conflict,
            error=self.error,
        )
