"""
Auto-schedule API endpoints.

Start a scheduling run for a batch of tasks, answer conflict prompts and
cancel suspended runs.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from autoschedule.api.deps import AutoScheduler, CurrentUser, RunRegistry, TaskRepo
from autoschedule.core.exceptions import BusinessLogicError, NotFoundError
from autoschedule.models.schedule import (
    ConflictResolutionRequest,
    ScheduleRunRequest,
    ScheduleRunResponse,
)
from autoschedule.utils.datetime_utils import now_utc

router = APIRouter()


def _get_run_or_404(registry: RunRegistry, user_id: str, run_id: UUID):
    try:
        return registry.get(user_id, run_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.post("/runs", response_model=ScheduleRunResponse, status_code=status.HTTP_201_CREATED)
async def start_schedule_run(
    request: ScheduleRunRequest,
    user: CurrentUser,
    repo: TaskRepo,
    scheduler: AutoScheduler,
    registry: RunRegistry,
):
    """Schedule a batch of tasks. The run may stop at a conflict awaiting resolution."""
    tasks = []
    for task_id in dict.fromkeys(request.task_ids):
        task = await repo.get(user.id, task_id)
        if not task:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Task {task_id} not found",
            )
        tasks.append(task)

    run = scheduler.create_run(user.id, request.mode, request.now or now_utc())
    try:
        registry.claim(run)
    except BusinessLogicError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )

    try:
        await scheduler.execute_run(run, tasks, request.calendar_ids)
    except Exception as e:
        scheduler.fail_run(run, str(e))
        raise
    return run.to_response()


@router.get("/runs/{run_id}", response_model=ScheduleRunResponse)
async def get_schedule_run(
    run_id: UUID,
    user: CurrentUser,
    registry: RunRegistry,
):
    """Get the current state of a scheduling run."""
    return _get_run_or_404(registry, user.id, run_id).to_response()


@router.post("/runs/{run_id}/resolution", response_model=ScheduleRunResponse)
async def resolve_schedule_conflict(
    run_id: UUID,
    request: ConflictResolutionRequest,
    user: CurrentUser,
    scheduler: AutoScheduler,
    registry: RunRegistry,
):
    """Apply a conflict resolution and continue the run."""
    run = _get_run_or_404(registry, user.id, run_id)
    try:
        await scheduler.resolve_conflict(run, request.action)
    except BusinessLogicError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    except Exception as e:
        scheduler.fail_run(run, str(e))
        raise
    return run.to_response()


@router.post("/runs/{run_id}/cancel", response_model=ScheduleRunResponse)
async def cancel_schedule_run(
    run_id: UUID,
    user: CurrentUser,
    scheduler: AutoScheduler,
    registry: RunRegistry,
):
    """Cancel a run that is waiting on a conflict. Tasks already placed stay placed."""
    run = _get_run_or_404(registry, user.id, run_id)
    try:
        await scheduler.cancel_run(run)
    except BusinessLogicError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )
    except Exception as e:
        scheduler.fail_run(run, str(e))
        raise
    return run.to_response()
