"""
Auto-scheduling orchestrator.

Places a batch of tasks onto the user's calendar: specific-time tasks at
their requested time (suspending on conflicts), everything else in the first
free business-hours slot.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, time, timedelta
from typing import Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from autoschedule.core.exceptions import InfrastructureError, SchedulingAbortedError
from autoschedule.core.logger import setup_logger
from autoschedule.interfaces.calendar_source import IExternalCalendarSource
from autoschedule.interfaces.duration_estimator import IDurationEstimator
from autoschedule.interfaces.task_repository import ITaskRepository
from autoschedule.interfaces.title_parser import ITitleParser
from autoschedule.models.enums import ConflictAction, ScheduleMode
from autoschedule.models.schedule import (
    ConflictCase,
    OccupiedInterval,
    ParsedTitle,
    ScheduleCandidate,
    ScheduledPlacement,
)
from autoschedule.models.task import Task, TaskUpdate
from autoschedule.services.conflict_detector import detect_conflicts
from autoschedule.services.occupied_timeline import (
    OccupiedTimeline,
    interval_from_event,
    interval_from_task,
)
from autoschedule.services.schedule_run import ScheduleRun
from autoschedule.services.slot_finder import SlotFinder
from autoschedule.utils.business_hours import business_start
from autoschedule.utils.datetime_utils import to_local_datetime

logger = setup_logger(__name__)

EMAIL_PATTERN = re.compile(r"email|e-mail|send", re.IGNORECASE)
SLIDES_PATTERN = re.compile(r"slide|slides|prep|preparing|presentation", re.IGNORECASE)
EMAIL_TASK_MINUTES = 15
SLIDES_TASK_MINUTES = 30

SCHEDULING_FAILED_MESSAGE = "Scheduling failed. Tasks placed before the failure were kept."


def _original_duration_minutes(task: Task) -> Optional[int]:
    if task.start_time is None or task.end_time is None:
        return None
    minutes = round((task.end_time - task.start_time).total_seconds() / 60)
    return minutes if minutes > 0 else None


def _candidate_sort_key(candidate: ScheduleCandidate) -> tuple[bool, bool]:
    if candidate.has_specific_time:
        return (False, False)
    return (True, not candidate.is_email)


class AutoSchedulerService:
    """
    Orchestrates one scheduling run at a time per caller.

    Collaborators are injected; the service keeps no state between runs.
    """

    def __init__(
        self,
        task_repo: ITaskRepository,
        title_parser: ITitleParser,
        duration_estimator: IDurationEstimator,
        calendar_source: Optional[IExternalCalendarSource] = None,
        slot_finder: Optional[SlotFinder] = None,
        planning_window_days: int = 14,
        default_task_minutes: int = 30,
    ):
        """
        Initialize the orchestrator.

        Args:
            task_repo: Storage for reading and committing tasks
            title_parser: Extracts time/day/duration hints from titles
            duration_estimator: Fallback duration source
            calendar_source: External calendars treated as immovable obstacles
            slot_finder: Slot search; its timezone is the scheduling timezone
            planning_window_days: Days of external events loaded per run
            default_task_minutes: Duration used when estimation fails
        """
        self.task_repo = task_repo
        self.title_parser = title_parser
        self.duration_estimator = duration_estimator
        self.calendar_source = calendar_source
        self.slot_finder = slot_finder or SlotFinder()
        self.planning_window_days = planning_window_days
        self.default_task_minutes = default_task_minutes

    @property
    def timezone_name(self) -> str:
        return self.slot_finder.timezone_name

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def create_run(self, user_id: str, mode: ScheduleMode, now: datetime) -> ScheduleRun:
        """Create an unstarted run so callers can register it before any await."""
        local_now = to_local_datetime(now, self.timezone_name)
        target = local_now.date()
        if mode == ScheduleMode.TOMORROW:
            target += timedelta(days=1)
        return ScheduleRun(user_id=user_id, mode=mode, now=local_now, target_date=target)

    async def start_run(
        self,
        user_id: str,
        tasks: list[Task],
        mode: ScheduleMode,
        now: datetime,
        calendar_ids: Optional[list[str]] = None,
    ) -> ScheduleRun:
        run = self.create_run(user_id, mode, now)
        return await self.execute_run(run, tasks, calendar_ids)

    async def execute_run(
        self,
        run: ScheduleRun,
        tasks: list[Task],
        calendar_ids: Optional[list[str]] = None,
    ) -> ScheduleRun:
        """
        Run a freshly created run until it completes, suspends or aborts.

        Returns:
            The same run; inspect run.status for the outcome
        """
        logger.info(
            f"Auto-schedule run {run.run_id} started for user {run.user_id}: "
            f"{len(tasks)} task(s), mode={run.mode.value}, target={run.target_date}"
        )
        try:
            run.timeline = await self._build_timeline(run, {t.id for t in tasks}, calendar_ids)
        except InfrastructureError as exc:
            logger.error(f"Run {run.run_id}: could not load existing commitments: {exc.message}")
            self._abort(run, "Could not load your calendar. Nothing was scheduled.")
            return run

        try:
            candidates = await self._prepare_candidates(run, tasks)
            candidates.sort(key=_candidate_sort_key)
            run.specific_queue = [c for c in candidates if c.has_specific_time]
            run.flexible_queue = [c for c in candidates if not c.has_specific_time]
            return await self._advance(run)
        except InfrastructureError as exc:
            logger.error(f"Run {run.run_id}: storage failure: {exc.message}")
            self._abort(run, SCHEDULING_FAILED_MESSAGE)
            return run

    async def resolve_conflict(self, run: ScheduleRun, action: ConflictAction) -> ScheduleRun:
        """
        Apply the user's decision to a suspended run and resume it.

        Raises:
            SchedulingAbortedError: If the run was already aborted
            InvalidTransitionError: If the run is not waiting for a decision
        """
        if run.workflow.is_terminal:
            raise SchedulingAbortedError(f"Schedule run {run.run_id} was aborted")
        if action == ConflictAction.CANCEL:
            return await self.cancel_run(run)

        conflict = run.workflow.begin_resolution(action)
        candidate = run.conflict_candidate
        logger.info(
            f"Run {run.run_id}: resolving conflict for '{candidate.clean_title}' with {action.value}"
        )
        try:
            if action == ConflictAction.SCHEDULE_ANYWAY:
                await self._commit(
                    run,
                    candidate,
                    self._local(conflict.specified_time),
                    candidate.duration,
                    forced=True,
                )
            elif action == ConflictAction.MOVE_MOVEABLE_TASKS:
                await self._move_movable_conflicts(run, conflict, candidate)
            elif action == ConflictAction.RESCHEDULE_NEW_TASK:
                await self._place_flexible(run, candidate, self._local(conflict.specified_time))
            run.conflict_candidate = None
            run.workflow.complete()
            return await self._advance(run)
        except InfrastructureError as exc:
            logger.error(f"Run {run.run_id}: storage failure while resolving: {exc.message}")
            self._abort(run, SCHEDULING_FAILED_MESSAGE)
            return run

    async def cancel_run(self, run: ScheduleRun) -> ScheduleRun:
        """Discard the pending conflict and the rest of the batch; earlier commits stay."""
        if run.workflow.is_terminal:
            raise SchedulingAbortedError(f"Schedule run {run.run_id} was aborted")
        run.workflow.cancel()
        dropped = len(run.pending_task_ids)
        run.discard_pending()
        logger.info(
            f"Run {run.run_id} cancelled: kept {len(run.placements)} placement(s), "
            f"dropped {dropped} task(s)"
        )
        return run

    def fail_run(self, run: ScheduleRun, reason: str) -> None:
        """Abort a run after an unexpected error so it no longer blocks the user."""
        if not run.workflow.is_terminal:
            logger.error(f"Run {run.run_id} failed unexpectedly: {reason}")
            self._abort(run, SCHEDULING_FAILED_MESSAGE)

    # ------------------------------------------------------------------
    # Preparation
    # ------------------------------------------------------------------

    async def _build_timeline(
        self,
        run: ScheduleRun,
        batch_ids: set[UUID],
        calendar_ids: Optional[list[str]],
    ) -> OccupiedTimeline:
        timeline = OccupiedTimeline()
        window_start = datetime.combine(
            run.target_date, time.min, tzinfo=ZoneInfo(self.timezone_name)
        )
        window_end = window_start + timedelta(days=self.planning_window_days)

        try:
            stored = await self.task_repo.list_scheduled_between(
                run.user_id, window_start, window_end
            )
        except Exception as exc:
            raise InfrastructureError("Failed to load existing tasks") from exc
        for task in stored:
            if task.id in batch_ids:
                continue
            timeline.add(interval_from_task(task, self.timezone_name))

        if self.calendar_source is None:
            return timeline

        try:
            if calendar_ids is None:
                calendars = await self.calendar_source.list_calendars(run.user_id)
                calendar_ids = [c.calendar_id for c in calendars]
            for calendar_id in calendar_ids:
                events = await self.calendar_source.fetch_events(
                    run.user_id, calendar_id, window_start, window_end
                )
                for event in events:
                    timeline.add(interval_from_event(event, self.timezone_name))
        except Exception as exc:
            raise InfrastructureError("Failed to load external calendar events") from exc

        logger.debug(f"Run {run.run_id}: timeline seeded with {len(timeline)} interval(s)")
        return timeline

    async def _prepare_candidates(self, run: ScheduleRun, tasks: list[Task]) -> list[ScheduleCandidate]:
        reference = run.now
        if run.mode == ScheduleMode.TOMORROW:
            reference = run.now + timedelta(days=1)

        candidates = []
        for task in tasks:
            parsed = await self._parse_title(task.title, reference)
            is_email = bool(EMAIL_PATTERN.search(parsed.clean_title))

            if run.mode == ScheduleMode.OVERDUE:
                duration = _original_duration_minutes(task)
                if duration is None:
                    duration = await self._resolve_duration(parsed, task)
                if task.start_time is not None or task.end_time is not None:
                    await self._save(
                        run.user_id, task.id, TaskUpdate(start_time=None, end_time=None)
                    )
                candidates.append(
                    ScheduleCandidate(
                        task=task,
                        duration=duration,
                        clean_title=parsed.clean_title,
                        is_email=is_email,
                    )
                )
                continue

            has_specific_time = parsed.has_time_specification and parsed.specified_time is not None
            candidates.append(
                ScheduleCandidate(
                    task=task,
                    duration=await self._resolve_duration(parsed, task),
                    clean_title=parsed.clean_title,
                    has_specific_time=has_specific_time,
                    specified_time=parsed.specified_time if has_specific_time else None,
                    is_email=is_email,
                )
            )
        return candidates

    async def _parse_title(self, title: str, reference: datetime) -> ParsedTitle:
        try:
            return await self.title_parser.parse(title, reference)
        except Exception as exc:
            logger.warning(f"Title parsing failed for '{title}', using it as-is: {exc}")
            return ParsedTitle(clean_title=title)

    async def _resolve_duration(self, parsed: ParsedTitle, task: Task) -> int:
        title = parsed.clean_title
        if EMAIL_PATTERN.search(title):
            return EMAIL_TASK_MINUTES
        if SLIDES_PATTERN.search(title):
            return SLIDES_TASK_MINUTES
        if parsed.has_duration_specification and parsed.specified_duration:
            return parsed.specified_duration
        try:
            minutes = await self.duration_estimator.estimate(title, task.notes)
        except Exception as exc:
            logger.warning(f"Duration estimate failed for '{title}': {exc}")
            return self.default_task_minutes
        if not isinstance(minutes, int) or minutes <= 0:
            logger.warning(f"Ignoring invalid duration estimate {minutes!r} for '{title}'")
            return self.default_task_minutes
        return minutes

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    async def _advance(self, run: ScheduleRun) -> ScheduleRun:
        """Place queued candidates until done or suspended on a conflict."""
        while run.specific_queue:
            candidate = run.specific_queue.pop(0)
            start = self._local(candidate.specified_time)
            partition = detect_conflicts(start, candidate.duration, run.timeline.intervals())
            if partition.has_conflicts:
                run.conflict_candidate = candidate
                run.workflow.suspend(
                    ConflictCase(
                        task=candidate.task,
                        specified_time=start,
                        duration=candidate.duration,
                        movable_conflicts=partition.movable,
                        immovable_conflicts=partition.immovable,
                    )
                )
                logger.info(
                    f"Run {run.run_id}: '{candidate.clean_title}' at {start.isoformat()} conflicts "
                    f"with {len(partition.movable)} movable and "
                    f"{len(partition.immovable)} immovable commitment(s); awaiting resolution"
                )
                return run
            await self._commit(run, candidate, start, candidate.duration)

        cursor = self._initial_cursor(run)
        while run.flexible_queue:
            candidate = run.flexible_queue.pop(0)
            end = await self._place_flexible(run, candidate, cursor)
            if end is not None:
                cursor = end

        run.completed = True
        logger.info(
            f"Run {run.run_id} completed: {len(run.placements)} placement(s), "
            f"{len(run.skipped_task_ids)} skipped"
        )
        return run

    def _initial_cursor(self, run: ScheduleRun) -> datetime:
        if run.mode == ScheduleMode.TOMORROW:
            day_start = datetime.combine(
                run.target_date, time.min, tzinfo=ZoneInfo(self.timezone_name)
            )
            return business_start(day_start, self.slot_finder.window)
        return run.now

    async def _place_flexible(
        self, run: ScheduleRun, candidate: ScheduleCandidate, after: datetime
    ) -> Optional[datetime]:
        """Commit candidate in the first free slot after `after`; returns the slot end."""
        match = self.slot_finder.find_slot_match(after, candidate.duration, run.timeline.intervals())
        if match is None:
            logger.warning(
                f"Run {run.run_id}: no slot for '{candidate.clean_title}' "
                f"({candidate.duration} min), skipping"
            )
            run.skipped_task_ids.append(candidate.task.id)
            return None
        if match.capped:
            logger.warning(
                f"Run {run.run_id}: '{candidate.clean_title}' capped to "
                f"{match.effective_minutes} of {candidate.duration} min at business end"
            )
        await self._commit(
            run,
            candidate,
            match.start,
            match.effective_minutes,
            requested_minutes=candidate.duration,
        )
        return match.end

    async def _move_movable_conflicts(
        self, run: ScheduleRun, conflict: ConflictCase, candidate: ScheduleCandidate
    ) -> None:
        start = self._local(conflict.specified_time)
        reservation = OccupiedInterval(
            start=start,
            end=start + timedelta(minutes=candidate.duration),
            title=candidate.clean_title,
            movable=True,
            task_id=candidate.task.id,
        )
        # Relocated tasks must not land back on the requested window.
        run.timeline.add(reservation)

        for interval in conflict.movable_conflicts:
            current = None
            if interval.task_id is not None:
                current = run.timeline.find_task(interval.task_id)
            if current is None and interval.is_valid:
                current = run.timeline.find_matching(
                    self._local(interval.start), self._local(interval.end)
                )
            if current is None or current.task_id is None or not current.is_valid:
                logger.warning(
                    f"Run {run.run_id}: could not locate the task behind conflict "
                    f"'{interval.title}', leaving it in place"
                )
                continue

            # Sub-minute tasks still occupy at least one minute when moved
            duration = max(1, math.ceil((current.end - current.start).total_seconds() / 60))
            run.timeline.remove(current)
            match = self.slot_finder.find_slot_match(start, duration, run.timeline.intervals())
            if match is None:
                run.timeline.add(current)
                logger.warning(
                    f"Run {run.run_id}: no free slot to move '{current.title}', leaving it in place"
                )
                continue

            await self._save(
                run.user_id,
                current.task_id,
                TaskUpdate(start_time=match.start, end_time=match.end),
            )
            run.timeline.add(
                OccupiedInterval(
                    start=match.start,
                    end=match.end,
                    title=current.title,
                    movable=True,
                    task_id=current.task_id,
                )
            )
            run.placements.append(
                ScheduledPlacement(
                    task_id=current.task_id,
                    title=current.title,
                    start_time=match.start,
                    end_time=match.end,
                    requested_minutes=duration,
                    capped=match.capped,
                    moved=True,
                )
            )
            logger.info(
                f"Run {run.run_id}: moved '{current.title}' to {match.start.isoformat()}"
            )

        run.timeline.remove(reservation)
        await self._commit(run, candidate, start, candidate.duration)

    async def _commit(
        self,
        run: ScheduleRun,
        candidate: ScheduleCandidate,
        start: datetime,
        minutes: int,
        requested_minutes: Optional[int] = None,
        forced: bool = False,
    ) -> ScheduledPlacement:
        end = start + timedelta(minutes=minutes)
        await self._save(
            run.user_id,
            candidate.task.id,
            TaskUpdate(title=candidate.clean_title, start_time=start, end_time=end),
        )
        run.timeline.add(
            OccupiedInterval(
                start=start,
                end=end,
                title=candidate.clean_title,
                movable=True,
                task_id=candidate.task.id,
            )
        )
        requested = requested_minutes if requested_minutes is not None else minutes
        placement = ScheduledPlacement(
            task_id=candidate.task.id,
            title=candidate.clean_title,
            start_time=start,
            end_time=end,
            requested_minutes=requested,
            capped=minutes < requested,
            forced=forced,
        )
        run.placements.append(placement)
        logger.info(
            f"Run {run.run_id}: scheduled '{candidate.clean_title}' "
            f"{start.isoformat()} - {end.isoformat()}"
        )
        return placement

    async def _save(self, user_id: str, task_id: UUID, update: TaskUpdate) -> Task:
        try:
            return await self.task_repo.update(user_id, task_id, update)
        except Exception as exc:
            raise InfrastructureError(
                f"Failed to save task {task_id}", details={"task_id": str(task_id)}
            ) from exc

    def _abort(self, run: ScheduleRun, message: str) -> None:
        run.workflow.abort()
        run.discard_pending()
        run.error = message
        logger.warning(
            f"Run {run.run_id} aborted with {len(run.placements)} placement(s) kept"
        )

    def _local(self, value: datetime) -> datetime:
        return to_local_datetime(value, self.timezone_name)
