"""
Dependency injection for API endpoints.

This module provides FastAPI dependencies that inject the correct
infrastructure implementations based on environment configuration.
"""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status

from autoschedule.core.config import get_settings
from autoschedule.core.logger import setup_logger
from autoschedule.interfaces.auth_provider import IAuthProvider, User
from autoschedule.interfaces.calendar_source import IExternalCalendarSource
from autoschedule.interfaces.duration_estimator import IDurationEstimator
from autoschedule.interfaces.llm_provider import ILLMProvider
from autoschedule.interfaces.task_repository import ITaskRepository
from autoschedule.interfaces.title_parser import ITitleParser
from autoschedule.infrastructure.local.calendar_source import SqliteCalendarSource
from autoschedule.services.auto_scheduler_service import AutoSchedulerService
from autoschedule.services.run_registry import ScheduleRunRegistry
from autoschedule.services.slot_finder import SlotFinder

logger = setup_logger(__name__)


# ===========================================
# Repository Dependencies
# ===========================================


@lru_cache()
def get_task_repository() -> ITaskRepository:
    """Get task repository instance."""
    from autoschedule.infrastructure.local.task_repository import SqliteTaskRepository
    return SqliteTaskRepository()


@lru_cache()
def get_calendar_store() -> SqliteCalendarSource:
    """Get the local store of synced calendar events."""
    return SqliteCalendarSource()


def get_calendar_source() -> IExternalCalendarSource:
    """Get the calendar source the scheduler reads obstacles from."""
    return get_calendar_store()


# ===========================================
# Provider Dependencies
# ===========================================


@lru_cache()
def get_llm_provider() -> Optional[ILLMProvider]:
    """
    Get LLM provider instance.

    Returns None when no API key is configured; duration estimation then
    falls back to the default duration.
    """
    settings = get_settings()
    if not settings.GOOGLE_API_KEY:
        logger.info("GOOGLE_API_KEY not set, LLM duration estimates disabled")
        return None
    from autoschedule.infrastructure.local.gemini_api_provider import GeminiAPIProvider
    return GeminiAPIProvider(model_name=settings.GEMINI_MODEL, api_key=settings.GOOGLE_API_KEY)


@lru_cache()
def get_auth_provider() -> IAuthProvider:
    """Get authentication provider instance."""
    from autoschedule.infrastructure.local.mock_auth import MockAuthProvider
    return MockAuthProvider(enabled=get_settings().AUTH_ENABLED)


# ===========================================
# Service Dependencies
# ===========================================


@lru_cache()
def get_title_parser() -> ITitleParser:
    from autoschedule.services.title_parser import RegexTitleParser
    return RegexTitleParser()


@lru_cache()
def get_duration_estimator() -> IDurationEstimator:
    from autoschedule.services.duration_estimator import LLMDurationEstimator
    return LLMDurationEstimator(
        get_llm_provider(), default_minutes=get_settings().DEFAULT_TASK_MINUTES
    )


@lru_cache()
def get_auto_scheduler_service() -> AutoSchedulerService:
    """Get auto-scheduler wired with the configured collaborators."""
    settings = get_settings()
    return AutoSchedulerService(
        task_repo=get_task_repository(),
        title_parser=get_title_parser(),
        duration_estimator=get_duration_estimator(),
        calendar_source=get_calendar_source(),
        slot_finder=SlotFinder.from_settings(settings),
        planning_window_days=settings.PLANNING_WINDOW_DAYS,
        default_task_minutes=settings.DEFAULT_TASK_MINUTES,
    )


@lru_cache()
def get_run_registry() -> ScheduleRunRegistry:
    return ScheduleRunRegistry()


# ===========================================
# Authentication Dependencies
# ===========================================


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> User:
    """
    Get current authenticated user.

    When authentication is disabled and no header is sent, returns the
    development user.
    """
    if not authorization:
        if not auth_provider.is_enabled():
            return User(id="dev_user", email="dev@example.com", display_name="Developer")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
        )

    # Extract token from "Bearer <token>"
    try:
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise ValueError("Invalid scheme")
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    return await auth_provider.verify_token(token)


# ===========================================
# Type Aliases for Dependency Injection
# ===========================================

CurrentUser = Annotated[User, Depends(get_current_user)]
TaskRepo = Annotated[ITaskRepository, Depends(get_task_repository)]
CalendarStore = Annotated[SqliteCalendarSource, Depends(get_calendar_store)]
CalendarSource = Annotated[IExternalCalendarSource, Depends(get_calendar_source)]
AutoScheduler = Annotated[AutoSchedulerService, Depends(get_auto_scheduler_service)]
RunRegistry = Annotated[ScheduleRunRegistry, Depends(get_run_registry)]
