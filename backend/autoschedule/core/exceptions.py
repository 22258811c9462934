"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class AutoScheduleError(Exception):
    """Base exception for autoschedule."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(AutoScheduleError):
    """Resource not found."""

    pass


class ValidationError(AutoScheduleError):
    """Validation error."""

    pass


class LLMError(AutoScheduleError):
    """LLM-related error."""

    pass


class InfrastructureError(AutoScheduleError):
    """Infrastructure-related error (DB, external services, etc.)."""

    pass


class BusinessLogicError(AutoScheduleError):
    """Business logic constraint violation."""

    pass


class InvalidTransitionError(BusinessLogicError):
    """Conflict resolution workflow received an event its current state cannot accept."""

    def __init__(self, state: str, event: str):
        super().__init__(
            f"Cannot apply '{event}' while workflow is {state}",
            details={"state": state, "event": event},
        )
        self.state = state
        self.event = event


class SchedulingAbortedError(BusinessLogicError):
    """Operation attempted on a scheduling run that has already been aborted."""

    pass
