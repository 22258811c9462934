"""Abstract interfaces for infrastructure abstraction."""

from autoschedule.interfaces.auth_provider import IAuthProvider, User
from autoschedule.interfaces.calendar_source import IExternalCalendarSource
from autoschedule.interfaces.duration_estimator import IDurationEstimator
from autoschedule.interfaces.llm_provider import ILLMProvider
from autoschedule.interfaces.task_repository import ITaskRepository
from autoschedule.interfaces.title_parser import ITitleParser

__all__ = [
    "IAuthProvider",
    "IExternalCalendarSource",
    "IDurationEstimator",
    "ILLMProvider",
    "ITaskRepository",
    "ITitleParser",
    "User",
]
