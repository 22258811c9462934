"""
External calendar source interface.

Read-only access to the user's connected calendars. Events returned here are
treated as immovable obstacles by the scheduler.
Implementations: SQLite (synced events)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from autoschedule.models.calendar import CalendarInfo, ExternalEvent


class IExternalCalendarSource(ABC):
    """Abstract interface for external calendar access."""

    @abstractmethod
    async def list_calendars(self, user_id: str) -> list[CalendarInfo]:
        """
        List calendars connected by the user.

        Args:
            user_id: Owner user ID

        Returns:
            Connected calendars
        """
        pass

    @abstractmethod
    async def fetch_events(
        self,
        user_id: str,
        calendar_id: str,
        start: datetime,
        end: datetime,
    ) -> list[ExternalEvent]:
        """
        Fetch events of one calendar overlapping [start, end).

        Args:
            user_id: Owner user ID
            calendar_id: Calendar to read
            start: Window start
            end: Window end

        Returns:
            Events in the window; entries may lack start or end
        """
        pass
