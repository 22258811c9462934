"""
Title parser interface.

Extracts scheduling hints (time of day, weekday, duration) from free-form
task titles. Implementations: regex
"""

from abc import ABC, abstractmethod
from datetime import datetime

from autoschedule.models.schedule import ParsedTitle


class ITitleParser(ABC):
    """Abstract interface for task title parsing."""

    @abstractmethod
    async def parse(self, title: str, reference: datetime) -> ParsedTitle:
        """
        Parse scheduling hints out of a title.

        Args:
            title: Raw task title
            reference: Moment that relative hints ("friday", "at 3pm") resolve against

        Returns:
            ParsedTitle with the hint text removed from clean_title
        """
        pass
