"""
Duration estimator interface.

Implementations: LLM-backed estimator
"""

from abc import ABC, abstractmethod
from typing import Optional


class IDurationEstimator(ABC):
    """Abstract interface for task duration estimation."""

    @abstractmethod
    async def estimate(self, title: str, notes: Optional[str] = None) -> int:
        """
        Estimate how long a task takes.

        Args:
            title: Cleaned task title
            notes: Optional task notes for extra context

        Returns:
            Positive number of minutes
        """
        pass
