"""
Task repository interface.

Defines the contract for task persistence operations.
Implementations: SQLite
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from autoschedule.models.task import Task, TaskCreate, TaskUpdate


class ITaskRepository(ABC):
    """Abstract interface for task persistence."""

    @abstractmethod
    async def create(self, user_id: str, task: TaskCreate) -> Task:
        """
        Create a new task.

        Args:
            user_id: Owner user ID
            task: Task creation data

        Returns:
            Created task with generated ID and timestamps
        """
        pass

    @abstractmethod
    async def get(self, user_id: str, task_id: UUID) -> Optional[Task]:
        """
        Get a task by ID.

        Args:
            user_id: Owner user ID
            task_id: Task ID

        Returns:
            Task if found, None otherwise
        """
        pass

    @abstractmethod
    async def list(
        self,
        user_id: str,
        include_completed: bool = False,
        scheduled_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Task]:
        """
        List tasks with optional filters.

        Args:
            user_id: Owner user ID
            include_completed: Include completed tasks
            scheduled_only: Only tasks that have both start_time and end_time
            limit: Maximum number of results
            offset: Pagination offset

        Returns:
            List of tasks ordered by start_time, unscheduled last
        """
        pass

    @abstractmethod
    async def list_scheduled_between(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
    ) -> list[Task]:
        """
        List every scheduled task overlapping [start, end), completed ones included.

        Unlike list(), results are not paginated.

        Args:
            user_id: Owner user ID
            start: Window start (inclusive)
            end: Window end (exclusive)

        Returns:
            List of tasks ordered by start_time
        """
        pass

    @abstractmethod
    async def update(self, user_id: str, task_id: UUID, update: TaskUpdate) -> Task:
        """
        Update an existing task.

        Only fields explicitly set on the update are written, so an explicit
        None clears the stored value.

        Args:
            user_id: Owner user ID
            task_id: Task ID
            update: Fields to update

        Returns:
            Updated task

        Raises:
            NotFoundError: If task not found
            ValidationError: If the result would have only one of start/end
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str, task_id: UUID) -> bool:
        """
        Delete a task.

        Args:
            user_id: Owner user ID
            task_id: Task ID

        Returns:
            True if deleted, False if not found
        """
        pass
