"""
SQLite implementation of Task repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, select

from autoschedule.core.exceptions import NotFoundError, ValidationError
from autoschedule.interfaces.task_repository import ITaskRepository
from autoschedule.models.task import Task, TaskCreate, TaskUpdate
from autoschedule.infrastructure.local.database import (
    TaskORM,
    utcnow_naive,
    from_db_datetime,
    get_session_factory,
    to_db_datetime,
)

_DATETIME_FIELDS = ("start_time", "end_time", "completed_at")


class SqliteTaskRepository(ITaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: TaskORM) -> Task:
        """Convert ORM object to Pydantic model."""
        return Task(
            id=UUID(orm.id),
            user_id=orm.user_id,
            title=orm.title,
            notes=orm.notes,
            start_time=from_db_datetime(orm.start_time),
            end_time=from_db_datetime(orm.end_time),
            completed_at=from_db_datetime(orm.completed_at),
            created_at=from_db_datetime(orm.created_at),
            updated_at=from_db_datetime(orm.updated_at),
        )

    async def _get_orm(self, session, user_id: str, task_id: UUID) -> Optional[TaskORM]:
        result = await session.execute(
            select(TaskORM).where(
                and_(TaskORM.id == str(task_id), TaskORM.user_id == user_id)
            )
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: str, task: TaskCreate) -> Task:
        """Create a new task."""
        async with self._session_factory() as session:
            orm = TaskORM(
                id=str(uuid4()),
                user_id=user_id,
                title=task.title,
                notes=task.notes,
                start_time=to_db_datetime(task.start_time),
                end_time=to_db_datetime(task.end_time),
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def get(self, user_id: str, task_id: UUID) -> Optional[Task]:
        """Get a task by ID."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, task_id)
            return self._orm_to_model(orm) if orm else None

    async def list(
        self,
        user_id: str,
        include_completed: bool = False,
        scheduled_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Task]:
        """List tasks with optional filters."""
        async with self._session_factory() as session:
            query = select(TaskORM).where(TaskORM.user_id == user_id)

            if not include_completed:
                query = query.where(TaskORM.completed_at.is_(None))

            if scheduled_only:
                query = query.where(
                    and_(TaskORM.start_time.is_not(None), TaskORM.end_time.is_not(None))
                )

            query = query.order_by(
                TaskORM.start_time.is_(None),
                TaskORM.start_time,
                TaskORM.created_at,
            )
            query = query.limit(limit).offset(offset)

            result = await session.execute(query)
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def list_scheduled_between(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
    ) -> list[Task]:
        """Scheduled tasks overlapping [start, end), completed ones included."""
        async with self._session_factory() as session:
            query = select(TaskORM).where(
                and_(
                    TaskORM.user_id == user_id,
                    TaskORM.start_time.is_not(None),
                    TaskORM.end_time.is_not(None),
                    TaskORM.start_time < to_db_datetime(end),
                    TaskORM.end_time > to_db_datetime(start),
                )
            )
            result = await session.execute(query.order_by(TaskORM.start_time))
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def update(self, user_id: str, task_id: UUID, update: TaskUpdate) -> Task:
        """Update an existing task."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, task_id)

            if not orm:
                raise NotFoundError(f"Task {task_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if field == "title" and value is None:
                    continue
                if field in _DATETIME_FIELDS:
                    value = to_db_datetime(value)
                setattr(orm, field, value)

            if (orm.start_time is None) != (orm.end_time is None):
                raise ValidationError(
                    "start_time and end_time must be set together",
                    details={"task_id": str(task_id)},
                )
            if orm.start_time is not None and orm.end_time <= orm.start_time:
                raise ValidationError(
                    "end_time must be after start_time",
                    details={"task_id": str(task_id)},
                )

            orm.updated_at = utcnow_naive()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, user_id: str, task_id: UUID) -> bool:
        """Delete a task."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, user_id, task_id)

            if not orm:
                return False

            await session.delete(orm)
            await session.commit()
            return True
