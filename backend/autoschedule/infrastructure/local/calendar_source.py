"""
SQLite implementation of the external calendar source.

Serves events that were synced from external providers into the local
database. Calendars are the distinct calendar IDs a user has events in.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, select

from autoschedule.interfaces.calendar_source import IExternalCalendarSource
from autoschedule.models.calendar import CalendarInfo, ExternalEvent, ExternalEventCreate
from autoschedule.infrastructure.local.database import (
    ExternalEventORM,
    from_db_datetime,
    get_session_factory,
    to_db_datetime,
)


class SqliteCalendarSource(IExternalCalendarSource):
    """Locally synced external calendar events."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: ExternalEventORM) -> ExternalEvent:
        return ExternalEvent(
            id=UUID(orm.id),
            calendar_id=orm.calendar_id,
            title=orm.title or "",
            start_time=from_db_datetime(orm.start_time),
            end_time=from_db_datetime(orm.end_time),
        )

    async def list_calendars(self, user_id: str) -> list[CalendarInfo]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ExternalEventORM.calendar_id)
                .where(ExternalEventORM.user_id == user_id)
                .distinct()
                .order_by(ExternalEventORM.calendar_id)
            )
            return [
                CalendarInfo(calendar_id=calendar_id, name=calendar_id)
                for calendar_id in result.scalars().all()
            ]

    async def fetch_events(
        self,
        user_id: str,
        calendar_id: str,
        start: datetime,
        end: datetime,
    ) -> list[ExternalEvent]:
        """Events overlapping [start, end), plus entries missing a bound."""
        async with self._session_factory() as session:
            query = select(ExternalEventORM).where(
                and_(
                    ExternalEventORM.user_id == user_id,
                    ExternalEventORM.calendar_id == calendar_id,
                    (ExternalEventORM.start_time.is_(None))
                    | (ExternalEventORM.end_time.is_(None))
                    | and_(
                        ExternalEventORM.start_time < to_db_datetime(end),
                        ExternalEventORM.end_time > to_db_datetime(start),
                    ),
                )
            )
            result = await session.execute(query.order_by(ExternalEventORM.start_time))
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def list_events(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[ExternalEvent]:
        """All of the user's events, optionally limited to those overlapping [start, end)."""
        async with self._session_factory() as session:
            query = select(ExternalEventORM).where(ExternalEventORM.user_id == user_id)
            if start is not None:
                query = query.where(ExternalEventORM.end_time > to_db_datetime(start))
            if end is not None:
                query = query.where(ExternalEventORM.start_time < to_db_datetime(end))
            result = await session.execute(query.order_by(ExternalEventORM.start_time))
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def add_event(self, user_id: str, event: ExternalEventCreate) -> ExternalEvent:
        """Store a synced event."""
        async with self._session_factory() as session:
            orm = ExternalEventORM(
                id=str(uuid4()),
                user_id=user_id,
                calendar_id=event.calendar_id,
                title=event.title,
                start_time=to_db_datetime(event.start_time),
                end_time=to_db_datetime(event.end_time),
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)
