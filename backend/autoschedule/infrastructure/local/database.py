"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
Datetimes are stored as naive UTC and read back as UTC-aware values.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from autoschedule.core.config import get_settings
from autoschedule.utils.datetime_utils import UTC, ensure_utc, now_utc


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


def utcnow_naive() -> datetime:
    return now_utc().replace(tzinfo=None)


def to_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """Convert to the naive UTC representation stored in SQLite."""
    if value is None:
        return None
    return ensure_utc(value).replace(tzinfo=None)


def from_db_datetime(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value.replace(tzinfo=UTC)


# ===========================================
# ORM Models
# ===========================================


class TaskORM(Base):
    """Task ORM model."""

    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    notes = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=True, index=True)
    end_time = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow_naive)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive)


class ExternalEventORM(Base):
    """Event synced from an external calendar provider."""

    __tablename__ = "external_events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    calendar_id = Column(String(255), nullable=False, index=True)
    title = Column(String(500), nullable=False, default="")
    start_time = Column(DateTime, nullable=True, index=True)
    end_time = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow_naive)


# ===========================================
# Engine / Session
# ===========================================


def get_engine():
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)


def get_session_factory():
    """Get async session factory."""
    engine = get_engine()
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db():
    """Initialize database tables."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
