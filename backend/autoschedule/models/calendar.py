"""
External calendar models.

Events are read-only obstacles for the scheduler; they can never be moved.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class CalendarInfo(BaseModel):
    """A calendar the user has connected."""

    calendar_id: str
    name: str


class ExternalEventCreate(BaseModel):
    """Schema for storing a synced external event."""

    calendar_id: str = Field(..., min_length=1, max_length=255)
    title: str = Field("", max_length=500)
    start_time: datetime
    end_time: datetime

    @model_validator(mode="after")
    def validate_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ExternalEvent(BaseModel):
    """
    An event from an external calendar provider.

    Times are optional because providers return all-day or malformed entries;
    those are ignored by overlap checks.
    """

    id: Optional[UUID] = None
    calendar_id: str
    title: str = ""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    model_config = {"from_attributes": True}
