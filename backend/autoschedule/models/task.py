"""
Task model definitions.

Tasks are the core entity representing user's to-do items.
The auto-scheduler reads and writes start_time/end_time and the cleaned title.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class TaskBase(BaseModel):
    """Base task fields shared across create/read."""

    title: str = Field(..., min_length=1, max_length=500, description="Task title")
    notes: Optional[str] = Field(None, max_length=5000, description="Free-form notes")
    start_time: Optional[datetime] = Field(None, description="Scheduled start")
    end_time: Optional[datetime] = Field(None, description="Scheduled end")


class TaskCreate(TaskBase):
    """Schema for creating a new task."""

    @model_validator(mode="after")
    def validate_time_pair(self):
        """start_time and end_time are set together or not at all."""
        if (self.start_time is None) != (self.end_time is None):
            raise ValueError("start_time and end_time must be set together")
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class TaskUpdate(BaseModel):
    """
    Schema for updating an existing task.

    Only fields explicitly set are applied, so passing start_time=None clears it.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    notes: Optional[str] = Field(None, max_length=5000)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class Task(TaskBase):
    """Complete task model with all fields."""

    id: UUID
    user_id: str
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @property
    def is_scheduled(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None
