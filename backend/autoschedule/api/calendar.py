"""
Calendar API endpoints.

Connected calendars and the synced external events the scheduler treats as
immovable.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query, status

from autoschedule.api.deps import CalendarStore, CurrentUser
from autoschedule.models.calendar import CalendarInfo, ExternalEvent, ExternalEventCreate

router = APIRouter()


@router.get("/calendars", response_model=list[CalendarInfo])
async def list_calendars(
    user: CurrentUser,
    store: CalendarStore,
):
    """List calendars the user has events in."""
    return await store.list_calendars(user.id)


@router.get("/events", response_model=list[ExternalEvent])
async def list_events(
    user: CurrentUser,
    store: CalendarStore,
    start: Optional[datetime] = Query(None, description="Only events ending after this time"),
    end: Optional[datetime] = Query(None, description="Only events starting before this time"),
):
    """List synced external events."""
    return await store.list_events(user.id, start=start, end=end)


@router.post("/events", response_model=ExternalEvent, status_code=status.HTTP_201_CREATED)
async def create_event(
    event: ExternalEventCreate,
    user: CurrentUser,
    store: CalendarStore,
):
    """Store an event synced from an external calendar."""
    return await store.add_event(user.id, event)
