"""
Calendar feature: API routes for event management.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from supabase import Client

from eido.core.dependencies import get_db, get_current_user_id
from eido.core.exceptions import AppBaseError, app_error_to_http
from eido.features.calendar.schemas import (
    DeletionScope,
    EventCreate,
    EventDeleteRequest,
    EventRef,
    EventUpdate,
)
from eido.features.calendar.service import CalendarService

router = APIRouter()


@router.get("/")
async def list_events(
    start: datetime | None = None,
    days_ahead: int | None = None,
    class_id: str | None = None,
    event_type: str | None = None,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """List events, optionally within a date window."""
    service = CalendarService(db)
    try:
        events = service.get_events(user_id, start, days_ahead, class_id, event_type)
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"data": events}


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Create an event. Recurring events come back as the full list of occurrences."""
    service = CalendarService(db)
    try:
        events = service.create_event(user_id, data)
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"data": events}


@router.post("/delete")
async def delete_event_scoped(
    data: EventDeleteRequest,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Delete an occurrence with scope this | following | all."""
    service = CalendarService(db)
    try:
        deleted = service.delete_event(user_id, data.event, data.scope)
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"success": True, "deleted": deleted}


@router.get("/{event_id}")
async def get_event(
    event_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    service = CalendarService(db)
    try:
        event = service.get_event_by_id(user_id, event_id)
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"data": event}


@router.put("/{event_id}")
async def update_event(
    event_id: str,
    data: EventUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Update an existing event."""
    service = CalendarService(db)
    try:
        event = service.update_event(user_id, event_id, data.model_dump(exclude_unset=True))
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"data": event}


@router.delete("/{event_id}")
async def delete_event(
    event_id: str,
    scope: DeletionScope = DeletionScope.THIS,
    user_id: str = Depends(get_current_user_id),
    db: Client = Depends(get_db),
):
    """Delete by id. The stored row anchors ``following`` / ``all``."""
    service = CalendarService(db)
    try:
        row = service.get_event_by_id(user_id, event_id)
        deleted = service.delete_event(user_id, EventRef(**row), scope)
    except AppBaseError as e:
        raise app_error_to_http(e)
    return {"success": True, "deleted": deleted}
