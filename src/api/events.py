"""Event API endpoints."""

from enum import Enum
from typing import Optional, Type
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import require_admin
from src.models.base import MAX_PAGE, MessageResponse, Pagination
from src.models.event import (
    Event,
    EventCategory,
    EventCreate,
    EventListResponse,
    EventStatus,
    EventUpdate,
)
from src.models.user import User
from src.services.event_service import EventService
from src.services.exceptions import NotFound, ValidationFailed

router = APIRouter(prefix="/events", tags=["Events"])

EVENT_NOT_FOUND = "Event not found"


def parse_filter(enum_cls: Type[Enum], value: Optional[str], name: str):
    """Map a query value to ``enum_cls``; missing or "all" means no filter."""
    if value is None or value == "" or value.lower() == "all":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationFailed(f"Invalid {name}. Expected one of: all, {allowed}")


@router.get("")
async def list_events(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    category: Optional[str] = Query(default=None),
    featured: Optional[bool] = Query(default=None),
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    limit: int = Query(default=100, ge=1, le=100),
) -> EventListResponse:
    """List events. Public.

    Completed events sort newest first, all others soonest first.
    """
    events, total = await EventService().list_events(
        status=parse_filter(EventStatus, status_filter, "status"),
        category=parse_filter(EventCategory, category, "category"),
        featured=featured,
        page=page,
        limit=limit,
    )
    return EventListResponse(events=events, pagination=Pagination.build(page, limit, total))


@router.get("/{event_id}")
async def get_event(event_id: UUID) -> Event:
    event = await EventService().get_event(event_id)
    if event is None:
        raise NotFound(EVENT_NOT_FOUND)
    return event


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(
    request: EventCreate,
    current_user: User = Depends(require_admin),
) -> Event:
    return await EventService().create_event(request, modified_by=current_user.email)


@router.put("/{event_id}")
async def update_event(
    event_id: UUID,
    request: EventUpdate,
    current_user: User = Depends(require_admin),
) -> Event:
    event = await EventService().update_event(event_id, request, modified_by=current_user.email)
    if event is None:
        raise NotFound(EVENT_NOT_FOUND)
    return event


@router.delete("/{event_id}")
async def delete_event(
    event_id: UUID,
    _: User = Depends(require_admin),
) -> MessageResponse:
    if not await EventService().delete_event(event_id):
        raise NotFound(EVENT_NOT_FOUND)
    return MessageResponse(message="Event deleted successfully")
