"""Event registration API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import require_admin
from src.models.base import MAX_PAGE, MessageResponse, Pagination
from src.models.registration import (
    Registration,
    RegistrationCreate,
    RegistrationCreated,
    RegistrationListResponse,
    RegistrationStats,
    RegistrationStatus,
    RegistrationStatusUpdate,
)
from src.models.user import User
from src.services.registration_service import RegistrationService

router = APIRouter(prefix="/registrations", tags=["Registrations"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def register(request: RegistrationCreate) -> RegistrationCreated:
    """Register for an upcoming event. Public.

    Raises:
        NotFound: Unknown event
        DomainError: Event closed or full
        Conflict: Email already registered for this event
    """
    registration = await RegistrationService().create(request)
    return RegistrationCreated(message="Registration successful", registration=registration)


@router.get("/event/{event_id}")
async def list_event_registrations(
    event_id: UUID,
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    limit: int = Query(default=20, ge=1, le=100),
    status: Optional[RegistrationStatus] = Query(default=None),
    _: User = Depends(require_admin),
) -> RegistrationListResponse:
    registrations, total = await RegistrationService().list_for_event(
        event_id, page=page, limit=limit, status=status
    )
    return RegistrationListResponse(
        registrations=registrations,
        pagination=Pagination.build(page, limit, total),
    )


@router.patch("/{registration_id}/status")
async def update_registration_status(
    registration_id: UUID,
    request: RegistrationStatusUpdate,
    _: User = Depends(require_admin),
) -> Registration:
    return await RegistrationService().update_status(registration_id, request.status)


@router.delete("/{registration_id}")
async def delete_registration(
    registration_id: UUID,
    _: User = Depends(require_admin),
) -> MessageResponse:
    await RegistrationService().delete(registration_id)
    return MessageResponse(message="Registration deleted successfully")


@router.get("/stats/{event_id}")
async def registration_stats(
    event_id: UUID,
    _: User = Depends(require_admin),
) -> RegistrationStats:
    return await RegistrationService().stats(event_id)
