"""Contact form API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import require_admin
from src.models.base import MAX_PAGE, MessageResponse, Pagination
from src.models.contact import (
    Contact,
    ContactCreate,
    ContactListResponse,
    ContactStatus,
    ContactStatusUpdate,
)
from src.models.user import User
from src.services.contact_service import ContactService
from src.services.exceptions import NotFound

router = APIRouter(prefix="/contact", tags=["Contact"])

CONTACT_NOT_FOUND = "Contact not found"


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_contact(request: ContactCreate) -> MessageResponse:
    """Accept a message from the public contact form."""
    await ContactService().submit(request)
    return MessageResponse(message="Message sent successfully. We will get back to you soon!")


@router.get("")
async def list_contacts(
    status_filter: Optional[ContactStatus] = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    limit: int = Query(default=20, ge=1, le=100),
    _: User = Depends(require_admin),
) -> ContactListResponse:
    contacts, total = await ContactService().list_contacts(
        status=status_filter, page=page, limit=limit
    )
    return ContactListResponse(contacts=contacts, pagination=Pagination.build(page, limit, total))


@router.patch("/{contact_id}/status")
async def update_contact_status(
    contact_id: UUID,
    request: ContactStatusUpdate,
    _: User = Depends(require_admin),
) -> Contact:
    contact = await ContactService().update_status(contact_id, request.status)
    if contact is None:
        raise NotFound(CONTACT_NOT_FOUND)
    return contact


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: UUID,
    _: User = Depends(require_admin),
) -> MessageResponse:
    if not await ContactService().delete(contact_id):
        raise NotFound(CONTACT_NOT_FOUND)
    return MessageResponse(message="Contact deleted successfully")
