"""Team member API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import require_admin
from src.models.base import MessageResponse
from src.models.team import ReorderRequest, TeamMember, TeamMemberCreate, TeamMemberUpdate
from src.models.user import User
from src.services.exceptions import NotFound
from src.services.team_service import TeamService

router = APIRouter(prefix="/team", tags=["Team"])

MEMBER_NOT_FOUND = "Team member not found"


@router.get("")
async def list_members(
    include_inactive: bool = Query(default=False, alias="all"),
) -> list[TeamMember]:
    """Active members in display order; ``?all=true`` includes inactive ones."""
    return await TeamService().list_members(include_inactive=include_inactive)


@router.post("/reorder")
async def reorder_members(
    request: ReorderRequest,
    _: User = Depends(require_admin),
) -> MessageResponse:
    await TeamService().reorder(request.order)
    return MessageResponse(message="Order updated successfully")


@router.get("/{member_id}")
async def get_member(member_id: UUID) -> TeamMember:
    member = await TeamService().get_member(member_id)
    if member is None:
        raise NotFound(MEMBER_NOT_FOUND)
    return member


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_member(
    request: TeamMemberCreate,
    _: User = Depends(require_admin),
) -> TeamMember:
    return await TeamService().create_member(request)


@router.put("/{member_id}")
async def update_member(
    member_id: UUID,
    request: TeamMemberUpdate,
    _: User = Depends(require_admin),
) -> TeamMember:
    member = await TeamService().update_member(member_id, request)
    if member is None:
        raise NotFound(MEMBER_NOT_FOUND)
    return member


@router.delete("/{member_id}")
async def delete_member(
    member_id: UUID,
    _: User = Depends(require_admin),
) -> MessageResponse:
    if not await TeamService().delete_member(member_id):
        raise NotFound(MEMBER_NOT_FOUND)
    return MessageResponse(message="Team member deleted successfully")
