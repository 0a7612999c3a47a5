"""Review (testimonial) API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from src.api.dependencies import require_admin
from src.models.base import MAX_PAGE, Pagination
from src.models.review import (
    ApproveRequest,
    FeatureRequest,
    ReviewCreate,
    ReviewFilter,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)
from src.models.user import User
from src.services.exceptions import NotFound
from src.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])

REVIEW_NOT_FOUND = "Review not found"


class DeletedResponse(BaseModel):
    success: bool = True
    message: str


def _found(review):
    if review is None:
        raise NotFound(REVIEW_NOT_FOUND)
    return ReviewResponse(data=review)


@router.get("")
async def list_public_reviews(
    featured: Optional[bool] = Query(default=None),
) -> ReviewListResponse:
    """Approved reviews for the public site."""
    reviews = await ReviewService().list_public(featured=featured)
    return ReviewListResponse(data=reviews)


@router.get("/admin")
async def list_reviews_admin(
    status_filter: ReviewFilter = Query(default=ReviewFilter.ALL, alias="status"),
    featured: Optional[bool] = Query(default=None),
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    limit: int = Query(default=20, ge=1, le=100),
    _: User = Depends(require_admin),
) -> ReviewListResponse:
    reviews, total = await ReviewService().list_admin(
        status=status_filter, featured=featured, page=page, limit=limit
    )
    return ReviewListResponse(data=reviews, pagination=Pagination.build(page, limit, total))


@router.get("/{review_id}")
async def get_review(review_id: UUID) -> ReviewResponse:
    return _found(await ReviewService().get_review(review_id))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_review(
    request: ReviewCreate,
    current_user: User = Depends(require_admin),
) -> ReviewResponse:
    """Create a review. Reviews entered by an admin are approved immediately."""
    review = await ReviewService().create_review(request, approved_by=current_user.id)
    return ReviewResponse(data=review)


@router.put("/{review_id}")
async def update_review(
    review_id: UUID,
    request: ReviewUpdate,
    _: User = Depends(require_admin),
) -> ReviewResponse:
    return _found(await ReviewService().update_review(review_id, request))


@router.delete("/{review_id}")
async def delete_review(
    review_id: UUID,
    _: User = Depends(require_admin),
) -> DeletedResponse:
    if not await ReviewService().delete_review(review_id):
        raise NotFound(REVIEW_NOT_FOUND)
    return DeletedResponse(message="Review deleted successfully")


@router.put("/{review_id}/approve")
async def approve_review(
    review_id: UUID,
    request: ApproveRequest,
    current_user: User = Depends(require_admin),
) -> ReviewResponse:
    review = await ReviewService().set_approval(
        review_id, request.is_approved, approved_by=current_user.id
    )
    return _found(review)


@router.put("/{review_id}/feature")
async def feature_review(
    review_id: UUID,
    request: FeatureRequest,
    _: User = Depends(require_admin),
) -> ReviewResponse:
    return _found(await ReviewService().set_featured(review_id, request.is_featured))
