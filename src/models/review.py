"""Testimonial (review) models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from src.models.base import CamelModel, Pagination
from src.models.validators import optional_url, require_text


class ReviewFilter(str, Enum):
    """Admin listing filter on approval state."""

    APPROVED = "approved"
    PENDING = "pending"
    ALL = "all"


class Review(CamelModel):
    id: UUID
    author_name: str
    author_role: Optional[str] = None
    author_company: Optional[str] = None
    content: str
    rating: int
    author_photo: Optional[str] = None
    is_approved: bool = False
    is_featured: bool = False
    event_ref: Optional[UUID] = None
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ReviewCreate(CamelModel):
    author_name: str = Field(..., max_length=255)
    author_role: Optional[str] = Field(default=None, max_length=255)
    author_company: Optional[str] = Field(default=None, max_length=255)
    content: str = Field(..., max_length=1000)
    rating: int = Field(..., ge=1, le=5)
    author_photo: Optional[str] = None
    is_featured: bool = False
    event_ref: Optional[UUID] = None

    @field_validator("author_name", "content")
    @classmethod
    def text_required(cls, v: str) -> str:
        return require_text(v)

    @field_validator("author_photo")
    @classmethod
    def photo_valid(cls, v: Optional[str]) -> Optional[str]:
        return optional_url(v)


class ReviewUpdate(CamelModel):
    author_name: Optional[str] = Field(default=None, max_length=255)
    author_role: Optional[str] = Field(default=None, max_length=255)
    author_company: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = Field(default=None, max_length=1000)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    author_photo: Optional[str] = None
    event_ref: Optional[UUID] = None

    @field_validator("author_name", "content")
    @classmethod
    def text_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return require_text(v)

    @field_validator("author_photo")
    @classmethod
    def photo_valid(cls, v: Optional[str]) -> Optional[str]:
        return optional_url(v)


class ApproveRequest(CamelModel):
    is_approved: bool


class FeatureRequest(CamelModel):
    is_featured: bool


class ReviewResponse(CamelModel):
    success: bool = True
    data: Review


class ReviewListResponse(CamelModel):
    success: bool = True
    data: list[Review]
    pagination: Optional[Pagination] = None
