"""Team member models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from src.models.base import CamelModel
from src.models.validators import require_text


class MemberCategory(str, Enum):
    EXECUTIVE = "executive"
    TECHNICAL = "technical"
    OPERATIONS = "operations"
    MARKETING = "marketing"


class SocialLinks(CamelModel):
    linkedin: Optional[str] = None
    github: Optional[str] = None
    twitter: Optional[str] = None
    email: Optional[str] = None


class TeamMember(CamelModel):
    id: UUID
    name: str
    role: str
    bio: str
    image: str
    year: Optional[str] = None
    social: SocialLinks = Field(default_factory=SocialLinks)
    order: int = 0
    active: bool = True
    display_in_top6: bool = True
    member_category: Optional[MemberCategory] = None
    created_at: datetime
    updated_at: datetime


class TeamMemberCreate(CamelModel):
    name: str = Field(..., max_length=255)
    role: str = Field(..., max_length=255)
    bio: str = Field(..., max_length=500)
    image: str
    year: Optional[str] = None
    social: SocialLinks = Field(default_factory=SocialLinks)
    order: int = Field(default=0, ge=0)
    active: bool = True
    display_in_top6: bool = True
    member_category: Optional[MemberCategory] = None

    @field_validator("name", "role", "bio", "image")
    @classmethod
    def text_required(cls, v: str) -> str:
        return require_text(v)


class TeamMemberUpdate(CamelModel):
    name: Optional[str] = Field(default=None, max_length=255)
    role: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = Field(default=None, max_length=500)
    image: Optional[str] = None
    year: Optional[str] = None
    social: Optional[SocialLinks] = None
    order: Optional[int] = Field(default=None, ge=0)
    active: Optional[bool] = None
    display_in_top6: Optional[bool] = None
    member_category: Optional[MemberCategory] = None

    @field_validator("name", "role", "bio", "image")
    @classmethod
    def text_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return require_text(v)


class OrderItem(CamelModel):
    id: UUID
    order: int = Field(..., ge=0)


class ReorderRequest(CamelModel):
    order: list[OrderItem]

    @field_validator("order", mode="before")
    @classmethod
    def order_is_list(cls, v):
        if not isinstance(v, list):
            raise ValueError("Order must be an array")
        return v
