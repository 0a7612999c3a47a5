"""Event registration models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from src.models.base import CamelModel, Pagination
from src.models.validators import normalize_email, optional_url, require_text


class RegistrationStatus(str, Enum):
    """Registration status. CANCELLED rows do not count against capacity."""

    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    ATTENDED = "Attended"


class FoodPreference(str, Enum):
    VEG = "Veg"
    NON_VEG = "Non-Veg"


class EventSummary(CamelModel):
    """Event fields embedded in admin registration listings."""

    id: UUID
    title: str
    date: datetime


class Registration(CamelModel):
    id: UUID
    event_id: UUID
    name: str
    email: str
    phone: str
    college: Optional[str] = None
    linkedin_url: Optional[str] = None
    food_preference: Optional[FoodPreference] = None
    status: RegistrationStatus = RegistrationStatus.PENDING
    registered_at: datetime
    created_at: datetime
    updated_at: datetime
    event: Optional[EventSummary] = None


class RegistrationCreate(CamelModel):
    """Public registration form submission."""

    event_id: UUID
    name: str = Field(..., max_length=255)
    email: EmailStr
    phone: str = Field(..., max_length=50)
    college: Optional[str] = Field(default=None, max_length=255)
    linkedin_url: Optional[str] = None
    food_preference: Optional[FoodPreference] = None

    @field_validator("name", "phone")
    @classmethod
    def text_required(cls, v: str) -> str:
        return require_text(v)

    @field_validator("email", mode="before")
    @classmethod
    def email_normalized(cls, v):
        return normalize_email(v)

    @field_validator("college")
    @classmethod
    def strip_college(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None

    @field_validator("linkedin_url")
    @classmethod
    def linkedin_valid(cls, v: Optional[str]) -> Optional[str]:
        return optional_url(v)


class RegistrationCreated(CamelModel):
    message: str
    registration: Registration


class RegistrationStatusUpdate(CamelModel):
    status: RegistrationStatus


class RegistrationListResponse(CamelModel):
    registrations: list[Registration]
    pagination: Pagination


class RegistrationStats(CamelModel):
    total: int
    by_status: dict[str, int]
