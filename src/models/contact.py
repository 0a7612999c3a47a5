"""Contact form models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from src.models.base import CamelModel, Pagination
from src.models.validators import normalize_email, require_text


class ContactStatus(str, Enum):
    NEW = "New"
    READ = "Read"
    REPLIED = "Replied"
    ARCHIVED = "Archived"


class Contact(CamelModel):
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    status: ContactStatus = ContactStatus.NEW
    created_at: datetime
    updated_at: datetime


class ContactCreate(CamelModel):
    """Public contact form submission."""

    name: str = Field(..., max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=50)
    subject: str = Field(..., max_length=255)
    message: str = Field(..., max_length=5000)

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return require_text(v)

    @field_validator("email", mode="before")
    @classmethod
    def email_normalized(cls, v):
        return normalize_email(v)

    @field_validator("subject")
    @classmethod
    def subject_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 5:
            raise ValueError("Subject required (min 5 chars)")
        return v

    @field_validator("message")
    @classmethod
    def message_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10:
            raise ValueError("Message required (min 10 chars)")
        return v


class ContactStatusUpdate(CamelModel):
    status: ContactStatus


class ContactListResponse(CamelModel):
    contacts: list[Contact]
    pagination: Pagination
