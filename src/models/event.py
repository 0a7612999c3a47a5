"""Event models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from src.models.base import CamelModel, Pagination
from src.models.validators import optional_url, require_text


class EventMode(str, Enum):
    ONLINE = "Online"
    OFFLINE = "Offline"
    HYBRID = "Hybrid"


class EventCategory(str, Enum):
    HACKATHON = "Hackathon"
    WORKSHOP = "Workshop"
    SPRINT = "Sprint"
    MEETUP = "Meetup"
    COMPETITION = "Competition"


class EventStatus(str, Enum):
    """Lifecycle status. Only UPCOMING events accept registrations."""

    UPCOMING = "Upcoming"
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Winner(CamelModel):
    name: str
    prize: str
    description: Optional[str] = None
    image: Optional[str] = None


class Event(CamelModel):
    """A community event as stored."""

    id: UUID
    title: str
    description: str
    short_description: str
    date: datetime
    end_date: Optional[datetime] = None
    time: str
    mode: EventMode
    location: Optional[str] = None
    category: EventCategory
    status: EventStatus = EventStatus.UPCOMING
    image: str
    registration_link: Optional[str] = None
    max_participants: Optional[int] = None
    tags: list[str] = Field(default_factory=list)
    winners: list[Winner] = Field(default_factory=list)
    gallery: list[str] = Field(default_factory=list)
    featured: bool = False
    priority: int = 0
    timezone: str = "Asia/Kolkata"
    last_modified_by: Optional[str] = None
    last_modified_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class EventCreate(CamelModel):
    """Admin request to create an event."""

    title: str = Field(..., max_length=255)
    description: str
    short_description: str = Field(..., max_length=200)
    date: datetime
    end_date: Optional[datetime] = None
    time: str = Field(..., max_length=50)
    mode: EventMode
    location: Optional[str] = None
    category: EventCategory
    status: EventStatus = EventStatus.UPCOMING
    image: str
    registration_link: Optional[str] = None
    max_participants: Optional[int] = Field(default=None, ge=1)
    tags: list[str] = Field(default_factory=list)
    winners: list[Winner] = Field(default_factory=list)
    gallery: list[str] = Field(default_factory=list)
    featured: bool = False
    priority: int = 0
    timezone: Optional[str] = None

    @field_validator("title", "description", "short_description", "time", "image")
    @classmethod
    def text_required(cls, v: str) -> str:
        return require_text(v)

    @field_validator("registration_link")
    @classmethod
    def link_valid(cls, v: Optional[str]) -> Optional[str]:
        return optional_url(v)


class EventUpdate(CamelModel):
    """Partial event update; fields left unset are not touched."""

    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    short_description: Optional[str] = Field(default=None, max_length=200)
    date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    time: Optional[str] = Field(default=None, max_length=50)
    mode: Optional[EventMode] = None
    location: Optional[str] = None
    category: Optional[EventCategory] = None
    status: Optional[EventStatus] = None
    image: Optional[str] = None
    registration_link: Optional[str] = None
    max_participants: Optional[int] = Field(default=None, ge=1)
    tags: Optional[list[str]] = None
    winners: Optional[list[Winner]] = None
    gallery: Optional[list[str]] = None
    featured: Optional[bool] = None
    priority: Optional[int] = None
    timezone: Optional[str] = None

    @field_validator("title", "description", "short_description", "time", "image")
    @classmethod
    def text_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return require_text(v)

    @field_validator("registration_link")
    @classmethod
    def link_valid(cls, v: Optional[str]) -> Optional[str]:
        return optional_url(v)


class EventListResponse(CamelModel):
    events: list[Event]
    pagination: Pagination
