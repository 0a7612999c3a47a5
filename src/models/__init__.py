"""Models package exports."""

from src.models.base import CamelModel, MessageResponse, Pagination
from src.models.blog import BlogPost
from src.models.contact import Contact, ContactStatus
from src.models.event import Event, EventCategory, EventMode, EventStatus
from src.models.registration import FoodPreference, Registration, RegistrationStatus
from src.models.review import Review
from src.models.site_settings import SiteSettings
from src.models.team import TeamMember
from src.models.user import User, UserRole

__all__ = [
    "BlogPost",
    "CamelModel",
    "Contact",
    "ContactStatus",
    "Event",
    "EventCategory",
    "EventMode",
    "EventStatus",
    "FoodPreference",
    "MessageResponse",
    "Pagination",
    "Registration",
    "RegistrationStatus",
    "Review",
    "SiteSettings",
    "TeamMember",
    "User",
    "UserRole",
]
