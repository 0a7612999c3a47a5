"""User and authentication models."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.models.base import CamelModel


class UserRole(str, Enum):
    """Administrative role. SUPER_ADMIN holds every ADMIN permission."""

    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    def satisfies(self, allowed: "UserRole") -> bool:
        """Whether this role is permitted where ``allowed`` is required."""
        if self is allowed:
            return True
        return self is UserRole.SUPER_ADMIN and allowed is UserRole.ADMIN


class User(CamelModel):
    """Public view of an admin account.

    The password hash and stored refresh token are deliberately absent;
    they are only read through ``UserService`` credential lookups.
    """

    id: UUID
    email: str
    name: str
    role: UserRole = UserRole.ADMIN
    avatar: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserCredentials(BaseModel):
    """Secret fields of a user row, never serialized to clients."""

    user: User
    password_hash: str
    refresh_token: Optional[str] = None
