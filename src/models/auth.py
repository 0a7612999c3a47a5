"""Auth request and response models with validation."""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from src.models.base import CamelModel
from src.models.user import User
from src.models.validators import check_password_length, normalize_email, require_text


class LoginRequest(CamelModel):
    """Login credentials for authentication.

    Attributes:
        email: Account email (case-insensitive)
        password: Account password
    """

    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def email_normalized(cls, v):
        return normalize_email(v)


class LoginResponse(CamelModel):
    """Successful authentication response with token pair.

    Attributes:
        user: Public view of the authenticated user
        access_token: Short-lived JWT for API access
        refresh_token: Long-lived JWT for obtaining new access tokens
    """

    user: User
    access_token: str
    refresh_token: str


class RefreshRequest(CamelModel):
    """Request to exchange a refresh token for a new access token."""

    refresh_token: str = Field(..., min_length=1)


class RefreshResponse(CamelModel):
    access_token: str


class MeResponse(CamelModel):
    user: User


class UpdateProfileRequest(CamelModel):
    """Profile update; only provided fields change."""

    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[EmailStr] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return require_text(v)

    @field_validator("email", mode="before")
    @classmethod
    def email_normalized(cls, v):
        return normalize_email(v)


class ProfileResponse(CamelModel):
    message: str
    user: User


class ChangePasswordRequest(CamelModel):
    """Password change request.

    Attributes:
        current_password: Must match the stored hash
        new_password: Replacement password (8 chars to 72 bytes)
    """

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)

    @field_validator("new_password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        """Ensure password is not whitespace only."""
        if not v.strip():
            raise ValueError("Password cannot be empty or whitespace only")
        return check_password_length(v)
