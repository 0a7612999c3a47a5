"""Credential lifecycle: admin seeding, login, refresh, logout, password change."""

from typing import Optional
from uuid import UUID

import structlog

from src.config import get_settings
from src.models.user import User, UserRole
from src.services.auth_service import AuthService
from src.services.exceptions import Conflict, NotFound, Unauthorized
from src.services.user_service import UserService

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_REFRESH_TOKEN = "Invalid refresh token"


class CredentialService:
    """Orchestrates the credential flows on top of UserService and AuthService.

    Each user holds at most one refresh token. Login overwrites it, logout
    and password change clear it, and refresh only accepts the exact token
    currently stored.
    """

    def __init__(self):
        self.settings = get_settings()
        self.auth_service = AuthService()
        self.user_service = UserService()

    async def seed_admin(self) -> Optional[User]:
        """Create the bootstrap super admin if no user has the configured email.

        Idempotent; safe to call on every startup.

        Returns:
            The created User, or None if the account already existed
        """
        email = self.settings.admin_email
        existing = await self.user_service.get_credentials_by_email(email)

        if existing is not None:
            logger.info("admin_seed_skipped", user_id=str(existing.user.id))
            return None

        try:
            user = await self.user_service.create_user(
                email=email,
                password=self.settings.admin_password,
                name="Admin",
                role=UserRole.SUPER_ADMIN,
            )
        except Conflict:
            # Another process seeded between the lookup and the insert.
            logger.info("admin_seed_skipped", reason="concurrent_seed")
            return None

        logger.info("admin_seeded", user_id=str(user.id))
        return user

    async def login(self, email: str, password: str) -> tuple[User, str, str]:
        """Authenticate by email and password.

        Unknown email and wrong password fail identically.

        Returns:
            Tuple of (user, access_token, refresh_token)

        Raises:
            Unauthorized: "Invalid credentials"
        """
        credentials = await self.user_service.get_credentials_by_email(email)

        if credentials is None or not self.auth_service.verify_password(
            password, credentials.password_hash
        ):
            logger.warning("login_failed")
            raise Unauthorized(INVALID_CREDENTIALS)

        user_id = credentials.user.id
        access_token = self.auth_service.issue_access_token(user_id)
        refresh_token = self.auth_service.issue_refresh_token(user_id)

        user = await self.user_service.record_login(user_id, refresh_token)
        if user is None:
            raise Unauthorized(INVALID_CREDENTIALS)

        logger.info("user_logged_in", user_id=str(user_id))
        return user, access_token, refresh_token

    async def refresh(self, refresh_token: str) -> str:
        """Exchange the user's current refresh token for a new access token.

        The refresh token itself is not rotated.

        Raises:
            Unauthorized: "Invalid refresh token" for any failure
        """
        try:
            user_id = self.auth_service.verify_token(refresh_token)
        except Unauthorized:
            raise Unauthorized(INVALID_REFRESH_TOKEN)

        credentials = await self.user_service.get_credentials(user_id)

        if credentials is None or credentials.refresh_token != refresh_token:
            logger.warning("refresh_token_rejected", user_id=str(user_id))
            raise Unauthorized(INVALID_REFRESH_TOKEN)

        return self.auth_service.issue_access_token(user_id)

    async def logout(self, user_id: UUID) -> None:
        """Forget the stored refresh token so it can never be used again."""
        await self.user_service.clear_refresh_token(user_id)
        logger.info("user_logged_out", user_id=str(user_id))

    async def update_profile(
        self,
        user_id: UUID,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        """Change the user's name and/or email.

        Raises:
            Conflict: "Email already in use"
            NotFound: If the user vanished mid-request
        """
        if email is not None and await self.user_service.email_exists(
            email, exclude_user_id=user_id
        ):
            raise Conflict("Email already in use")

        user = await self.user_service.update_profile(user_id, name=name, email=email)
        if user is None:
            raise NotFound("User not found")
        return user

    async def change_password(
        self, user_id: UUID, current_password: str, new_password: str
    ) -> None:
        """Replace the password after checking the current one.

        On success every session must log in again. On failure nothing is
        written.

        Raises:
            Unauthorized: "Invalid current password"
        """
        credentials = await self.user_service.get_credentials(user_id)

        if credentials is None or not self.auth_service.verify_password(
            current_password, credentials.password_hash
        ):
            logger.warning("password_change_rejected", user_id=str(user_id))
            raise Unauthorized("Invalid current password")

        await self.user_service.set_password(user_id, new_password)
