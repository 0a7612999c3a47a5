"""Unit tests for CredentialService.

Runs the credential flows against an in-memory user store so the
single-slot refresh token behaviour can be checked across calls.
"""

from datetime import datetime, timezone
from typing import Optional
from unittest.mock import patch
from uuid import UUID, uuid4

import pytest

from src.models.user import User, UserCredentials, UserRole
from src.services.auth_service import AuthService
from src.services.credential_service import (
    INVALID_CREDENTIALS,
    INVALID_REFRESH_TOKEN,
    CredentialService,
)
from src.services.exceptions import Conflict, NotFound, Unauthorized


class InMemoryUserService:
    """Stand-in for UserService keeping rows in a dict."""

    def __init__(self, auth_service: AuthService):
        self.auth_service = auth_service
        self.rows: dict[UUID, dict] = {}

    def _user(self, row: dict) -> User:
        return User(**{k: v for k, v in row.items() if k not in ("password_hash", "refresh_token")})

    def _credentials(self, row: dict) -> UserCredentials:
        return UserCredentials(
            user=self._user(row),
            password_hash=row["password_hash"],
            refresh_token=row["refresh_token"],
        )

    async def create_user(self, email, password, name, role=UserRole.ADMIN) -> User:
        email = email.strip().lower()
        if any(r["email"] == email for r in self.rows.values()):
            raise Conflict("Email already in use")
        now = datetime.now(timezone.utc)
        row = {
            "id": uuid4(),
            "email": email,
            "name": name,
            "role": role,
            "avatar": None,
            "last_login": None,
            "created_at": now,
            "updated_at": now,
            "password_hash": self.auth_service.hash_password(password),
            "refresh_token": None,
        }
        self.rows[row["id"]] = row
        return self._user(row)

    async def get_by_id(self, user_id) -> Optional[User]:
        row = self.rows.get(user_id)
        return self._user(row) if row else None

    async def get_credentials_by_email(self, email) -> Optional[UserCredentials]:
        for row in self.rows.values():
            if row["email"] == email.strip().lower():
                return self._credentials(row)
        return None

    async def get_credentials(self, user_id) -> Optional[UserCredentials]:
        row = self.rows.get(user_id)
        return self._credentials(row) if row else None

    async def email_exists(self, email, exclude_user_id=None) -> bool:
        return any(
            r["email"] == email.lower() and r["id"] != exclude_user_id for r in self.rows.values()
        )

    async def record_login(self, user_id, refresh_token) -> Optional[User]:
        row = self.rows.get(user_id)
        if row is None:
            return None
        row["last_login"] = datetime.now(timezone.utc)
        row["refresh_token"] = refresh_token
        return self._user(row)

    async def clear_refresh_token(self, user_id) -> None:
        self.rows[user_id]["refresh_token"] = None

    async def set_password(self, user_id, password) -> None:
        row = self.rows[user_id]
        row["password_hash"] = self.auth_service.hash_password(password)
        row["refresh_token"] = None

    async def update_profile(self, user_id, name=None, email=None) -> Optional[User]:
        row = self.rows.get(user_id)
        if row is None:
            return None
        if name is not None:
            row["name"] = name
        if email is not None:
            row["email"] = email.lower()
        return self._user(row)


@pytest.fixture
def service(test_settings):
    """CredentialService wired to the in-memory store."""
    with (
        patch("src.services.credential_service.get_settings", return_value=test_settings),
        patch("src.services.auth_service.get_settings", return_value=test_settings),
        patch("src.services.credential_service.UserService"),
    ):
        credential_service = CredentialService()
        credential_service.auth_service = AuthService()
        credential_service.user_service = InMemoryUserService(credential_service.auth_service)
        yield credential_service


@pytest.fixture
async def seeded(service):
    """Service with the bootstrap admin already created."""
    await service.seed_admin()
    return service


# ---------------------------------------------------------------------------
# seed_admin
# ---------------------------------------------------------------------------

class TestSeedAdmin:
    """Tests for the bootstrap admin account."""

    async def test_creates_super_admin(self, service):
        user = await service.seed_admin()

        assert user.email == "admin@codingcouncil.com"
        assert user.role == UserRole.SUPER_ADMIN
        assert user.name == "Admin"

    async def test_is_idempotent(self, service):
        await service.seed_admin()
        second = await service.seed_admin()

        assert second is None
        assert len(service.user_service.rows) == 1

    async def test_concurrent_seed_conflict_is_a_skip(self, service):
        async def already_taken(**kwargs):
            raise Conflict("Email already in use")

        service.user_service.create_user = already_taken

        assert await service.seed_admin() is None


# ---------------------------------------------------------------------------
# login
# ---------------------------------------------------------------------------

class TestLogin:
    """Tests for CredentialService.login."""

    async def test_returns_user_and_token_pair(self, seeded):
        user, access_token, refresh_token = await seeded.login("admin@codingcouncil.com", "admin123")

        assert user.role == UserRole.SUPER_ADMIN
        assert user.last_login is not None
        assert seeded.auth_service.verify_token(access_token) == user.id
        assert seeded.user_service.rows[user.id]["refresh_token"] == refresh_token

    async def test_email_lookup_ignores_case(self, seeded):
        user, _, _ = await seeded.login("Admin@CodingCouncil.com", "admin123")

        assert user.email == "admin@codingcouncil.com"

    async def test_wrong_password_and_unknown_email_fail_identically(self, seeded):
        with pytest.raises(Unauthorized) as wrong_password:
            await seeded.login("admin@codingcouncil.com", "wrong")
        with pytest.raises(Unauthorized) as unknown_email:
            await seeded.login("nobody@codingcouncil.com", "admin123")

        assert wrong_password.value.message == unknown_email.value.message == INVALID_CREDENTIALS


# ---------------------------------------------------------------------------
# refresh / logout
# ---------------------------------------------------------------------------

class TestRefresh:
    """Tests for the single-slot refresh token."""

    async def test_current_refresh_token_yields_access_token(self, seeded):
        user, _, refresh_token = await seeded.login("admin@codingcouncil.com", "admin123")

        access_token = await seeded.refresh(refresh_token)

        assert seeded.auth_service.verify_token(access_token) == user.id
        assert seeded.user_service.rows[user.id]["refresh_token"] == refresh_token

    async def test_superseded_refresh_token_is_rejected(self, seeded):
        _, _, first_refresh = await seeded.login("admin@codingcouncil.com", "admin123")
        _, _, second_refresh = await seeded.login("admin@codingcouncil.com", "admin123")

        with pytest.raises(Unauthorized) as exc_info:
            await seeded.refresh(first_refresh)

        assert exc_info.value.message == INVALID_REFRESH_TOKEN
        assert await seeded.refresh(second_refresh)

    async def test_refresh_after_logout_is_rejected(self, seeded):
        user, _, refresh_token = await seeded.login("admin@codingcouncil.com", "admin123")

        await seeded.logout(user.id)

        with pytest.raises(Unauthorized) as exc_info:
            await seeded.refresh(refresh_token)
        assert exc_info.value.message == INVALID_REFRESH_TOKEN

    async def test_garbage_refresh_token(self, seeded):
        with pytest.raises(Unauthorized) as exc_info:
            await seeded.refresh("garbage")

        assert exc_info.value.message == INVALID_REFRESH_TOKEN

    async def test_refresh_token_of_deleted_user(self, seeded):
        user, _, refresh_token = await seeded.login("admin@codingcouncil.com", "admin123")
        del seeded.user_service.rows[user.id]

        with pytest.raises(Unauthorized):
            await seeded.refresh(refresh_token)


# ---------------------------------------------------------------------------
# Profile and password
# ---------------------------------------------------------------------------

class TestProfileAndPassword:
    """Tests for update_profile and change_password."""

    async def test_update_profile_does_not_touch_password(self, seeded):
        user, _, _ = await seeded.login("admin@codingcouncil.com", "admin123")
        hash_before = seeded.user_service.rows[user.id]["password_hash"]

        updated = await seeded.update_profile(user.id, name="Council Admin")

        assert updated.name == "Council Admin"
        assert seeded.user_service.rows[user.id]["password_hash"] == hash_before

    async def test_update_profile_email_collision(self, seeded):
        admin, _, _ = await seeded.login("admin@codingcouncil.com", "admin123")
        await seeded.user_service.create_user("other@codingcouncil.com", "password1", "Other")

        with pytest.raises(Conflict) as exc_info:
            await seeded.update_profile(admin.id, email="other@codingcouncil.com")

        assert exc_info.value.message == "Email already in use"

    async def test_update_profile_missing_user(self, seeded):
        with pytest.raises(NotFound):
            await seeded.update_profile(uuid4(), name="Ghost")

    async def test_wrong_current_password_changes_nothing(self, seeded):
        user, _, refresh_token = await seeded.login("admin@codingcouncil.com", "admin123")
        row = seeded.user_service.rows[user.id]
        hash_before = row["password_hash"]

        with pytest.raises(Unauthorized) as exc_info:
            await seeded.change_password(user.id, "not-the-password", "new-password-123")

        assert exc_info.value.message == "Invalid current password"
        assert row["password_hash"] == hash_before
        assert row["refresh_token"] == refresh_token

    async def test_change_password_forces_relogin(self, seeded):
        user, _, refresh_token = await seeded.login("admin@codingcouncil.com", "admin123")

        await seeded.change_password(user.id, "admin123", "new-password-123")

        with pytest.raises(Unauthorized):
            await seeded.refresh(refresh_token)
        with pytest.raises(Unauthorized):
            await seeded.login("admin@codingcouncil.com", "admin123")
        relogged, _, _ = await seeded.login("admin@codingcouncil.com", "new-password-123")
        assert relogged.id == user.id
