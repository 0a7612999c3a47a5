"""Unit tests for authentication and authorization dependencies."""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from src.api.dependencies import authorize, get_current_user, require_admin, require_roles
from src.models.user import UserRole
from src.services.exceptions import Forbidden, TokenExpiredError, TokenInvalidError, Unauthorized


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


# ---------------------------------------------------------------------------
# get_current_user
# ---------------------------------------------------------------------------

class TestGetCurrentUser:
    """Tests for bearer token resolution."""

    async def test_missing_header(self):
        with pytest.raises(Unauthorized) as exc_info:
            await get_current_user(None)

        assert exc_info.value.message == "No token provided"

    async def test_blank_token(self):
        with pytest.raises(Unauthorized) as exc_info:
            await get_current_user(_bearer("   "))

        assert exc_info.value.message == "No token provided"

    async def test_expired_token_propagates(self):
        with patch("src.api.dependencies.AuthService") as MockAuthService:
            MockAuthService.return_value.verify_token = MagicMock(side_effect=TokenExpiredError())

            with pytest.raises(Unauthorized) as exc_info:
                await get_current_user(_bearer("expired"))

        assert exc_info.value.message == "Token expired"

    async def test_invalid_token_propagates(self):
        with patch("src.api.dependencies.AuthService") as MockAuthService:
            MockAuthService.return_value.verify_token = MagicMock(side_effect=TokenInvalidError())

            with pytest.raises(Unauthorized) as exc_info:
                await get_current_user(_bearer("tampered"))

        assert exc_info.value.message == "Invalid token"

    async def test_deleted_user(self):
        with (
            patch("src.api.dependencies.AuthService") as MockAuthService,
            patch("src.api.dependencies.UserService") as MockUserService,
        ):
            MockAuthService.return_value.verify_token = MagicMock(return_value=uuid4())
            MockUserService.return_value.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(Unauthorized) as exc_info:
                await get_current_user(_bearer("valid"))

        assert exc_info.value.message == "User not found"

    async def test_returns_user(self, make_user):
        user = make_user()

        with (
            patch("src.api.dependencies.AuthService") as MockAuthService,
            patch("src.api.dependencies.UserService") as MockUserService,
        ):
            MockAuthService.return_value.verify_token = MagicMock(return_value=user.id)
            MockUserService.return_value.get_by_id = AsyncMock(return_value=user)

            result = await get_current_user(_bearer(" valid "))

        assert result is user
        MockAuthService.return_value.verify_token.assert_called_once_with("valid")


# ---------------------------------------------------------------------------
# authorize / require_roles
# ---------------------------------------------------------------------------

class TestAuthorize:
    """Tests for role checks."""

    def test_no_user(self):
        with pytest.raises(Unauthorized) as exc_info:
            authorize(None, [UserRole.ADMIN])

        assert exc_info.value.message == "Not authenticated"

    def test_admin_allowed_for_admin(self, make_user):
        user = make_user(role=UserRole.ADMIN)

        assert authorize(user, [UserRole.ADMIN]) is user

    def test_super_admin_satisfies_admin(self, make_user):
        user = make_user(role=UserRole.SUPER_ADMIN)

        assert authorize(user, [UserRole.ADMIN]) is user

    def test_admin_rejected_for_super_admin_only(self, make_user):
        user = make_user(role=UserRole.ADMIN)

        with pytest.raises(Forbidden) as exc_info:
            authorize(user, [UserRole.SUPER_ADMIN])

        assert exc_info.value.message == "Insufficient permissions"
        assert exc_info.value.status_code == 403

    async def test_require_roles_dependency(self, make_user):
        gate = require_roles(UserRole.SUPER_ADMIN)

        with pytest.raises(Forbidden):
            await gate(make_user(role=UserRole.ADMIN))

    async def test_require_admin_passes_both_roles(self, make_user):
        for role in UserRole:
            user = make_user(role=role)
            assert await require_admin(user) is user
