"""Unit tests for AuthService.

Tests JWT issuance/verification, duration parsing and bcrypt password
hashing.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch
from uuid import UUID, uuid4

import jwt
import pytest

from src.services.auth_service import JWT_ALGORITHM, AuthService, parse_duration
from src.services.exceptions import TokenExpiredError, TokenInvalidError, Unauthorized

JWT_SECRET = "test-secret-key-for-jwt-unit-tests"


@pytest.fixture
def auth_service(test_settings):
    """Create an AuthService with a deterministic JWT secret."""
    with patch("src.services.auth_service.get_settings", return_value=test_settings):
        yield AuthService()


# ---------------------------------------------------------------------------
# parse_duration
# ---------------------------------------------------------------------------

class TestParseDuration:
    """Tests for expiry setting parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("15m", timedelta(minutes=15)),
            ("7d", timedelta(days=7)),
            ("12h", timedelta(hours=12)),
            ("30s", timedelta(seconds=30)),
            ("3600", timedelta(seconds=3600)),
        ],
    )
    def test_parses_supported_units(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "15x", "-5m", "1.5h"])
    def test_rejects_unknown_formats(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

class TestPasswordHashing:
    """Tests for bcrypt hash_password / verify_password."""

    def test_hash_is_bcrypt_with_configured_cost(self, auth_service):
        hashed = auth_service.hash_password("admin123")

        assert hashed.startswith("$2b$12$")
        assert hashed != "admin123"

    def test_verify_correct_password(self, auth_service):
        hashed = auth_service.hash_password("correct-horse")

        assert auth_service.verify_password("correct-horse", hashed) is True

    def test_verify_wrong_password(self, auth_service):
        hashed = auth_service.hash_password("correct-horse")

        assert auth_service.verify_password("battery-staple", hashed) is False

    def test_malformed_hash_is_a_mismatch(self, auth_service):
        assert auth_service.verify_password("anything", "not-a-bcrypt-hash") is False

    def test_overlong_password_is_a_mismatch(self, auth_service):
        hashed = auth_service.hash_password("correct-horse")

        with patch("src.services.auth_service.logger") as mock_logger:
            assert auth_service.verify_password("x" * 80, hashed) is False

        mock_logger.warning.assert_not_called()


# ---------------------------------------------------------------------------
# Token issuance and verification
# ---------------------------------------------------------------------------

class TestTokens:
    """Tests for access/refresh token minting and verification."""

    def test_access_token_round_trips_user_id(self, auth_service):
        user_id = uuid4()

        token = auth_service.issue_access_token(user_id)

        assert auth_service.verify_token(token) == user_id

    def test_access_token_claims(self, auth_service):
        user_id = uuid4()

        token = auth_service.issue_access_token(user_id)
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])

        assert payload["sub"] == str(user_id)
        assert payload["exp"] - payload["iat"] == 15 * 60
        assert "jti" in payload

    def test_refresh_token_lives_seven_days(self, auth_service):
        token = auth_service.issue_refresh_token(uuid4())
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])

        assert payload["exp"] - payload["iat"] == 7 * 24 * 3600

    def test_tokens_minted_together_are_distinct(self, auth_service):
        user_id = uuid4()

        first = auth_service.issue_refresh_token(user_id)
        second = auth_service.issue_refresh_token(user_id)

        assert first != second

    def test_expired_token(self, auth_service):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {"sub": str(uuid4()), "iat": past, "exp": past + timedelta(minutes=1)},
            JWT_SECRET,
            algorithm=JWT_ALGORITHM,
        )

        with pytest.raises(TokenExpiredError) as exc_info:
            auth_service.verify_token(token)

        assert exc_info.value.message == "Token expired"
        assert isinstance(exc_info.value, Unauthorized)

    def test_token_signed_with_other_secret(self, auth_service):
        token = jwt.encode(
            {"sub": str(uuid4()), "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            "some-other-secret",
            algorithm=JWT_ALGORITHM,
        )

        with pytest.raises(TokenInvalidError) as exc_info:
            auth_service.verify_token(token)

        assert exc_info.value.message == "Invalid token"

    def test_garbage_token(self, auth_service):
        with pytest.raises(TokenInvalidError):
            auth_service.verify_token("not.a.jwt")

    def test_token_without_sub(self, auth_service):
        token = jwt.encode(
            {"exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            JWT_SECRET,
            algorithm=JWT_ALGORITHM,
        )

        with pytest.raises(TokenInvalidError):
            auth_service.verify_token(token)

    def test_token_with_non_uuid_sub(self, auth_service):
        token = jwt.encode(
            {"sub": "admin", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            JWT_SECRET,
            algorithm=JWT_ALGORITHM,
        )

        with pytest.raises(TokenInvalidError):
            auth_service.verify_token(token)

    def test_verify_returns_uuid(self, auth_service):
        token = auth_service.issue_access_token(str(uuid4()))

        assert isinstance(auth_service.verify_token(token), UUID)
