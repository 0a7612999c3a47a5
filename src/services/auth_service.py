"""Authentication service for JWT tokens and password hashing."""

import re
import uuid
from datetime import datetime, timedelta, timezone
from uuid import UUID

import bcrypt
import jwt
import structlog

from src.config import get_settings
from src.models.validators import PASSWORD_MAX_BYTES
from src.services.exceptions import TokenExpiredError, TokenInvalidError

logger = structlog.get_logger(__name__)

JWT_ALGORITHM = "HS256"

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def parse_duration(value: str) -> timedelta:
    """Parse an expiry setting such as "15m", "7d", "12h" or "3600".

    A bare number is read as seconds.

    Raises:
        ValueError: If the value is not in a recognised format
    """
    match = _DURATION_PATTERN.match(str(value))
    if match is None:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


class AuthService:
    """Service for password hashing and signed token issuance/verification.

    Both token classes carry the user id in ``sub``, plus the registered
    ``iat``/``exp``/``jti`` claims, and are signed with the same secret.
    Access tokens are short-lived; refresh tokens are long-lived and are
    only honoured while they match the single copy stored on the user.
    """

    def __init__(self):
        self.settings = get_settings()

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with the configured work factor.

        Args:
            password: Plain-text password to hash

        Returns:
            Bcrypt hash string
        """
        salt = bcrypt.gensalt(rounds=self.settings.bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a password against a bcrypt hash.

        A malformed stored hash counts as a mismatch rather than an error.
        Passwords longer than bcrypt accepts can never match.
        """
        candidate = password.encode("utf-8")
        if len(candidate) > PASSWORD_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(
                candidate,
                password_hash.encode("utf-8"),
            )
        except ValueError:
            logger.warning("password_hash_malformed")
            return False

    @property
    def access_token_ttl(self) -> timedelta:
        return parse_duration(self.settings.jwt_expires_in)

    @property
    def refresh_token_ttl(self) -> timedelta:
        return parse_duration(self.settings.jwt_refresh_expires_in)

    def _issue(self, user_id: UUID | str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + ttl,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self.settings.jwt_secret, algorithm=JWT_ALGORITHM)

    def issue_access_token(self, user_id: UUID | str) -> str:
        """Create a short-lived access token for ``user_id``."""
        token = self._issue(user_id, self.access_token_ttl)
        logger.debug(
            "access_token_issued",
            user_id=str(user_id),
            expires_seconds=int(self.access_token_ttl.total_seconds()),
        )
        return token

    def issue_refresh_token(self, user_id: UUID | str) -> str:
        """Create a long-lived refresh token for ``user_id``."""
        token = self._issue(user_id, self.refresh_token_ttl)
        logger.debug(
            "refresh_token_issued",
            user_id=str(user_id),
            expires_seconds=int(self.refresh_token_ttl.total_seconds()),
        )
        return token

    def verify_token(self, token: str) -> UUID:
        """Check signature and expiry and return the user id claim.

        Args:
            token: Encoded JWT string

        Returns:
            The user id carried in ``sub``

        Raises:
            TokenExpiredError: If the token is past its expiry
            TokenInvalidError: If the token is malformed, tampered with,
                or has no usable ``sub`` claim
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidTokenError:
            raise TokenInvalidError()

        try:
            return UUID(payload["sub"])
        except (TypeError, ValueError):
            raise TokenInvalidError()
