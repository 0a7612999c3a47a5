"""FastAPI dependencies for authentication and authorization."""

from typing import Iterable, Optional

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.models.user import User, UserRole
from src.services.auth_service import AuthService
from src.services.exceptions import Forbidden, Unauthorized
from src.services.user_service import UserService

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """Resolve the user behind the ``Authorization: Bearer`` header.

    Args:
        credentials: Bearer token from Authorization header, if any

    Returns:
        Authenticated User model

    Raises:
        Unauthorized: "No token provided", "Token expired", "Invalid token"
            or "User not found"
    """
    if credentials is None or not credentials.credentials.strip():
        raise Unauthorized("No token provided")

    user_id = AuthService().verify_token(credentials.credentials.strip())

    user = await UserService().get_by_id(user_id)
    if user is None:
        raise Unauthorized("User not found")

    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user


def authorize(user: Optional[User], allowed_roles: Iterable[UserRole]) -> User:
    """Check that an authenticated user holds one of ``allowed_roles``.

    SUPER_ADMIN satisfies any check that admits ADMIN.

    Raises:
        Unauthorized: If no user has been authenticated
        Forbidden: If the user's role is not permitted
    """
    if user is None:
        raise Unauthorized("Not authenticated")

    if not any(user.role.satisfies(role) for role in allowed_roles):
        logger.warning("authorization_denied", user_id=str(user.id), role=user.role.value)
        raise Forbidden("Insufficient permissions")

    return user


def require_roles(*roles: UserRole):
    """Build a dependency that authenticates and then checks the role."""

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        return authorize(current_user, roles)

    return dependency


require_admin = require_roles(UserRole.ADMIN)