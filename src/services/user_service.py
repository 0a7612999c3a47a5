"""Credential store: admin user persistence."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import asyncpg
import structlog

from src.database import get_pool
from src.models.user import User, UserCredentials, UserRole
from src.services.auth_service import AuthService
from src.services.exceptions import Conflict

logger = structlog.get_logger(__name__)

_PUBLIC_COLUMNS = "id, email, name, role, avatar, last_login, created_at, updated_at"


def _row_to_user(row) -> User:
    return User(
        id=row["id"],
        email=row["email"],
        name=row["name"],
        role=UserRole(row["role"]),
        avatar=row["avatar"],
        last_login=row["last_login"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class UserService:
    """Service for user records.

    Emails are compared case-insensitively and stored lower-cased. The
    password is hashed here whenever it is set, and only then.
    """

    def __init__(self):
        self.auth_service = AuthService()

    async def create_user(
        self,
        email: str,
        password: str,
        name: str,
        role: UserRole = UserRole.ADMIN,
    ) -> User:
        """Create a new user with a hashed password.

        Raises:
            Conflict: If another user already has this email
        """
        user_id = uuid4()
        now = datetime.now(timezone.utc)
        email = email.strip().lower()
        password_hash = self.auth_service.hash_password(password)

        pool = await get_pool()

        try:
            async with pool.acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO users (id, email, password_hash, name, role, created_at, updated_at)
                    VALUES ($1, $2, $3, $4, $5, $6, $7)
                    """,
                    user_id,
                    email,
                    password_hash,
                    name,
                    role.value,
                    now,
                    now,
                )
        except asyncpg.exceptions.UniqueViolationError:
            raise Conflict("Email already in use")

        logger.info("user_created", user_id=str(user_id), role=role.value)

        return User(
            id=user_id,
            email=email,
            name=name,
            role=role,
            created_at=now,
            updated_at=now,
        )

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get the public view of a user, or None if absent."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE id = $1",
                user_id,
            )

        if row is None:
            return None
        return _row_to_user(row)

    async def get_credentials_by_email(self, email: str) -> Optional[UserCredentials]:
        """Look up a user and their secrets by email (case-insensitive)."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                SELECT {_PUBLIC_COLUMNS}, password_hash, refresh_token
                FROM users
                WHERE LOWER(email) = LOWER($1)
                """,
                email.strip(),
            )

        if row is None:
            return None
        return UserCredentials(
            user=_row_to_user(row),
            password_hash=row["password_hash"],
            refresh_token=row["refresh_token"],
        )

    async def get_credentials(self, user_id: UUID) -> Optional[UserCredentials]:
        """Look up a user and their secrets by id."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                SELECT {_PUBLIC_COLUMNS}, password_hash, refresh_token
                FROM users
                WHERE id = $1
                """,
                user_id,
            )

        if row is None:
            return None
        return UserCredentials(
            user=_row_to_user(row),
            password_hash=row["password_hash"],
            refresh_token=row["refresh_token"],
        )

    async def email_exists(self, email: str, exclude_user_id: Optional[UUID] = None) -> bool:
        pool = await get_pool()

        async with pool.acquire() as conn:
            found = await conn.fetchval(
                """
                SELECT EXISTS (
                    SELECT 1 FROM users
                    WHERE LOWER(email) = LOWER($1) AND ($2::uuid IS NULL OR id <> $2)
                )
                """,
                email.strip(),
                exclude_user_id,
            )

        return bool(found)

    async def record_login(self, user_id: UUID, refresh_token: str) -> Optional[User]:
        """Stamp last_login and store the refresh token, replacing any prior one."""
        now = datetime.now(timezone.utc)
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE users
                SET last_login = $1, refresh_token = $2, updated_at = $1
                WHERE id = $3
                RETURNING {_PUBLIC_COLUMNS}
                """,
                now,
                refresh_token,
                user_id,
            )

        if row is None:
            return None
        return _row_to_user(row)

    async def clear_refresh_token(self, user_id: UUID) -> None:
        pool = await get_pool()

        async with pool.acquire() as conn:
            await conn.execute(
                "UPDATE users SET refresh_token = NULL, updated_at = $1 WHERE id = $2",
                datetime.now(timezone.utc),
                user_id,
            )

        logger.info("refresh_token_cleared", user_id=str(user_id))

    async def set_password(self, user_id: UUID, password: str) -> None:
        """Re-hash and store a new password, invalidating the refresh token."""
        password_hash = self.auth_service.hash_password(password)
        pool = await get_pool()

        async with pool.acquire() as conn:
            await conn.execute(
                """
                UPDATE users
                SET password_hash = $1, refresh_token = NULL, updated_at = $2
                WHERE id = $3
                """,
                password_hash,
                datetime.now(timezone.utc),
                user_id,
            )

        logger.info("password_changed", user_id=str(user_id))

    async def update_profile(
        self,
        user_id: UUID,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[User]:
        """Update name and/or email. Never touches the password hash.

        Returns:
            Updated User, or None if the user does not exist

        Raises:
            Conflict: If the new email belongs to another user
        """
        set_clauses = []
        params = []
        param_idx = 1

        if name is not None:
            set_clauses.append(f"name = ${param_idx}")
            params.append(name)
            param_idx += 1

        if email is not None:
            set_clauses.append(f"email = ${param_idx}")
            params.append(email.strip().lower())
            param_idx += 1

        if not set_clauses:
            return await self.get_by_id(user_id)

        set_clauses.append(f"updated_at = ${param_idx}")
        params.append(datetime.now(timezone.utc))
        param_idx += 1

        params.append(user_id)

        query = f"""
            UPDATE users
            SET {', '.join(set_clauses)}
            WHERE id = ${param_idx}
            RETURNING {_PUBLIC_COLUMNS}
        """

        pool = await get_pool()

        try:
            async with pool.acquire() as conn:
                row = await conn.fetchrow(query, *params)
        except asyncpg.exceptions.UniqueViolationError:
            raise Conflict("Email already in use")

        if row is None:
            return None

        logger.info(
            "user_profile_updated",
            user_id=str(user_id),
            fields_updated=[c.split(" = ")[0] for c in set_clauses if "updated_at" not in c],
        )

        return _row_to_user(row)

