"""Team member service."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import structlog

from src.database import get_pool
from src.models.team import OrderItem, TeamMember, TeamMemberCreate, TeamMemberUpdate

logger = structlog.get_logger(__name__)

_COLUMNS = """
    id, name, role, bio, image, year, social, "order", active, display_in_top6,
    member_category, created_at, updated_at
"""


def _row_to_member(row) -> TeamMember:
    return TeamMember.model_validate(dict(row))


class TeamService:
    """CRUD and ordering for the public team page."""

    async def list_members(self, include_inactive: bool = False) -> list[TeamMember]:
        where = "" if include_inactive else "WHERE active = TRUE"
        pool = await get_pool()

        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f'SELECT {_COLUMNS} FROM team_members {where} ORDER BY "order" ASC, created_at ASC'
            )

        return [_row_to_member(r) for r in rows]

    async def get_member(self, member_id: UUID) -> Optional[TeamMember]:
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM team_members WHERE id = $1",
                member_id,
            )

        return _row_to_member(row) if row is not None else None

    async def create_member(self, data: TeamMemberCreate) -> TeamMember:
        member_id = uuid4()
        now = datetime.now(timezone.utc)
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO team_members
                (id, name, role, bio, image, year, social, "order", active,
                 display_in_top6, member_category, created_at, updated_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $12)
                RETURNING {_COLUMNS}
                """,
                member_id,
                data.name,
                data.role,
                data.bio,
                data.image,
                data.year,
                data.social.model_dump(exclude_none=True),
                data.order,
                data.active,
                data.display_in_top6,
                data.member_category.value if data.member_category else None,
                now,
            )

        logger.info("team_member_created", member_id=str(member_id))
        return _row_to_member(row)

    async def update_member(self, member_id: UUID, data: TeamMemberUpdate) -> Optional[TeamMember]:
        fields = {
            key: value
            for key, value in data.model_dump(exclude_unset=True, mode="json").items()
            if value is not None or key in ("year", "member_category", "social")
        }
        if "social" in fields:
            fields["social"] = data.social.model_dump(exclude_none=True) if data.social else {}
        fields["updated_at"] = datetime.now(timezone.utc)

        set_clauses = []
        params = []
        for column, value in fields.items():
            params.append(value)
            set_clauses.append(f'"{column}" = ${len(params)}')
        params.append(member_id)

        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE team_members
                SET {', '.join(set_clauses)}
                WHERE id = ${len(params)}
                RETURNING {_COLUMNS}
                """,
                *params,
            )

        if row is None:
            return None

        logger.info("team_member_updated", member_id=str(member_id))
        return _row_to_member(row)

    async def delete_member(self, member_id: UUID) -> bool:
        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute("DELETE FROM team_members WHERE id = $1", member_id)

        deleted = result == "DELETE 1"
        if deleted:
            logger.info("team_member_deleted", member_id=str(member_id))
        return deleted

    async def reorder(self, items: list[OrderItem]) -> None:
        """Set the display order of several members in one transaction."""
        now = datetime.now(timezone.utc)
        pool = await get_pool()

        async with pool.acquire() as conn:
            async with conn.transaction():
                await conn.executemany(
                    'UPDATE team_members SET "order" = $1, updated_at = $2 WHERE id = $3',
                    [(item.order, now, item.id) for item in items],
                )

        logger.info("team_reordered", count=len(items))
