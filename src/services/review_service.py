"""Review (testimonial) service."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import structlog

from src.database import get_pool
from src.models.review import Review, ReviewCreate, ReviewFilter, ReviewUpdate

logger = structlog.get_logger(__name__)

PUBLIC_LIMIT = 20

_COLUMNS = """
    id, author_name, author_role, author_company, content, rating, author_photo,
    is_approved, is_featured, event_ref, approved_by, approved_at, created_at, updated_at
"""


def _row_to_review(row) -> Review:
    return Review.model_validate(dict(row))


class ReviewService:
    """Reviews shown on the public site once an admin approves them."""

    async def list_public(self, featured: Optional[bool] = None) -> list[Review]:
        """Approved reviews, featured first, capped at PUBLIC_LIMIT."""
        params: list = []
        where = "WHERE is_approved = TRUE"
        if featured is not None:
            params.append(featured)
            where += " AND is_featured = $1"

        pool = await get_pool()

        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT {_COLUMNS} FROM reviews {where}
                ORDER BY is_featured DESC, created_at DESC
                LIMIT {PUBLIC_LIMIT}
                """,
                *params,
            )

        return [_row_to_review(r) for r in rows]

    async def list_admin(
        self,
        status: ReviewFilter = ReviewFilter.ALL,
        featured: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Review], int]:
        conditions = []
        params: list = []
        if status is ReviewFilter.APPROVED:
            conditions.append("is_approved = TRUE")
        elif status is ReviewFilter.PENDING:
            conditions.append("is_approved = FALSE")
        if featured is not None:
            params.append(featured)
            conditions.append(f"is_featured = ${len(params)}")

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        pool = await get_pool()

        async with pool.acquire() as conn:
            total = await conn.fetchval(f"SELECT COUNT(*) FROM reviews {where}", *params)
            rows = await conn.fetch(
                f"""
                SELECT {_COLUMNS} FROM reviews {where}
                ORDER BY created_at DESC
                LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
                """,
                *params,
                limit,
                (page - 1) * limit,
            )

        return [_row_to_review(r) for r in rows], total

    async def get_review(self, review_id: UUID) -> Optional[Review]:
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT {_COLUMNS} FROM reviews WHERE id = $1", review_id)

        return _row_to_review(row) if row is not None else None

    async def create_review(self, data: ReviewCreate, approved_by: UUID) -> Review:
        """Admin-created reviews are approved on creation."""
        review_id = uuid4()
        now = datetime.now(timezone.utc)
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO reviews
                (id, author_name, author_role, author_company, content, rating, author_photo,
                 is_approved, is_featured, event_ref, approved_by, approved_at,
                 created_at, updated_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7, TRUE, $8, $9, $10, $11, $11, $11)
                RETURNING {_COLUMNS}
                """,
                review_id,
                data.author_name,
                data.author_role,
                data.author_company,
                data.content,
                data.rating,
                data.author_photo,
                data.is_featured,
                data.event_ref,
                approved_by,
                now,
            )

        logger.info("review_created", review_id=str(review_id))
        return _row_to_review(row)

    async def update_review(self, review_id: UUID, data: ReviewUpdate) -> Optional[Review]:
        nullable = {"author_role", "author_company", "author_photo", "event_ref"}
        fields = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in nullable
        }
        fields["updated_at"] = datetime.now(timezone.utc)
        return await self._update(review_id, fields)

    async def set_approval(
        self, review_id: UUID, is_approved: bool, approved_by: UUID
    ) -> Optional[Review]:
        """Approving records who approved and when; revoking clears both."""
        now = datetime.now(timezone.utc)
        fields = {
            "is_approved": is_approved,
            "approved_by": approved_by if is_approved else None,
            "approved_at": now if is_approved else None,
            "updated_at": now,
        }
        return await self._update(review_id, fields)

    async def set_featured(self, review_id: UUID, is_featured: bool) -> Optional[Review]:
        fields = {"is_featured": is_featured, "updated_at": datetime.now(timezone.utc)}
        return await self._update(review_id, fields)

    async def delete_review(self, review_id: UUID) -> bool:
        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute("DELETE FROM reviews WHERE id = $1", review_id)

        deleted = result == "DELETE 1"
        if deleted:
            logger.info("review_deleted", review_id=str(review_id))
        return deleted

    async def _update(self, review_id: UUID, fields: dict) -> Optional[Review]:
        set_clauses = []
        params = []
        for column, value in fields.items():
            params.append(value)
            set_clauses.append(f"{column} = ${len(params)}")
        params.append(review_id)

        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE reviews
                SET {', '.join(set_clauses)}
                WHERE id = ${len(params)}
                RETURNING {_COLUMNS}
                """,
                *params,
            )

        if row is None:
            return None

        logger.info("review_updated", review_id=str(review_id), fields=sorted(fields))
        return _row_to_review(row)
