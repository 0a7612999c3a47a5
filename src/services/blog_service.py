"""Blog post service."""

import re
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import asyncpg
import structlog

from src.database import get_pool
from src.models.blog import Author, BlogPost, BlogPostCreate, BlogPostUpdate
from src.services.exceptions import Conflict, ValidationFailed

logger = structlog.get_logger(__name__)

_LIST_COLUMNS = """
    id, title, slug, excerpt, cover_image, author, category, tags, published,
    published_at, read_time, views, created_at, updated_at
"""
_COLUMNS = _LIST_COLUMNS + ", content"

DUPLICATE_SLUG = "A post with this slug already exists"


def slugify(title: str) -> str:
    """Lower-case a title and join its alphanumeric runs with hyphens."""
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def _row_to_post(row) -> BlogPost:
    return BlogPost.model_validate(dict(row))


class BlogService:
    """Published and draft blog posts."""

    async def list_posts(
        self,
        published_only: bool = True,
        category: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[BlogPost], int]:
        """List posts without their content body.

        Public listings are ordered by publish date, admin listings
        (``published_only=False``) by creation date.
        """
        conditions = []
        params: list = []
        if published_only:
            conditions.append("published = TRUE")
        if category:
            params.append(category)
            conditions.append(f"category = ${len(params)}")

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        order = "published_at DESC NULLS LAST" if published_only else "created_at DESC"

        pool = await get_pool()

        async with pool.acquire() as conn:
            total = await conn.fetchval(f"SELECT COUNT(*) FROM blog_posts {where}", *params)
            rows = await conn.fetch(
                f"""
                SELECT {_LIST_COLUMNS} FROM blog_posts {where}
                ORDER BY {order}
                LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
                """,
                *params,
                limit,
                (page - 1) * limit,
            )

        return [_row_to_post(r) for r in rows], total

    async def view_by_slug(self, slug: str) -> Optional[BlogPost]:
        """Fetch a published post and count the view."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE blog_posts SET views = views + 1
                WHERE slug = $1 AND published = TRUE
                RETURNING {_COLUMNS}
                """,
                slug.lower(),
            )

        return _row_to_post(row) if row is not None else None

    async def categories(self) -> list[str]:
        pool = await get_pool()

        async with pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT DISTINCT category FROM blog_posts WHERE published = TRUE ORDER BY category"
            )

        return [row["category"] for row in rows]

    async def create_post(self, data: BlogPostCreate, author: Author) -> BlogPost:
        """Raises Conflict if the slug is taken."""
        post_id = uuid4()
        now = datetime.now(timezone.utc)
        slug = slugify(data.slug or data.title)
        if not slug:
            raise ValidationFailed("Title must contain at least one letter or digit")

        pool = await get_pool()

        try:
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO blog_posts
                    (id, title, slug, content, excerpt, cover_image, author, category, tags,
                     published, published_at, read_time, views, created_at, updated_at)
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, 0, $13, $13)
                    RETURNING {_COLUMNS}
                    """,
                    post_id,
                    data.title,
                    slug,
                    data.content,
                    data.excerpt,
                    data.cover_image,
                    author.model_dump(),
                    data.category,
                    data.tags,
                    data.published,
                    now if data.published else None,
                    data.read_time,
                    now,
                )
        except asyncpg.exceptions.UniqueViolationError:
            raise Conflict(DUPLICATE_SLUG)

        logger.info("blog_post_created", post_id=str(post_id), published=data.published)
        return _row_to_post(row)

    async def update_post(self, post_id: UUID, data: BlogPostUpdate) -> Optional[BlogPost]:
        """Apply provided fields. Publishing stamps published_at when unset."""
        fields = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key == "published_at"
        }
        if "slug" in fields:
            fields["slug"] = slugify(fields["slug"])
            if not fields["slug"]:
                raise ValidationFailed("Slug must contain at least one letter or digit")

        now = datetime.now(timezone.utc)
        fields["updated_at"] = now

        set_clauses = []
        params = []
        for column, value in fields.items():
            params.append(value)
            set_clauses.append(f"{column} = ${len(params)}")
        if data.published and "published_at" not in fields:
            params.append(now)
            set_clauses.append(f"published_at = COALESCE(published_at, ${len(params)})")
        params.append(post_id)

        pool = await get_pool()

        try:
            async with pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE blog_posts
                    SET {', '.join(set_clauses)}
                    WHERE id = ${len(params)}
                    RETURNING {_COLUMNS}
                    """,
                    *params,
                )
        except asyncpg.exceptions.UniqueViolationError:
            raise Conflict(DUPLICATE_SLUG)

        if row is None:
            return None

        logger.info("blog_post_updated", post_id=str(post_id))
        return _row_to_post(row)

    async def delete_post(self, post_id: UUID) -> bool:
        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute("DELETE FROM blog_posts WHERE id = $1", post_id)

        deleted = result == "DELETE 1"
        if deleted:
            logger.info("blog_post_deleted", post_id=str(post_id))
        return deleted
