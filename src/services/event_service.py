"""Event management service."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import structlog

from src.config import get_settings
from src.database import get_pool
from src.models.event import Event, EventCategory, EventCreate, EventStatus, EventUpdate

logger = structlog.get_logger(__name__)

_COLUMNS = """
    id, title, description, short_description, date, end_date, time, mode,
    location, category, status, image, registration_link, max_participants,
    tags, winners, gallery, featured, priority, timezone, last_modified_by,
    last_modified_at, created_at, updated_at
"""

_NULLABLE = {"end_date", "location", "registration_link", "max_participants"}


def _row_to_event(row) -> Event:
    return Event.model_validate(dict(row))


class EventService:
    """CRUD for events plus the public filtered listing."""

    async def list_events(
        self,
        status: Optional[EventStatus] = None,
        category: Optional[EventCategory] = None,
        featured: Optional[bool] = None,
        page: int = 1,
        limit: int = 100,
    ) -> tuple[list[Event], int]:
        """List events with optional filters and pagination.

        Completed events are listed newest first; everything else
        soonest first.

        Returns:
            Tuple of (events on this page, total matching count)
        """
        conditions = []
        params: list = []

        if status is not None:
            params.append(status.value)
            conditions.append(f"status = ${len(params)}")
        if category is not None:
            params.append(category.value)
            conditions.append(f"category = ${len(params)}")
        if featured is not None:
            params.append(featured)
            conditions.append(f"featured = ${len(params)}")

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        direction = "DESC" if status is EventStatus.COMPLETED else "ASC"

        pool = await get_pool()

        async with pool.acquire() as conn:
            total = await conn.fetchval(f"SELECT COUNT(*) FROM events {where}", *params)
            rows = await conn.fetch(
                f"""
                SELECT {_COLUMNS}
                FROM events
                {where}
                ORDER BY date {direction}
                LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
                """,
                *params,
                limit,
                (page - 1) * limit,
            )

        return [_row_to_event(r) for r in rows], total

    async def get_event(self, event_id: UUID) -> Optional[Event]:
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM events WHERE id = $1",
                event_id,
            )

        if row is None:
            return None
        return _row_to_event(row)

    async def create_event(self, data: EventCreate, modified_by: Optional[str] = None) -> Event:
        """Insert a new event."""
        event_id = uuid4()
        now = datetime.now(timezone.utc)
        tz = data.timezone or get_settings().default_timezone

        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO events
                (id, title, description, short_description, date, end_date, time, mode,
                 location, category, status, image, registration_link, max_participants,
                 tags, winners, gallery, featured, priority, timezone, last_modified_by,
                 last_modified_at, created_at, updated_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14,
                        $15, $16, $17, $18, $19, $20, $21, $22, $23, $23)
                RETURNING {_COLUMNS}
                """,
                event_id,
                data.title,
                data.description,
                data.short_description,
                data.date,
                data.end_date,
                data.time,
                data.mode.value,
                data.location,
                data.category.value,
                data.status.value,
                data.image,
                data.registration_link,
                data.max_participants,
                data.tags,
                [w.model_dump() for w in data.winners],
                data.gallery,
                data.featured,
                data.priority,
                tz,
                modified_by,
                now,
                now,
            )

        logger.info("event_created", event_id=str(event_id), category=data.category.value)
        return _row_to_event(row)

    async def update_event(
        self, event_id: UUID, data: EventUpdate, modified_by: Optional[str] = None
    ) -> Optional[Event]:
        """Apply the fields that were explicitly provided.

        Returns:
            Updated Event, or None if it does not exist
        """
        fields = {
            key: value
            for key, value in data.model_dump(exclude_unset=True, mode="json").items()
            if value is not None or key in _NULLABLE
        }
        for key in ("date", "end_date"):
            if key in fields:
                fields[key] = getattr(data, key)

        now = datetime.now(timezone.utc)
        fields["last_modified_by"] = modified_by
        fields["last_modified_at"] = now
        fields["updated_at"] = now

        set_clauses = []
        params = []
        for column, value in fields.items():
            params.append(value)
            set_clauses.append(f"{column} = ${len(params)}")
        params.append(event_id)

        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE events
                SET {', '.join(set_clauses)}
                WHERE id = ${len(params)}
                RETURNING {_COLUMNS}
                """,
                *params,
            )

        if row is None:
            return None

        logger.info(
            "event_updated",
            event_id=str(event_id),
            fields_updated=[k for k in fields if k not in ("updated_at", "last_modified_at", "last_modified_by")],
        )
        return _row_to_event(row)

    async def delete_event(self, event_id: UUID) -> bool:
        """Delete an event and, by cascade, its registrations."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute("DELETE FROM events WHERE id = $1", event_id)

        deleted = result == "DELETE 1"
        if deleted:
            logger.info("event_deleted", event_id=str(event_id))
        return deleted
