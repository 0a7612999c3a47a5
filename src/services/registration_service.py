"""Event registration service with capacity and duplicate checks."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import asyncpg
import structlog

from src.database import get_pool
from src.models.event import EventStatus
from src.models.registration import (
    EventSummary,
    Registration,
    RegistrationCreate,
    RegistrationStats,
    RegistrationStatus,
)
from src.services.exceptions import Conflict, DomainError, NotFound

logger = structlog.get_logger(__name__)

ALREADY_REGISTERED = "Already registered for this event"

_COLUMNS = """
    id, event_id, name, email, phone, college, linkedin_url, food_preference,
    status, registered_at, created_at, updated_at
"""


def _row_to_registration(row) -> Registration:
    data = dict(row)
    event_title = data.pop("event_title", None)
    event_date = data.pop("event_date", None)
    registration = Registration.model_validate(data)
    if event_title is not None:
        registration.event = EventSummary(
            id=registration.event_id, title=event_title, date=event_date
        )
    return registration


class RegistrationService:
    """Creates and manages event registrations.

    ``create`` runs its checks as plain reads with no lock. The unique
    index on (event_id, email) is what guarantees a single row per pair;
    the pre-check only produces a friendlier error first.
    """

    async def create(self, data: RegistrationCreate) -> Registration:
        """Register someone for an upcoming event.

        Raises:
            NotFound: "Event not found"
            DomainError: "Event is not accepting registrations" or "Event is full"
            Conflict: "Already registered for this event"
        """
        pool = await get_pool()

        async with pool.acquire() as conn:
            event = await conn.fetchrow(
                "SELECT id, status, max_participants FROM events WHERE id = $1",
                data.event_id,
            )
            if event is None:
                raise NotFound("Event not found")

            if event["status"] != EventStatus.UPCOMING.value:
                raise DomainError("Event is not accepting registrations")

            max_participants = event["max_participants"]
            if max_participants:
                count = await conn.fetchval(
                    """
                    SELECT COUNT(*) FROM registrations
                    WHERE event_id = $1 AND status <> $2
                    """,
                    data.event_id,
                    RegistrationStatus.CANCELLED.value,
                )
                if count >= max_participants:
                    logger.info(
                        "registration_rejected_full",
                        event_id=str(data.event_id),
                        capacity=max_participants,
                    )
                    raise DomainError("Event is full")

            existing = await conn.fetchval(
                "SELECT id FROM registrations WHERE event_id = $1 AND email = $2",
                data.event_id,
                data.email,
            )
            if existing is not None:
                raise Conflict(ALREADY_REGISTERED)

            registration_id = uuid4()
            now = datetime.now(timezone.utc)

            try:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO registrations
                    (id, event_id, name, email, phone, college, linkedin_url,
                     food_preference, status, registered_at, created_at, updated_at)
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $10, $10)
                    RETURNING {_COLUMNS}
                    """,
                    registration_id,
                    data.event_id,
                    data.name,
                    data.email,
                    data.phone,
                    data.college,
                    data.linkedin_url,
                    data.food_preference.value if data.food_preference else None,
                    RegistrationStatus.PENDING.value,
                    now,
                )
            except asyncpg.exceptions.UniqueViolationError:
                logger.info("registration_duplicate_race", event_id=str(data.event_id))
                raise Conflict(ALREADY_REGISTERED)

        logger.info(
            "registration_created",
            registration_id=str(registration_id),
            event_id=str(data.event_id),
        )
        return _row_to_registration(row)

    async def list_for_event(
        self,
        event_id: UUID,
        page: int = 1,
        limit: int = 20,
        status: Optional[RegistrationStatus] = None,
    ) -> tuple[list[Registration], int]:
        """List an event's registrations, newest first.

        Returns:
            Tuple of (registrations on this page, total matching count)
        """
        params: list = [event_id]
        where = "WHERE r.event_id = $1"
        if status is not None:
            params.append(status.value)
            where += " AND r.status = $2"

        pool = await get_pool()

        async with pool.acquire() as conn:
            total = await conn.fetchval(
                f"SELECT COUNT(*) FROM registrations r {where}",
                *params,
            )
            rows = await conn.fetch(
                f"""
                SELECT r.id, r.event_id, r.name, r.email, r.phone, r.college,
                       r.linkedin_url, r.food_preference, r.status, r.registered_at,
                       r.created_at, r.updated_at,
                       e.title AS event_title, e.date AS event_date
                FROM registrations r
                JOIN events e ON e.id = r.event_id
                {where}
                ORDER BY r.registered_at DESC
                LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
                """,
                *params,
                limit,
                (page - 1) * limit,
            )

        return [_row_to_registration(r) for r in rows], total

    async def update_status(
        self, registration_id: UUID, status: RegistrationStatus
    ) -> Registration:
        """Raises NotFound if the registration does not exist."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE registrations
                SET status = $1, updated_at = $2
                WHERE id = $3
                RETURNING {_COLUMNS}
                """,
                status.value,
                datetime.now(timezone.utc),
                registration_id,
            )

        if row is None:
            raise NotFound("Registration not found")

        logger.info(
            "registration_status_updated",
            registration_id=str(registration_id),
            status=status.value,
        )
        return _row_to_registration(row)

    async def delete(self, registration_id: UUID) -> None:
        """Raises NotFound if the registration does not exist."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM registrations WHERE id = $1",
                registration_id,
            )

        if result != "DELETE 1":
            raise NotFound("Registration not found")

        logger.info("registration_deleted", registration_id=str(registration_id))

    async def stats(self, event_id: UUID) -> RegistrationStats:
        """Count an event's registrations per status."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT status, COUNT(*) AS count
                FROM registrations
                WHERE event_id = $1
                GROUP BY status
                """,
                event_id,
            )

        by_status = {row["status"]: row["count"] for row in rows}
        return RegistrationStats(total=sum(by_status.values()), by_status=by_status)
