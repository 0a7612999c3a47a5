"""Contact form message service."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import structlog

from src.database import get_pool
from src.models.contact import Contact, ContactCreate, ContactStatus

logger = structlog.get_logger(__name__)

_COLUMNS = "id, name, email, phone, subject, message, status, created_at, updated_at"


class ContactService:
    """Stores public contact submissions for admins to triage."""

    async def submit(self, data: ContactCreate) -> Contact:
        contact_id = uuid4()
        now = datetime.now(timezone.utc)
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                INSERT INTO contacts (id, name, email, phone, subject, message, status, created_at, updated_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $8)
                RETURNING {_COLUMNS}
                """,
                contact_id,
                data.name,
                data.email,
                data.phone,
                data.subject,
                data.message,
                ContactStatus.NEW.value,
                now,
            )

        logger.info("contact_submitted", contact_id=str(contact_id))
        return Contact.model_validate(dict(row))

    async def list_contacts(
        self,
        status: Optional[ContactStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Contact], int]:
        params: list = []
        where = ""
        if status is not None:
            params.append(status.value)
            where = "WHERE status = $1"

        pool = await get_pool()

        async with pool.acquire() as conn:
            total = await conn.fetchval(f"SELECT COUNT(*) FROM contacts {where}", *params)
            rows = await conn.fetch(
                f"""
                SELECT {_COLUMNS} FROM contacts {where}
                ORDER BY created_at DESC
                LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
                """,
                *params,
                limit,
                (page - 1) * limit,
            )

        return [Contact.model_validate(dict(r)) for r in rows], total

    async def update_status(self, contact_id: UUID, status: ContactStatus) -> Optional[Contact]:
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE contacts SET status = $1, updated_at = $2
                WHERE id = $3
                RETURNING {_COLUMNS}
                """,
                status.value,
                datetime.now(timezone.utc),
                contact_id,
            )

        if row is None:
            return None
        return Contact.model_validate(dict(row))

    async def delete(self, contact_id: UUID) -> bool:
        pool = await get_pool()

        async with pool.acquire() as conn:
            result = await conn.execute("DELETE FROM contacts WHERE id = $1", contact_id)

        return result == "DELETE 1"
