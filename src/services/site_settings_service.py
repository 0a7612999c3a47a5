"""Site-wide settings stored as a single keyed row."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import structlog

from src.config import get_settings
from src.database import get_pool
from src.models.site_settings import SECTIONS, ServerTime, SiteSettings, SiteSettingsUpdate

logger = structlog.get_logger(__name__)

SETTINGS_KEY = "global"

DEFAULT_SECTIONS = {
    "home_page_content": {
        "hero_tagline": "Build. Learn. Connect.",
        "hero_subtitle": "Join the premier coding community at Jamia Millia Islamia",
    },
    "social_links": {
        "linkedin": "https://www.linkedin.com/company/coding-council/",
        "instagram": "https://www.instagram.com/codingcounciljmi",
        "github": "https://github.com/codingcounciljmi/",
        "email": "coding.council.jmi@gmail.com",
        "whatsapp": "https://chat.whatsapp.com/IKPUGagDzlQ5SRLbWGbVyY",
    },
    "community_stats": {
        "members": 500,
        "events": 25,
        "workshops": 40,
        "projects": 75,
    },
    "announcement_banner": {
        "is_active": False,
        "background_color": "#10B981",
        "text_color": "#FFFFFF",
    },
}

_COLUMNS = "key, " + ", ".join(SECTIONS) + ", updated_at"


class SiteSettingsService:
    """Reads and patches the ``global`` settings row."""

    async def get(self) -> SiteSettings:
        """Return the settings, inserting defaults on first read."""
        pool = await get_pool()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM site_settings WHERE key = $1", SETTINGS_KEY
            )
            if row is None:
                row = await self._insert_defaults(conn)

        return SiteSettings.model_validate(dict(row))

    async def update(self, data: SiteSettingsUpdate) -> SiteSettings:
        """Merge the provided keys of each provided section.

        Keys not present in the request keep their stored value.
        """
        patches = {}
        for section in SECTIONS:
            value = getattr(data, section)
            if value is not None:
                patches[section] = value.model_dump(exclude_unset=True)

        set_clauses = ["updated_at = $1"]
        params: list = [datetime.now(timezone.utc)]
        for section, patch in patches.items():
            params.append(patch)
            set_clauses.append(f"{section} = {section} || ${len(params)}::jsonb")
        params.append(SETTINGS_KEY)

        pool = await get_pool()

        async with pool.acquire() as conn:
            async with conn.transaction():
                exists = await conn.fetchval(
                    "SELECT 1 FROM site_settings WHERE key = $1", SETTINGS_KEY
                )
                if exists is None:
                    await self._insert_defaults(conn)
                row = await conn.fetchrow(
                    f"""
                    UPDATE site_settings
                    SET {', '.join(set_clauses)}
                    WHERE key = ${len(params)}
                    RETURNING {_COLUMNS}
                    """,
                    *params,
                )

        logger.info("site_settings_updated", sections=sorted(patches))
        return SiteSettings.model_validate(dict(row))

    @staticmethod
    async def _insert_defaults(conn):
        row = await conn.fetchrow(
            f"""
            INSERT INTO site_settings (key, home_page_content, social_links,
                                       community_stats, announcement_banner, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6)
            ON CONFLICT (key) DO UPDATE SET key = EXCLUDED.key
            RETURNING {_COLUMNS}
            """,
            SETTINGS_KEY,
            *(DEFAULT_SECTIONS[section] for section in SECTIONS),
            datetime.now(timezone.utc),
        )
        logger.info("site_settings_defaults_created")
        return row


def server_time() -> ServerTime:
    """Current time for client countdown sync."""
    tz_name = get_settings().default_timezone
    now = datetime.now(ZoneInfo(tz_name))
    return ServerTime(
        timestamp=int(now.timestamp() * 1000),
        iso=now.isoformat(),
        timezone=tz_name,
    )
