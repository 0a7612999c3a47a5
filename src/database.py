"""Postgres pool lifecycle and schema migrations."""

import json
from pathlib import Path
from typing import Optional

import asyncpg
import structlog

from src.config import get_settings

logger = structlog.get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"

_pool: Optional[asyncpg.Pool] = None


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Decode JSONB columns to Python objects on every pooled connection."""
    await conn.set_type_codec(
        "jsonb",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog",
    )


async def get_pool() -> asyncpg.Pool:
    """Return the shared pool.

    Raises:
        RuntimeError: If init_database() has not run
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_database() first.")
    return _pool


async def init_database() -> asyncpg.Pool:
    """Create the shared pool once; later calls return the same pool."""
    global _pool

    if _pool is not None:
        return _pool

    settings = get_settings()

    try:
        _pool = await asyncpg.create_pool(
            settings.postgres_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=60,
            init=_init_connection,
        )
    except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        logger.error("database_pool_creation_failed", error=str(e))
        raise

    logger.info(
        "database_pool_created",
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    return _pool


async def close_database() -> None:
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("database_pool_closed")


async def run_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    """Apply pending SQL migrations in file-name order.

    Applied files are recorded in ``schema_migrations``; each pending file
    runs in its own transaction together with its ledger row, so a failed
    file leaves no partial schema behind and is retried on next startup.

    Returns:
        Names of the files applied by this call
    """
    if not migrations_dir.exists():
        logger.warning("migrations_directory_not_found", path=str(migrations_dir))
        return []

    pool = await get_pool()
    applied: list[str] = []

    async with pool.acquire() as conn:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
            """
        )
        done = {row["name"] for row in await conn.fetch("SELECT name FROM schema_migrations")}

        for migration_file in sorted(migrations_dir.glob("*.sql")):
            if migration_file.name in done:
                continue
            try:
                async with conn.transaction():
                    await conn.execute(migration_file.read_text())
                    await conn.execute(
                        "INSERT INTO schema_migrations (name) VALUES ($1)",
                        migration_file.name,
                    )
            except asyncpg.PostgresError as e:
                logger.error("migration_failed", file=migration_file.name, error=str(e))
                raise
            applied.append(migration_file.name)
            logger.info("migration_applied", file=migration_file.name)

    logger.info("migrations_complete", applied=len(applied), skipped=len(done))
    return applied


async def health_check() -> bool:
    """True when a round-trip query succeeds."""
    try:
        pool = await get_pool()
        async with pool.acquire() as conn:
            return await conn.fetchval("SELECT 1") == 1
    except (RuntimeError, OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
        logger.error("database_health_check_failed", error=str(e))
        return False
