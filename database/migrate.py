"""
Versioned schema migrations.

Run out-of-band before starting the server::

    python -m database.migrate

Each step runs once; applied versions are recorded in ``schema_migrations``.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List

from sqlalchemy import Column, DateTime, Integer, MetaData, String, Table, select
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

from database.models import Transaction, User

logger = logging.getLogger(__name__)

_meta = MetaData()
schema_migrations = Table(
    "schema_migrations",
    _meta,
    Column("version", Integer, primary_key=True),
    Column("description", String(255), nullable=False),
    Column("applied_at", DateTime(timezone=True), nullable=False),
)


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    apply: Callable[[Connection], None]


def _create_users(conn: Connection) -> None:
    User.__table__.create(conn, checkfirst=True)


def _create_transactions(conn: Connection) -> None:
    Transaction.__table__.create(conn, checkfirst=True)


MIGRATIONS: List[Migration] = [
    Migration(1, "create users with unique email and username", _create_users),
    Migration(2, "create transactions", _create_transactions),
]


def _apply_pending(conn: Connection) -> List[int]:
    schema_migrations.create(conn, checkfirst=True)
    done = set(conn.execute(select(schema_migrations.c.version)).scalars())
    applied = []
    for migration in sorted(MIGRATIONS, key=lambda m: m.version):
        if migration.version in done:
            continue
        logger.info("Applying migration %d: %s", migration.version, migration.description)
        migration.apply(conn)
        conn.execute(
            schema_migrations.insert().values(
                version=migration.version,
                description=migration.description,
                applied_at=datetime.now(timezone.utc),
            )
        )
        applied.append(migration.version)
    return applied


async def run_migrations(engine: AsyncEngine) -> List[int]:
    """Apply pending migrations in one transaction; returns the versions applied."""
    async with engine.begin() as conn:
        return await conn.run_sync(_apply_pending)


async def _main() -> None:
    from config.settings import get_settings
    from database.session import build_engine

    engine = build_engine(get_settings())
    try:
        applied = await run_migrations(engine)
    finally:
        await engine.dispose()
    if applied:
        logger.info("Applied migrations: %s", applied)
    else:
        logger.info("Schema is up to date")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, stream=sys.stdout)
    asyncio.run(_main())
