# src/cache/migrations.py — v1
"""Schema migrations for the SQLite fetch cache.

Applied migrations are recorded in ``_migrations`` so the store can be opened
any number of times at startup without re-running DDL.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    """A named, forward-only schema change."""

    id: str
    sql: str


MIGRATIONS: list[Migration] = [
    Migration(
        id="001_create_cache_entries",
        sql="""
CREATE TABLE IF NOT EXISTS cache_entries (
    cache_key TEXT PRIMARY KEY,
    source TEXT NOT NULL,
    request_kind TEXT NOT NULL,
    url TEXT NOT NULL,
    status INTEGER NOT NULL,
    body BLOB NOT NULL,
    content_type TEXT NOT NULL,
    headers TEXT,
    created_at REAL NOT NULL,
    expires_at REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_cache_entries_expires_at
    ON cache_entries(expires_at);
CREATE INDEX IF NOT EXISTS idx_cache_entries_source
    ON cache_entries(source);
""",
    ),
]

_TRACKING_TABLE = """
CREATE TABLE IF NOT EXISTS _migrations (
    id TEXT PRIMARY KEY,
    applied_at REAL NOT NULL
);
"""


def run_migrations(
    conn: sqlite3.Connection, migrations: list[Migration] | None = None
) -> list[str]:
    """Apply pending migrations in order.

    Returns:
        Ids of the migrations applied by this call (empty when up to date).
    """
    conn.executescript(_TRACKING_TABLE)
    applied: list[str] = []

    for migration in migrations if migrations is not None else MIGRATIONS:
        row = conn.execute(
            "SELECT id FROM _migrations WHERE id = ?", (migration.id,)
        ).fetchone()
        if row is not None:
            continue
        conn.executescript(migration.sql)
        conn.execute(
            "INSERT INTO _migrations (id, applied_at) VALUES (?, ?)",
            (migration.id, time.time()),
        )
        conn.commit()
        applied.append(migration.id)
        logger.info("Applied cache migration %s", migration.id)

    return applied
