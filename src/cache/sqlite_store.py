# src/cache/sqlite_store.py — v1
"""SQLite-based fetch store (CACHE_BACKEND=sqlite, the default).

Uses stdlib sqlite3. ``:memory:`` keeps the cache in-process, any other path is
created on demand and opened in WAL mode.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path

from suppliercheck.cache.base_cache_store import BaseFetchStore
from suppliercheck.cache.migrations import run_migrations
from suppliercheck.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_MEMORY = ":memory:"

_COLUMNS = (
    "cache_key, source, request_kind, url, status, body, "
    "content_type, headers, created_at, expires_at"
)


class SqliteFetchStore(BaseFetchStore):
    """SQLite-backed fetch store owning a single connection."""

    def __init__(self, db_path: Path | str = _MEMORY) -> None:
        if str(db_path) == _MEMORY:
            self._db_path = _MEMORY
        else:
            path = Path(db_path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            self._db_path = str(path)
        self._conn = sqlite3.connect(self._db_path)
        if self._db_path != _MEMORY:
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=NORMAL")
        run_migrations(self._conn)

    @property
    def db_path(self) -> str:
        return self._db_path

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve an entry by key."""
        cursor = self._conn.execute(
            f"SELECT {_COLUMNS} FROM cache_entries WHERE cache_key = ?", (key,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        try:
            return _row_to_entry(row)
        except Exception as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key, e)
            return None

    async def put(self, entry: CacheEntry) -> None:
        """Store an entry (upsert: a refetch overwrites, never appends)."""
        self._conn.execute(
            f"INSERT OR REPLACE INTO cache_entries ({_COLUMNS}) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                entry.cache_key,
                entry.source,
                entry.request_kind,
                entry.url,
                entry.status,
                sqlite3.Binary(entry.body),
                entry.content_type,
                json.dumps(entry.headers, sort_keys=True) if entry.headers else None,
                entry.created_at,
                entry.expires_at,
            ),
        )
        self._conn.commit()

    async def delete(self, key: str) -> None:
        """Remove an entry."""
        self._conn.execute("DELETE FROM cache_entries WHERE cache_key = ?", (key,))
        self._conn.commit()

    async def delete_expired(self, now: float) -> int:
        """Remove entries with expires_at <= now."""
        cursor = self._conn.execute(
            "DELETE FROM cache_entries WHERE expires_at <= ?", (now,)
        )
        self._conn.commit()
        return cursor.rowcount

    async def clear(self) -> None:
        """Remove all entries."""
        self._conn.execute("DELETE FROM cache_entries")
        self._conn.commit()

    async def list_entries(self) -> list[CacheEntry]:
        """List all stored entries, ordered by cache key."""
        cursor = self._conn.execute(
            f"SELECT {_COLUMNS} FROM cache_entries ORDER BY cache_key"
        )
        entries: list[CacheEntry] = []
        for row in cursor.fetchall():
            try:
                entries.append(_row_to_entry(row))
            except Exception:
                logger.warning("Skipping undecodable cache row %s", row[0])
                continue
        return entries

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()


def _row_to_entry(row: tuple) -> CacheEntry:
    """Map a cache_entries row (in _COLUMNS order) to a CacheEntry."""
    headers = json.loads(row[7]) if row[7] else None
    return CacheEntry(
        cache_key=row[0],
        source=row[1],
        request_kind=row[2],
        url=row[3],
        status=row[4],
        body=bytes(row[5]),
        content_type=row[6],
        headers=headers,
        created_at=row[8],
        expires_at=row[9],
    )
