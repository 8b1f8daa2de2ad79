# src/cache/json_store.py — v1
"""JSON file-based fetch store (CACHE_BACKEND=json).

Stores one JSON file per cache key under CACHE_ROOT. Bodies are base64-encoded
so arbitrary bytes survive the round trip.
"""

from __future__ import annotations

import logging
from pathlib import Path

from suppliercheck.cache.base_cache_store import BaseFetchStore
from suppliercheck.cache.models import CacheEntry

logger = logging.getLogger(__name__)


class JsonFetchStore(BaseFetchStore):
    """File-based fetch store using JSON files."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve an entry by key."""
        path = self._entry_path(key)
        if not path.exists():
            return None
        try:
            return CacheEntry.model_validate_json(path.read_text(encoding="utf-8"))
        except Exception as e:
            logger.warning("Failed to read cache entry %s: %s", key, e)
            return None

    async def put(self, entry: CacheEntry) -> None:
        """Store an entry, overwriting the previous file for the key."""
        path = self._entry_path(entry.cache_key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(entry.model_dump_json(indent=2), encoding="utf-8")
        tmp.replace(path)

    async def delete(self, key: str) -> None:
        """Remove an entry."""
        path = self._entry_path(key)
        if path.exists():
            path.unlink()

    async def delete_expired(self, now: float) -> int:
        """Remove entries with expires_at <= now."""
        removed = 0
        for entry in await self.list_entries():
            if entry.is_expired(now):
                await self.delete(entry.cache_key)
                removed += 1
        return removed

    async def clear(self) -> None:
        """Remove all entry files."""
        for path in self._root.glob("*.json"):
            path.unlink()

    async def list_entries(self) -> list[CacheEntry]:
        """List all stored entries, ordered by cache key."""
        entries: list[CacheEntry] = []
        if not self._root.is_dir():
            return entries

        for path in sorted(self._root.glob("*.json")):
            try:
                entries.append(
                    CacheEntry.model_validate_json(path.read_text(encoding="utf-8"))
                )
            except Exception:
                logger.warning("Skipping unreadable cache file %s", path.name)
                continue

        return entries

    def _entry_path(self, key: str) -> Path:
        """Return file path for a cache key."""
        safe_key = key.replace("/", "_").replace("\\", "_")
        return self._root / f"{safe_key}.json"
