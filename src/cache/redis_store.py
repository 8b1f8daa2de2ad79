# src/cache/redis_store.py — v1
"""Redis-based fetch store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable for multi-instance deployments sharing one upstream cache.
"""

from __future__ import annotations

import logging

from suppliercheck.cache.base_cache_store import BaseFetchStore
from suppliercheck.cache.models import CacheEntry

logger = logging.getLogger(__name__)

_KEY_PREFIX = "suppliercheck:fetch:"
_INDEX_KEY = "suppliercheck:fetch:__index__"


class RedisFetchStore(BaseFetchStore):
    """Redis-backed fetch store.

    Entries are JSON documents under a prefixed key. A set of all cache keys
    is maintained for list_entries / delete_expired. Expiry stays under the
    FetchCache's control, so no Redis-side TTL is set.
    """

    def __init__(self, redis_url: str) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)

    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve an entry by key."""
        data = self._client.get(f"{_KEY_PREFIX}{key}")
        if data is None:
            return None
        try:
            return CacheEntry.model_validate_json(data)
        except Exception as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key, e)
            return None

    async def put(self, entry: CacheEntry) -> None:
        """Store an entry."""
        self._client.set(f"{_KEY_PREFIX}{entry.cache_key}", entry.model_dump_json())
        self._client.sadd(_INDEX_KEY, entry.cache_key)

    async def delete(self, key: str) -> None:
        """Remove an entry."""
        self._client.delete(f"{_KEY_PREFIX}{key}")
        self._client.srem(_INDEX_KEY, key)

    async def delete_expired(self, now: float) -> int:
        """Remove entries with expires_at <= now."""
        removed = 0
        for entry in await self.list_entries():
            if entry.is_expired(now):
                await self.delete(entry.cache_key)
                removed += 1
        return removed

    async def clear(self) -> None:
        """Remove all entries tracked in the index."""
        for key in self._client.smembers(_INDEX_KEY):
            self._client.delete(f"{_KEY_PREFIX}{key}")
        self._client.delete(_INDEX_KEY)

    async def list_entries(self) -> list[CacheEntry]:
        """List all stored entries, ordered by cache key."""
        keys = sorted(self._client.smembers(_INDEX_KEY))
        entries: list[CacheEntry] = []
        for key in keys:
            entry = await self.get(key)
            if entry is not None:
                entries.append(entry)
        return entries

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
