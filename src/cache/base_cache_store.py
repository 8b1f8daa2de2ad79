# src/cache/base_cache_store.py — v1
"""Abstract store interface behind the fetch cache."""

from __future__ import annotations

from abc import ABC, abstractmethod

from suppliercheck.cache.models import CacheEntry


class BaseFetchStore(ABC):
    """Unified interface for fetch cache storage backends.

    Stores are plain key/value persistence: they never decide freshness.
    Expiry is judged by the FetchCache against its own clock.
    """

    @abstractmethod
    async def get(self, key: str) -> CacheEntry | None:
        """Retrieve an entry by cache key, expired or not."""

    @abstractmethod
    async def put(self, entry: CacheEntry) -> None:
        """Store an entry, replacing any previous entry under the same key."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove one entry."""

    @abstractmethod
    async def delete_expired(self, now: float) -> int:
        """Remove all entries with expires_at <= now. Returns the count removed."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry."""

    @abstractmethod
    async def list_entries(self) -> list[CacheEntry]:
        """List all stored entries."""

    def close(self) -> None:
        """Release the underlying handle. No-op by default."""
