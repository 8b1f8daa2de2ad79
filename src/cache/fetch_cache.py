# src/cache/fetch_cache.py — v1
"""Content-addressed, TTL-bound cache of raw upstream responses.

Usage:
    store = SqliteFetchStore("cache.db")
    async with FetchCache(store, fetch_fn) as cache:
        result = await cache.get_or_fetch(request)

A hit returns the stored bytes verbatim. A miss calls the fetch function once,
persists the response with ``expires_at = now + ttl`` and returns it. Errors
raised by the fetch function propagate and leave the store untouched.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import Callable

from suppliercheck.cache.base_cache_store import BaseFetchStore
from suppliercheck.cache.keys import cache_key_for
from suppliercheck.cache.models import CacheEntry, FetchFunction, FetchRequest, FetchResult

logger = logging.getLogger(__name__)


class FetchCache:
    """Fetch-through cache over an injected store and fetch function.

    Misses are single-flight per cache key: concurrent callers missing on the
    same key wait on one upstream fetch and are then served from the store.
    Callers on different keys never wait on each other.
    """

    def __init__(
        self,
        store: BaseFetchStore,
        fetch_fn: FetchFunction,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._fetch_fn = fetch_fn
        self._clock = clock
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}
        self._sweeper: asyncio.Task[None] | None = None

    @property
    def store(self) -> BaseFetchStore:
        return self._store

    async def get_or_fetch(self, request: FetchRequest) -> FetchResult:
        """Return the cached response for request, fetching it on a miss."""
        key = cache_key_for(request)

        entry = await self._fresh_entry(key)
        if entry is not None:
            logger.debug("Cache hit %s:%s %s", request.source, request.request_kind, request.url)
            return entry.to_result(hit=True)

        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                # Another caller may have filled the entry while we waited.
                entry = await self._fresh_entry(key)
                if entry is not None:
                    logger.debug("Cache hit after wait %s", request.url)
                    return entry.to_result(hit=True)
                entry = await self._fetch_and_store(key, request)
                return entry.to_result(hit=False)
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    async def clean_expired(self) -> int:
        """Remove entries with expires_at <= now. Returns the count removed."""
        removed = await self._store.delete_expired(self._clock())
        if removed:
            logger.info("Swept %d expired cache entries", removed)
        return removed

    async def clear(self) -> None:
        """Remove all entries unconditionally."""
        await self._store.clear()
        logger.info("Cache cleared")

    # --- Background sweep ---

    def start_sweeper(self, interval_seconds: float) -> None:
        """Run clean_expired() every interval_seconds on the running loop."""
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.get_running_loop().create_task(
            self._sweep_forever(interval_seconds)
        )

    async def stop_sweeper(self) -> None:
        """Cancel the background sweep task, if running."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._sweeper
        self._sweeper = None

    async def _sweep_forever(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await self.clean_expired()
            except Exception:
                logger.warning("Cache sweep failed", exc_info=True)

    # --- Lifecycle ---

    async def aclose(self) -> None:
        """Stop the sweeper and close the store."""
        await self.stop_sweeper()
        self._store.close()

    async def __aenter__(self) -> FetchCache:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # --- Internals ---

    async def _fresh_entry(self, key: str) -> CacheEntry | None:
        entry = await self._store.get(key)
        if entry is None or entry.is_expired(self._clock()):
            return None
        return entry

    async def _fetch_and_store(self, key: str, request: FetchRequest) -> CacheEntry:
        logger.debug("Cache miss %s:%s %s", request.source, request.request_kind, request.url)
        try:
            response = await self._fetch_fn(request.url, request.headers)
        except Exception as e:
            logger.warning("Upstream fetch failed for %s: %s", request.url, e)
            raise

        now = self._clock()
        entry = CacheEntry(
            cache_key=key,
            source=request.source,
            request_kind=request.request_kind,
            url=request.url,
            status=response.status,
            body=response.body,
            content_type=response.content_type,
            headers=request.headers,
            created_at=now,
            expires_at=now + request.ttl_seconds,
        )
        await self._store.put(entry)
        return entry
