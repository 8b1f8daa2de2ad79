# src/cache/cache_factory.py — v1
"""Factory for fetch store instantiation."""

from __future__ import annotations

from suppliercheck.cache.base_cache_store import BaseFetchStore
from suppliercheck.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseFetchStore:
    """Instantiate the configured fetch store backend.

    Args:
        settings: Application settings. Defaults to an in-memory SQLite store.

    Returns:
        Configured BaseFetchStore implementation. The caller owns it and must
        close it.
    """
    backend = "sqlite" if settings is None else settings.cache_backend

    if backend == "sqlite":
        from suppliercheck.cache.sqlite_store import SqliteFetchStore
        db_path = ":memory:" if settings is None else settings.cache_db_path
        return SqliteFetchStore(db_path=db_path)

    if backend == "json":
        from suppliercheck.cache.json_store import JsonFetchStore
        return JsonFetchStore(cache_root=settings.cache_root)

    if backend == "redis":
        from suppliercheck.cache.redis_store import RedisFetchStore
        if not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when CACHE_BACKEND=redis"
            )
        return RedisFetchStore(redis_url=settings.cache_redis_url)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
