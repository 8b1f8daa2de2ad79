# tests/integration/cache/test_int_cache_stores.py — v1
"""Integration tests for fetch store backends: JSON + SQLite file.

No external services required. Every backend must behave identically behind
FetchCache.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from suppliercheck.cache.fetch_cache import FetchCache
from suppliercheck.cache.json_store import JsonFetchStore
from suppliercheck.cache.models import CacheEntry, FetchRequest
from suppliercheck.cache.sqlite_store import SqliteFetchStore

URL = "https://api.example.test/company/12345678"


def _make_store(kind: str, root: Path):
    if kind == "sqlite":
        return SqliteFetchStore(root / "cache.db")
    return JsonFetchStore(cache_root=root / "json")


def _entry(key: str, expires_at: float = 200.0, body: bytes = b"\x00\x01payload") -> CacheEntry:
    return CacheEntry(
        cache_key=key, source="companies_house", request_kind="profile",
        url=f"https://x.test/{key}", status=200, body=body,
        content_type="application/json", created_at=100.0, expires_at=expires_at,
    )


@pytest.fixture(params=["sqlite", "json"])
def store_kind(request) -> str:
    return request.param


class TestStoreContract:
    @pytest.mark.asyncio
    async def test_put_get_binary_body(self, store_kind, tmp_path):
        store = _make_store(store_kind, tmp_path)
        await store.put(_entry("k1"))
        got = await store.get("k1")
        assert got == _entry("k1")
        store.close()

    @pytest.mark.asyncio
    async def test_overwrite(self, store_kind, tmp_path):
        store = _make_store(store_kind, tmp_path)
        await store.put(_entry("k1", body=b"old"))
        await store.put(_entry("k1", body=b"new"))
        assert (await store.get("k1")).body == b"new"
        assert len(await store.list_entries()) == 1
        store.close()

    @pytest.mark.asyncio
    async def test_delete_expired_and_clear(self, store_kind, tmp_path):
        store = _make_store(store_kind, tmp_path)
        await store.put(_entry("a", expires_at=150.0))
        await store.put(_entry("b", expires_at=250.0))
        assert await store.delete_expired(200.0) == 1
        assert [e.cache_key for e in await store.list_entries()] == ["b"]
        await store.clear()
        assert await store.list_entries() == []
        store.close()

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, store_kind, tmp_path):
        store = _make_store(store_kind, tmp_path)
        await store.put(_entry("k1"))
        store.close()
        reopened = _make_store(store_kind, tmp_path)
        assert (await reopened.get("k1")) == _entry("k1")
        reopened.close()


class TestFetchCacheOverStores:
    @pytest.mark.asyncio
    async def test_second_process_hits(self, store_kind, tmp_path, upstream, clock):
        upstream.add(URL, b'{"ok": true}')
        request = FetchRequest(
            source="companies_house", request_kind="profile", url=URL, ttl_seconds=60,
        )

        async with FetchCache(_make_store(store_kind, tmp_path), upstream, clock=clock) as cache:
            assert (await cache.get_or_fetch(request)).hit is False

        async with FetchCache(_make_store(store_kind, tmp_path), upstream, clock=clock) as cache:
            result = await cache.get_or_fetch(request)

        assert result.hit is True
        assert result.body == b'{"ok": true}'
        assert upstream.count(URL) == 1

    @pytest.mark.asyncio
    async def test_expiry_across_instances(self, store_kind, tmp_path, upstream, clock):
        upstream.add(URL, b"{}")
        request = FetchRequest(
            source="companies_house", request_kind="profile", url=URL, ttl_seconds=60,
        )
        async with FetchCache(_make_store(store_kind, tmp_path), upstream, clock=clock) as cache:
            await cache.get_or_fetch(request)

        clock.advance(120)
        async with FetchCache(_make_store(store_kind, tmp_path), upstream, clock=clock) as cache:
            assert await cache.clean_expired() == 1
            assert (await cache.get_or_fetch(request)).hit is False
        assert upstream.count(URL) == 2
