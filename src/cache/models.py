# src/cache/models.py — v1
"""Fetch cache models: FetchRequest, UpstreamResponse, FetchResult, CacheEntry."""

from __future__ import annotations

from typing import Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field


class FetchRequest(BaseModel):
    """One cacheable upstream call.

    Only (source, request_kind, url) identify the cache entry. Headers are
    forwarded to the fetch function but do not take part in the cache key.
    """

    source: str
    request_kind: str
    url: str
    ttl_seconds: float = Field(ge=0)
    headers: dict[str, str] | None = None


class UpstreamResponse(BaseModel):
    """Raw response returned by a fetch function."""

    status: int
    body: bytes
    content_type: str = ""


class FetchResult(BaseModel):
    """Result of FetchCache.get_or_fetch()."""

    status: int
    body: bytes
    content_type: str
    cache_key: str
    hit: bool


class CacheEntry(BaseModel):
    """Stored upstream response, exclusively owned by the cache."""

    model_config = ConfigDict(ser_json_bytes="base64", val_json_bytes="base64")

    cache_key: str
    source: str
    request_kind: str
    url: str
    status: int
    body: bytes
    content_type: str
    headers: dict[str, str] | None = None
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """An entry is stale once expires_at <= now."""
        return self.expires_at <= now

    def to_result(self, hit: bool) -> FetchResult:
        """Project the stored entry onto the caller-facing result."""
        return FetchResult(
            status=self.status,
            body=self.body,
            content_type=self.content_type,
            cache_key=self.cache_key,
            hit=hit,
        )


FetchFunction = Callable[[str, dict[str, str] | None], Awaitable[UpstreamResponse]]
