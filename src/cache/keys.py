# src/cache/keys.py — v1
"""Deterministic cache key derivation.

The key is the SHA-256 hex digest of ``source:request_kind:url``. Callers that
need cache-busting must vary one of those three inputs, not headers.
"""

from __future__ import annotations

import hashlib

from suppliercheck.cache.models import FetchRequest


def compute_cache_key(source: str, request_kind: str, url: str) -> str:
    """Return the fixed-length (64 hex chars) cache key for a request triple."""
    data = f"{source}:{request_kind}:{url}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def cache_key_for(request: FetchRequest) -> str:
    """Cache key of a FetchRequest (headers ignored)."""
    return compute_cache_key(request.source, request.request_kind, request.url)
