# src/connectors/http.py — v1
"""Default fetch function: urllib.request in a worker thread.

Transport failures and transient statuses (429, 5xx) raise
UpstreamFetchError so the fetch cache never stores them. Other statuses,
including 404, are returned as responses and cached like any other.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import urllib.error
import urllib.request

from suppliercheck.cache.models import FetchFunction, UpstreamResponse

logger = logging.getLogger(__name__)

_TRANSIENT_STATUSES = {429}


class UpstreamFetchError(Exception):
    """Upstream call failed before producing a cacheable response."""

    def __init__(self, url: str, message: str, status: int | None = None) -> None:
        self.url = url
        self.status = status
        super().__init__(f"{message} ({url})")


def is_transient(status: int) -> bool:
    return status in _TRANSIENT_STATUSES or status >= 500


def basic_auth_header(api_key: str) -> str:
    """Companies House uses the API key as the basic-auth user with no password."""
    token = base64.b64encode(f"{api_key}:".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def make_http_fetcher(api_key: str = "", timeout: float = 10.0) -> FetchFunction:
    """Build an async fetch function for FetchCache.

    Args:
        api_key: Sent as HTTP basic auth when non-empty. Never part of the
            request headers handed to the cache.
        timeout: Socket timeout per request, in seconds.
    """

    def _fetch_sync(url: str, headers: dict[str, str] | None) -> UpstreamResponse:
        request_headers = {"Accept": "application/json, text/csv;q=0.9, */*;q=0.8"}
        request_headers.update(headers or {})
        if api_key:
            request_headers["Authorization"] = basic_auth_header(api_key)

        req = urllib.request.Request(url, headers=request_headers)
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                return UpstreamResponse(
                    status=resp.status,
                    body=resp.read(),
                    content_type=resp.headers.get("Content-Type", ""),
                )
        except urllib.error.HTTPError as e:
            if is_transient(e.code):
                raise UpstreamFetchError(url, f"HTTP {e.code}", status=e.code) from e
            return UpstreamResponse(
                status=e.code,
                body=e.read() or b"",
                content_type=e.headers.get("Content-Type", "") if e.headers else "",
            )
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            raise UpstreamFetchError(url, f"Transport error: {e}") from e

    async def fetch(url: str, headers: dict[str, str] | None = None) -> UpstreamResponse:
        logger.debug("GET %s", url)
        return await asyncio.to_thread(_fetch_sync, url, headers)

    return fetch
