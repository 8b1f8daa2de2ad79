# src/connectors/companies_house.py — v1
"""Companies House connector: profile, officers, PSCs and search.

Every call goes through the fetch cache, so a dossier compiled twice within
the TTL hits the upstream API once. Responses are validated into the raw
upstream models and returned with the evidence of where they came from.

Usage:
    connector = CompaniesHouseConnector(cache, settings)
    profile = await connector.get_company_profile("12345678")
    profile.data.company_name, profile.evidence.api_url
"""

from __future__ import annotations

import logging
import re
from typing import TypeVar
from urllib.parse import urlencode

from pydantic import BaseModel, ValidationError

from suppliercheck.cache.fetch_cache import FetchCache
from suppliercheck.cache.models import FetchRequest
from suppliercheck.config.settings import Settings
from suppliercheck.connectors.models import (
    ConnectorError,
    ConnectorErrorCode,
    ConnectorResponse,
    error_code_for_status,
)
from suppliercheck.core.models import Evidence
from suppliercheck.dossier.builder import utc_timestamp
from suppliercheck.dossier.upstream import (
    CompanyProfileResponse,
    CompanySearchResponse,
    OfficersResponse,
    PSCsResponse,
)
from suppliercheck.registry.name_normalizer import normalize_company_number

logger = logging.getLogger(__name__)

COMPANIES_HOUSE_SOURCE = "companies_house"

_VALID_NUMBER = re.compile(r"^[A-Z0-9]{6,8}$")

M = TypeVar("M", bound=BaseModel)


class CompaniesHouseConnector:
    """Typed access to the Companies House public data API."""

    def __init__(self, cache: FetchCache, settings: Settings | None = None) -> None:
        self._cache = cache
        self._settings = settings or Settings()
        self._api_base = self._settings.companies_house_api_base.rstrip("/")
        self._web_base = self._settings.companies_house_web_base.rstrip("/")

    # --- Public API ---

    async def search_companies(
        self, query: str, items_per_page: int = 20
    ) -> ConnectorResponse[CompanySearchResponse]:
        """Search companies by name or number. No public URL is recorded."""
        query = (query or "").strip()
        if not query:
            raise ConnectorError(
                ConnectorErrorCode.INVALID_REQUEST, "Search query cannot be empty"
            )
        params = urlencode({"q": query, "items_per_page": items_per_page})
        api_url = f"{self._api_base}/search/companies?{params}"
        return await self._fetch(
            CompanySearchResponse, "search", api_url, None, self._settings.cache_ttl_search
        )

    async def get_company_profile(
        self, company_number: str
    ) -> ConnectorResponse[CompanyProfileResponse]:
        number = self._require_number(company_number)
        path = f"/company/{number}"
        return await self._fetch(
            CompanyProfileResponse,
            "profile",
            self._api_base + path,
            self._web_base + path,
            self._settings.cache_ttl_profile,
        )

    async def get_officers(self, company_number: str) -> ConnectorResponse[OfficersResponse]:
        number = self._require_number(company_number)
        path = f"/company/{number}/officers"
        return await self._fetch(
            OfficersResponse,
            "officers",
            self._api_base + path,
            self._web_base + path,
            self._settings.cache_ttl_officers,
        )

    async def get_pscs(self, company_number: str) -> ConnectorResponse[PSCsResponse]:
        number = self._require_number(company_number)
        path = f"/company/{number}/persons-with-significant-control"
        return await self._fetch(
            PSCsResponse,
            "pscs",
            self._api_base + path,
            self._web_base + path,
            self._settings.cache_ttl_pscs,
        )

    # --- Internals ---

    def _require_number(self, company_number: str) -> str:
        number = normalize_company_number(company_number)
        if not _VALID_NUMBER.match(number):
            raise ConnectorError(
                ConnectorErrorCode.INVALID_REQUEST,
                f"Invalid company number: {company_number!r}",
            )
        return number

    async def _fetch(
        self,
        model: type[M],
        request_kind: str,
        api_url: str,
        public_url: str | None,
        ttl_seconds: int,
    ) -> ConnectorResponse[M]:
        request = FetchRequest(
            source=COMPANIES_HOUSE_SOURCE,
            request_kind=request_kind,
            url=api_url,
            ttl_seconds=ttl_seconds,
        )
        result = await self._cache.get_or_fetch(request)

        if not 200 <= result.status < 300:
            code = error_code_for_status(result.status)
            logger.warning(
                "Companies House %s returned HTTP %d (%s)",
                request_kind, result.status, code.value,
            )
            raise ConnectorError(
                code,
                f"Companies House API error: {result.status}",
                status=result.status,
                api_url=api_url,
            )

        try:
            data = model.model_validate_json(result.body)
        except ValidationError as e:
            raise ConnectorError(
                ConnectorErrorCode.PARSE_ERROR,
                f"Unparseable {request_kind} response: {e.error_count()} errors",
                status=result.status,
                api_url=api_url,
            ) from e

        evidence = Evidence(
            api_url=api_url,
            public_url=public_url,
            fetched_at=utc_timestamp(),
            from_cache=result.hit,
        )
        return ConnectorResponse[model](data=data, evidence=evidence)
