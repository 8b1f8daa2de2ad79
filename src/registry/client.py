# src/registry/client.py — v1
"""Registry client: fetches yearly registry CSVs through the fetch cache.

A year whose file cannot be fetched or parsed is skipped; the lookup then
works with the years that are available. A company absent from every file is
found=False, not an error.
"""

from __future__ import annotations

import logging

from suppliercheck.cache.fetch_cache import FetchCache
from suppliercheck.cache.models import FetchRequest
from suppliercheck.config.settings import Settings
from suppliercheck.registry.lookup import lookup_modern_slavery, parse_registry_csv
from suppliercheck.registry.models import (
    ColumnMapping,
    ModernSlaveryRegistryResult,
    RegistryYear,
)

logger = logging.getLogger(__name__)

REGISTRY_SOURCE = "modern_slavery_registry"


class RegistryClient:
    """Modern slavery registry lookups backed by the fetch cache."""

    def __init__(self, cache: FetchCache, settings: Settings | None = None) -> None:
        self._cache = cache
        self._settings = settings or Settings()
        self._mapping = ColumnMapping(
            company_number=self._settings.registry_column_company_number or None,
            company_name=self._settings.registry_column_company_name or None,
            year=self._settings.registry_column_year or None,
            signed_date=self._settings.registry_column_signed_date or None,
            statement_url=self._settings.registry_column_statement_url or None,
        )

    def csv_url(self, year: int) -> str:
        return self._settings.registry_url_pattern.replace("{year}", str(year))

    async def load_year(self, year: int) -> RegistryYear | None:
        """Fetch and parse one year's file. None when unavailable."""
        url = self.csv_url(year)
        request = FetchRequest(
            source=REGISTRY_SOURCE,
            request_kind=f"csv:{year}",
            url=url,
            ttl_seconds=self._settings.cache_ttl_registry,
        )
        try:
            result = await self._cache.get_or_fetch(request)
        except Exception as e:
            logger.warning("Registry file for %d unavailable: %s", year, e)
            return None

        if result.status != 200:
            logger.warning("Registry file for %d returned HTTP %d", year, result.status)
            return None

        rows = parse_registry_csv(result.body)
        if not rows:
            logger.warning("Registry file for %d has no rows", year)
            return None

        return RegistryYear(year=year, csv_url=url, rows=rows, mapping=self._mapping)

    async def lookup(self, company_number: str, company_name: str) -> ModernSlaveryRegistryResult:
        """Look a company up across all configured years."""
        years: list[RegistryYear] = []
        for year in self._settings.registry_years_list:
            loaded = await self.load_year(year)
            if loaded is not None:
                years.append(loaded)

        result = lookup_modern_slavery(company_number, company_name, years)
        logger.info(
            "Registry lookup for %s: found=%s latest_year=%s (%d/%d years available)",
            company_number, result.found, result.latest_year,
            len(years), len(self._settings.registry_years_list),
        )
        return result
