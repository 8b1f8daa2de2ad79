# src/api/facade.py — v1
"""Public API facade — single entry point for dossier compilation.

Usage:
    from suppliercheck.api.facade import compile_dossier
    result = await compile_dossier("12345678")
    print(result.to_json())
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone

from suppliercheck.api.models import CompiledDossier
from suppliercheck.cache.cache_factory import create_cache_store
from suppliercheck.cache.fetch_cache import FetchCache
from suppliercheck.config.settings import Settings
from suppliercheck.connectors.companies_house import CompaniesHouseConnector
from suppliercheck.connectors.http import make_http_fetcher
from suppliercheck.dossier.builder import build_dossier
from suppliercheck.dossier.upstream import DossierEvidence, DossierInput
from suppliercheck.logging.context import clear_context, set_request_context, set_stage
from suppliercheck.registry.client import RegistryClient
from suppliercheck.risk_flags.engine import apply_risk_flags, compute_risk_flags
from suppliercheck.risk_flags.models import OfficerChangesConfig, RiskEngineConfig

logger = logging.getLogger(__name__)


def create_fetch_cache(settings: Settings) -> FetchCache:
    """FetchCache over the configured store and the default HTTP fetcher.

    Starts the background sweep when CACHE_SWEEP_INTERVAL_SECONDS > 0, which
    requires a running event loop.
    """
    store = create_cache_store(settings)
    fetch_fn = make_http_fetcher(
        api_key=settings.companies_house_api_key,
        timeout=settings.http_timeout_seconds,
    )
    cache = FetchCache(store, fetch_fn)
    if settings.cache_sweep_interval_seconds > 0:
        cache.start_sweeper(settings.cache_sweep_interval_seconds)
    return cache


def engine_config(settings: Settings) -> RiskEngineConfig:
    return RiskEngineConfig(
        officer_changes=OfficerChangesConfig(
            lookback_months=settings.officer_changes_lookback_months,
            threshold=settings.officer_changes_threshold,
        )
    )


async def compile_dossier(
    company_number: str,
    settings: Settings | None = None,
    cache: FetchCache | None = None,
    reference_date: str | None = None,
    generated_at: str | None = None,
) -> CompiledDossier:
    """Fetch, normalize and flag one company end-to-end.

    Pipeline:
      1. Company profile (a failure here aborts the compilation)
      2. Officers and PSCs, concurrently
      3. Modern slavery registry lookup
      4. Dossier build
      5. Risk flags F1-F7 against reference_date

    Args:
        company_number: Companies House number, any common format.
        settings: Global settings. Loaded from .env if None.
        cache: Fetch cache to use. When None, one is built from settings
            and closed before returning.
        reference_date: Anchor for time-window rules. Defaults to today (UTC).
        generated_at: Fixed dossier timestamp, for reproducible output.

    Returns:
        CompiledDossier with the flagged dossier and its evidence.

    Raises:
        ConnectorError: If any Companies House call fails.
    """
    settings = settings or Settings()
    request_id = uuid.uuid4().hex[:12]
    set_request_context(company_number, request_id)
    reference_date = reference_date or datetime.now(timezone.utc).date().isoformat()

    owns_cache = cache is None
    if cache is None:
        cache = create_fetch_cache(settings)

    logger.info("Compiling dossier: request_id=%s, reference_date=%s", request_id, reference_date)

    try:
        connector = CompaniesHouseConnector(cache, settings)

        set_stage("fetch")
        profile = await connector.get_company_profile(company_number)
        officers, pscs = await asyncio.gather(
            connector.get_officers(company_number),
            connector.get_pscs(company_number),
        )

        set_stage("registry")
        registry = RegistryClient(cache, settings)
        modern_slavery = await registry.lookup(
            profile.data.company_number or company_number,
            profile.data.company_name,
        )

        set_stage("build")
        raw_input = DossierInput(
            profile=profile.data,
            officers=officers.data,
            pscs=pscs.data,
            modern_slavery=modern_slavery,
            evidence=DossierEvidence(
                profile=profile.evidence,
                officers=officers.evidence,
                pscs=pscs.evidence,
            ),
        )
        built = build_dossier(raw_input, generated_at)

        set_stage("risk_flags")
        flags = compute_risk_flags(
            built.dossier, raw_input, reference_date, engine_config(settings)
        ).flags
        dossier = apply_risk_flags(built.dossier, flags)

        logger.info(
            "Dossier compiled: %d officers, %d PSCs, %d flags",
            len(dossier.officers), len(dossier.pscs), len(flags),
        )
        return CompiledDossier(
            dossier=dossier,
            evidence=built.evidence,
            flags=flags,
            request_id=request_id,
        )
    finally:
        if owns_cache:
            await cache.aclose()
        clear_context()
