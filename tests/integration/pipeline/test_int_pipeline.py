# tests/integration/pipeline/test_int_pipeline.py — v1
"""End-to-end: connector -> registry -> builder -> risk engine over a file cache.

Upstream is scripted in memory; the cache is a real SQLite file so hits
survive a restart of the pipeline.
"""

from __future__ import annotations

import json

import pytest

from suppliercheck.api.facade import compile_dossier
from suppliercheck.cache.fetch_cache import FetchCache
from suppliercheck.cache.sqlite_store import SqliteFetchStore
from suppliercheck.config.settings import Settings
from suppliercheck.dossier.builder import serialize_dossier

API = "https://api.company-information.service.gov.uk/company"
HEADER = "Company number,Organisation name,Statement year,Date signed,Statement URL\n"
REFERENCE = "2024-01-15"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        cache_db_path=str(tmp_path / "cache.db"),
        registry_url_pattern="https://msr.test/{year}.csv",
        registry_years="2024,2023",
    )


def _script(upstream, number: str, raw) -> None:
    upstream.add(f"{API}/{number}", raw.profile.model_dump_json(by_alias=True))
    upstream.add(f"{API}/{number}/officers", raw.officers.model_dump_json())
    upstream.add(
        f"{API}/{number}/persons-with-significant-control",
        raw.pscs.model_dump_json(by_alias=True),
    )


async def _compile(settings, upstream, clock, number, generated_at):
    async with FetchCache(SqliteFetchStore(settings.cache_db_path), upstream, clock=clock) as cache:
        return await compile_dossier(
            number, settings=settings, cache=cache,
            reference_date=REFERENCE, generated_at=generated_at,
        )


class TestScenarios:
    @pytest.mark.asyncio
    async def test_active_company(self, settings, upstream, clock, active_input, fixed_generated_at):
        _script(upstream, "12345678", active_input)
        upstream.add("https://msr.test/2024.csv", HEADER)
        upstream.add("https://msr.test/2023.csv", HEADER)

        result = await _compile(settings, upstream, clock, "12345678", fixed_generated_at)

        assert [f.id.value for f in result.flags] == ["F7"]
        assert [o.name for o in result.dossier.officers][0] == "BROWN, Michael"

    @pytest.mark.asyncio
    async def test_dissolved_company(self, settings, upstream, clock, dissolved_input, fixed_generated_at):
        _script(upstream, "SC654321", dissolved_input)

        result = await _compile(settings, upstream, clock, "sc654321", fixed_generated_at)

        assert [f.id.value for f in result.flags] == ["F1", "F5"]
        assert result.dossier.company.company_number == "SC654321"

    @pytest.mark.asyncio
    async def test_statement_holder(self, settings, upstream, clock, statement_input, fixed_generated_at):
        _script(upstream, "00123456", statement_input)
        upstream.add(
            "https://msr.test/2023.csv",
            HEADER + "00123456,Big Corporation PLC,2023,,https://msr.test/s/2023\n",
        )
        upstream.add("https://msr.test/2024.csv", "", status=404)

        result = await _compile(settings, upstream, clock, "123456", fixed_generated_at)

        assert result.flags == []
        assert result.dossier.modern_slavery.url == "https://msr.test/s/2023"


class TestDeterminismAcrossRestarts:
    @pytest.mark.asyncio
    async def test_cached_rebuild_is_byte_identical(
        self, settings, upstream, clock, active_input, fixed_generated_at,
    ):
        _script(upstream, "12345678", active_input)

        first = await _compile(settings, upstream, clock, "12345678", fixed_generated_at)
        calls_after_first = len(upstream.calls)
        second = await _compile(settings, upstream, clock, "12345678", fixed_generated_at)

        assert len(upstream.calls) == calls_after_first
        assert serialize_dossier(first.dossier) == serialize_dossier(second.dossier)
        assert [e.id for e in first.evidence] == [e.id for e in second.evidence]
        assert not any(e.from_cache for e in first.evidence)
        assert all(e.from_cache for e in second.evidence)

    @pytest.mark.asyncio
    async def test_expired_cache_refetches(
        self, settings, upstream, clock, active_input, fixed_generated_at,
    ):
        _script(upstream, "12345678", active_input)
        await _compile(settings, upstream, clock, "12345678", fixed_generated_at)
        clock.advance(settings.cache_ttl_profile + 1)
        await _compile(settings, upstream, clock, "12345678", fixed_generated_at)
        assert upstream.count(f"{API}/12345678") == 2

    @pytest.mark.asyncio
    async def test_output_json_shape(self, settings, upstream, clock, statement_input, fixed_generated_at):
        _script(upstream, "00123456", statement_input)
        result = await _compile(settings, upstream, clock, "00123456", fixed_generated_at)
        payload = json.loads(result.to_json())
        assert list(payload["dossier"]) == ["company", "officers", "pscs", "riskFlags", "generatedAt"]
        assert payload["dossier"]["company"]["sicCodes"] == ["10110", "10120", "10130"]
