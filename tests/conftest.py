# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides three dossier scenarios (active, dissolved, statement holder), a
controllable clock and a scripted upstream. No network access: every fetch is
served from memory.
"""

from __future__ import annotations

from typing import Any

import pytest

from suppliercheck.cache.models import UpstreamResponse
from suppliercheck.core.models import Evidence
from suppliercheck.dossier.upstream import DossierInput

API = "https://api.company-information.service.gov.uk"
WEB = "https://find-and-update.company-information.service.gov.uk"


def _evidence(number: str, fetched_at: str, from_cache: bool) -> dict[str, Evidence]:
    paths = {
        "profile": f"/company/{number}",
        "officers": f"/company/{number}/officers",
        "pscs": f"/company/{number}/persons-with-significant-control",
    }
    return {
        name: Evidence(
            api_url=API + path,
            public_url=WEB + path,
            fetched_at=fetched_at,
            from_cache=from_cache,
        )
        for name, path in paths.items()
    }


# === FIXTURES: Scenario data ===


@pytest.fixture
def fixed_generated_at() -> str:
    return "2024-01-15T12:00:00.000Z"


@pytest.fixture
def active_profile() -> dict[str, Any]:
    return {
        "can_file": True,
        "company_name": "EXAMPLE TRADING LIMITED",
        "company_number": "12345678",
        "company_status": "active",
        "date_of_creation": "2020-01-15",
        "type": "ltd",
        "sic_codes": ["62090", "62020"],
        "registered_office_address": {
            "address_line_1": "123 Business Park",
            "address_line_2": "Enterprise Way",
            "locality": "Manchester",
            "postal_code": "M1 2AB",
            "country": "United Kingdom",
        },
        "links": {"self": "/company/12345678"},
    }


@pytest.fixture
def active_officers() -> dict[str, Any]:
    return {
        "items": [
            {
                "name": "JONES, Sarah Elizabeth",
                "officer_role": "director",
                "appointed_on": "2020-02-01",
                "nationality": "British",
                "date_of_birth": {"month": 11, "year": 1978},
            },
            {
                "name": "SMITH, John David",
                "officer_role": "director",
                "appointed_on": "2020-01-15",
                "nationality": "British",
                "date_of_birth": {"month": 6, "year": 1985},
            },
            {
                "name": "BROWN, Michael",
                "officer_role": "secretary",
                "appointed_on": "2020-01-15",
                "resigned_on": "2023-06-30",
                "nationality": "British",
            },
        ],
        "items_per_page": 35,
        "kind": "officer-list",
        "start_index": 0,
        "total_results": 3,
    }


@pytest.fixture
def active_pscs() -> dict[str, Any]:
    return {
        "items": [
            {
                "name": "Ms Jane Doe",
                "natures_of_control": ["ownership-of-shares-25-to-50-percent"],
                "notified_on": "2021-06-20",
                "nationality": "British",
                "kind": "individual-person-with-significant-control",
            },
            {
                "name": "Mr John David Smith",
                "natures_of_control": [
                    "voting-rights-75-to-100-percent",
                    "ownership-of-shares-75-to-100-percent",
                    "right-to-appoint-and-remove-directors",
                ],
                "notified_on": "2020-01-15",
                "nationality": "British",
                "kind": "individual-person-with-significant-control",
            },
        ],
        "items_per_page": 25,
        "kind": "persons-with-significant-control#list",
        "links": {"self": "/company/12345678/persons-with-significant-control"},
        "start_index": 0,
        "total_results": 2,
    }


@pytest.fixture
def active_input(active_profile, active_officers, active_pscs) -> DossierInput:
    """Active company, three officers, two PSCs, no statement."""
    return DossierInput.model_validate({
        "profile": active_profile,
        "officers": active_officers,
        "pscs": active_pscs,
        "modern_slavery": {"found": False, "evidence": []},
        "evidence": _evidence("12345678", "2024-01-15T10:00:00.000Z", False),
    })


@pytest.fixture
def dissolved_input() -> DossierInput:
    """Dissolved Scottish company with no officers and no PSCs."""
    return DossierInput.model_validate({
        "profile": {
            "can_file": False,
            "company_name": "DEFUNCT ENTERPRISES LTD",
            "company_number": "SC654321",
            "company_status": "dissolved",
            "date_of_cessation": "2023-06-15",
            "date_of_creation": "2015-08-20",
            "type": "ltd",
            "sic_codes": ["47110"],
            "registered_office_address": {
                "address_line_1": "100 George Street",
                "locality": "Edinburgh",
                "postal_code": "EH2 3ES",
                "country": "Scotland",
            },
        },
        "officers": {"items": [], "kind": "officer-list"},
        "pscs": {"items": [], "kind": "persons-with-significant-control#list"},
        "modern_slavery": {"found": False, "evidence": []},
        "evidence": _evidence("SC654321", "2024-01-15T11:00:00.000Z", True),
    })


@pytest.fixture
def statement_input() -> DossierInput:
    """Large plc with a corporate PSC and a registry statement."""
    return DossierInput.model_validate({
        "profile": {
            "can_file": True,
            "company_name": "BIG CORPORATION PLC",
            "company_number": "00123456",
            "company_status": "active",
            "date_of_creation": "1990-03-01",
            "type": "plc",
            "sic_codes": ["10110", "10120", "10130"],
            "registered_office_address": {
                "address_line_1": "1 Corporate Tower",
                "address_line_2": "Financial District",
                "locality": "London",
                "postal_code": "EC1A 1BB",
                "country": "England",
            },
        },
        "officers": {
            "items": [
                {
                    "name": "LORD CHAIRMAN, Richard",
                    "officer_role": "director",
                    "appointed_on": "2010-01-01",
                    "nationality": "British",
                    "date_of_birth": {"month": 1, "year": 1955},
                },
            ],
        },
        "pscs": {
            "items": [
                {
                    "name": "PARENT HOLDINGS LTD",
                    "natures_of_control": [
                        "ownership-of-shares-75-to-100-percent",
                        "voting-rights-75-to-100-percent",
                    ],
                    "notified_on": "2019-04-01",
                    "nationality": "",
                    "kind": "corporate-entity-person-with-significant-control",
                },
            ],
        },
        "modern_slavery": {
            "found": True,
            "latest_year": 2024,
            "statement_summary_url": (
                "https://modern-slavery-statement-registry.service.gov.uk"
                "/statement-summary/12345"
            ),
            "evidence": [
                {
                    "csv_url": (
                        "https://modern-slavery-statement-registry.service.gov.uk"
                        "/download/2024.csv"
                    ),
                    "year": 2024,
                    "row_index": 456,
                    "match_method": "company_number",
                },
            ],
        },
        "evidence": _evidence("00123456", "2024-01-15T12:00:00.000Z", False),
    })


# === FIXTURES: Clock and upstream ===


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstream:
    """Scripted async fetch function recording every call."""

    def __init__(self) -> None:
        self.responses: dict[str, UpstreamResponse] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[str] = []

    def add(self, url: str, body: bytes | str, status: int = 200,
            content_type: str = "application/json") -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.responses[url] = UpstreamResponse(
            status=status, body=body, content_type=content_type,
        )

    def fail(self, url: str, exc: Exception) -> None:
        self.failures[url] = exc

    def count(self, url: str) -> int:
        return self.calls.count(url)

    async def __call__(self, url: str, headers: dict[str, str] | None = None) -> UpstreamResponse:
        self.calls.append(url)
        if url in self.failures:
            raise self.failures[url]
        if url in self.responses:
            return self.responses[url]
        return UpstreamResponse(status=404, body=b'{"errors":[{"error":"not-found"}]}')


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()
