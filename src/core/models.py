# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

Canonical, upstream-schema-independent records: the dossier and everything it
contains, evidence records and risk flags. Field names are snake_case in
Python and camelCase on the wire (``companyNumber``, ``riskFlags``, ...);
that JSON shape is the compatibility surface for renderers and API consumers.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DomainModel(BaseModel):
    """Immutable base with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# === ENUMS ===


class FlagSeverity(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"


class FlagId(str, Enum):
    """Identifiers of the explicit risk rules, ordered F1 < ... < F7."""

    F1 = "F1"
    F2 = "F2"
    F3 = "F3"
    F4 = "F4"
    F5 = "F5"
    F6 = "F6"
    F7 = "F7"


# === DOSSIER CONTENT ===


class Address(DomainModel):
    line1: str = ""
    line2: str | None = None
    town: str = ""
    postcode: str = ""
    country: str = ""


class Company(DomainModel):
    company_number: str = ""
    name: str = ""
    status: str = ""
    type: str = ""
    incorporation_date: str = ""
    registered_office: Address = Field(default_factory=Address)
    sic_codes: list[str] = Field(default_factory=list)


class Officer(DomainModel):
    """Company officer. Only birth month and year are kept, never the day."""

    name: str = ""
    role: str = ""
    appointed_on: str = ""
    resigned_on: str | None = None
    nationality: str = ""
    birth_month: int | None = None
    birth_year: int | None = None


class PSC(DomainModel):
    """Person with Significant Control."""

    name: str = ""
    nature_of_control: list[str] = Field(default_factory=list)
    notified_on: str = ""
    ceased_on: str | None = None
    nationality: str = ""


class ModernSlaveryStatement(DomainModel):
    """Statement found in the registry.

    The registry only says that a statement exists and where; signer and
    signing date are not available from it and stay empty.
    """

    url: str = ""
    signed_by: str = ""
    date_signed: str = ""
    compliant: bool = False


class RiskFlag(DomainModel):
    id: FlagId
    title: str
    severity: FlagSeverity
    explanation: str
    evidence_url: str | None = None


class Dossier(DomainModel):
    """Canonical due-diligence document for one company.

    risk_flags is empty as built; flags are attached by the risk engine.
    """

    company: Company
    officers: list[Officer] = Field(default_factory=list)
    pscs: list[PSC] = Field(default_factory=list)
    risk_flags: list[RiskFlag] = Field(default_factory=list)
    modern_slavery: ModernSlaveryStatement | None = None
    generated_at: str


# === PROVENANCE ===


class Evidence(DomainModel):
    """Provenance of one upstream call."""

    api_url: str
    public_url: str | None = None
    fetched_at: str
    from_cache: bool = False


class EvidenceRecord(DomainModel):
    """Evidence with its stable id (hash of api_url)."""

    id: str
    api_url: str
    public_url: str | None = None
    fetched_at: str
    from_cache: bool = False
