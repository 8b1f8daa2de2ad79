# src/registry/models.py — v1
"""Modern slavery registry models: parsed rows, column mapping, lookup result."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

MatchMethod = Literal["company_number", "normalized_name"]


class ColumnMapping(BaseModel):
    """Which CSV header holds each field. None means the column is absent."""

    company_number: str | None = None
    company_name: str | None = None
    year: str | None = None
    signed_date: str | None = None
    statement_url: str | None = None


class RegistryYear(BaseModel):
    """One year's registry file, already parsed into header-keyed rows."""

    year: int
    csv_url: str
    rows: list[dict[str, str]] = Field(default_factory=list)
    mapping: ColumnMapping = Field(default_factory=ColumnMapping)


class RegistryMatch(BaseModel):
    row: dict[str, str]
    row_index: int
    match_method: MatchMethod


class RegistryEvidence(BaseModel):
    csv_url: str
    year: int
    row_index: int | None = None
    match_method: MatchMethod


class ModernSlaveryRegistryResult(BaseModel):
    """Outcome of a registry lookup. A miss is found=False, not an error."""

    found: bool = False
    latest_year: int | None = None
    statement_summary_url: str | None = None
    evidence: list[RegistryEvidence] = Field(default_factory=list)
