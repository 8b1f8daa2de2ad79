# src/registry/lookup.py — v1
"""Modern slavery registry lookup over already-parsed registry files.

Match strategy, in order:
  1. exact company number (only when the file has a company number column)
  2. normalized company name equality
"""

from __future__ import annotations

import csv
import io
import logging
import re
from typing import Iterable

from suppliercheck.registry.models import (
    ColumnMapping,
    ModernSlaveryRegistryResult,
    RegistryEvidence,
    RegistryMatch,
    RegistryYear,
)
from suppliercheck.registry.name_normalizer import (
    company_numbers_match,
    names_match,
    normalize_company_name,
    normalize_company_number,
)

logger = logging.getLogger(__name__)

_MIN_YEAR = 2015
_MAX_YEAR = 2100
_YEAR_IN_TEXT = re.compile(r"\b(20\d{2})\b")


def parse_registry_csv(body: bytes | str) -> list[dict[str, str]]:
    """Parse a registry CSV into header-keyed rows.

    Headers and values are trimmed, blank header cells dropped and blank
    lines skipped. A file with no data rows yields an empty list.
    """
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    text = text.removeprefix("\ufeff")
    reader = csv.reader(io.StringIO(text))
    try:
        headers = [h.strip() for h in next(reader)]
    except StopIteration:
        return []

    rows: list[dict[str, str]] = []
    for values in reader:
        if not values or all(not v.strip() for v in values):
            continue
        row: dict[str, str] = {}
        for i, header in enumerate(headers):
            if header:
                row[header] = values[i].strip() if i < len(values) else ""
        rows.append(row)
    return rows


def _value(row: dict[str, str], column: str | None) -> str:
    if not column:
        return ""
    return row.get(column, "").strip()


def find_company_in_rows(
    rows: list[dict[str, str]],
    mapping: ColumnMapping,
    company_number: str,
    company_name: str,
) -> RegistryMatch | None:
    """Return the first matching row, trying company number before name."""
    number = normalize_company_number(company_number)
    name = normalize_company_name(company_name)

    if mapping.company_number and number:
        for index, row in enumerate(rows):
            if company_numbers_match(_value(row, mapping.company_number), number):
                return RegistryMatch(row=row, row_index=index, match_method="company_number")

    if mapping.company_name and name:
        for index, row in enumerate(rows):
            row_name = _value(row, mapping.company_name)
            if row_name and names_match(row_name, name):
                return RegistryMatch(row=row, row_index=index, match_method="normalized_name")

    return None


def statement_year(row: dict[str, str], mapping: ColumnMapping, fallback_year: int) -> int:
    """Year column if plausible, else a 20xx year in the signed date, else the file year."""
    raw_year = _value(row, mapping.year)
    if raw_year.isdigit() and _MIN_YEAR <= int(raw_year) <= _MAX_YEAR:
        return int(raw_year)

    found = _YEAR_IN_TEXT.search(_value(row, mapping.signed_date))
    if found:
        return int(found.group(1))

    return fallback_year


def lookup_modern_slavery(
    company_number: str,
    company_name: str,
    years: Iterable[RegistryYear],
) -> ModernSlaveryRegistryResult:
    """Search every registry year, newest first.

    Each matching year contributes one evidence record. The statement URL is
    taken from the match with the latest statement year.
    """
    evidence: list[RegistryEvidence] = []
    latest_year: int | None = None
    statement_url: str | None = None

    for registry_year in sorted(years, key=lambda y: y.year, reverse=True):
        match = find_company_in_rows(
            registry_year.rows, registry_year.mapping, company_number, company_name
        )
        if match is None:
            continue

        year = statement_year(match.row, registry_year.mapping, registry_year.year)
        evidence.append(
            RegistryEvidence(
                csv_url=registry_year.csv_url,
                year=year,
                row_index=match.row_index,
                match_method=match.match_method,
            )
        )
        logger.debug(
            "Registry match for %s in %d by %s (row %d)",
            company_number, registry_year.year, match.match_method, match.row_index,
        )

        if latest_year is None or year > latest_year:
            latest_year = year
            url = _value(match.row, registry_year.mapping.statement_url)
            if url:
                statement_url = url

    return ModernSlaveryRegistryResult(
        found=bool(evidence),
        latest_year=latest_year,
        statement_summary_url=statement_url,
        evidence=evidence,
    )
