# src/registry/name_normalizer.py — v1
"""Company name and number normalization for registry matching.

Matching is exact equality after normalization; there is no fuzzy scoring.
"""

from __future__ import annotations

import re

# Trailing legal suffixes, stripped longest first.
COMPANY_SUFFIXES = [
    "PUBLIC LIMITED COMPANY",
    "LIMITED LIABILITY PARTNERSHIP",
    "COMMUNITY INTEREST COMPANY",
    "SOCIETAS EUROPAEA",
    "LIMITED",
    "LTD",
    "PLC",
    "LLP",
    "CIC",
    "UNLIMITED",
    "UNLTD",
    "SE",
]

_REPLACEMENTS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"[&+]"), " AND "),
    (re.compile(r"['‘’\"“”.,]"), ""),
    (re.compile(r"[-_()\[\]]"), " "),
]

_SUFFIX_PATTERNS = [
    re.compile(rf"\s*\b{re.escape(suffix)}\b\s*$", re.IGNORECASE)
    for suffix in sorted(COMPANY_SUFFIXES, key=len, reverse=True)
]

_PREFIXED_NUMBER = re.compile(r"^([A-Z]{2})(\d+)$")


def normalize_company_name(name: str | None) -> str:
    """Uppercase, unify punctuation, strip trailing legal suffixes.

    "Smith & Sons Ltd." and "SMITH AND SONS LIMITED" both become "SMITH AND SONS".
    """
    if not name:
        return ""

    normalized = name.upper()
    for pattern, replacement in _REPLACEMENTS:
        normalized = pattern.sub(replacement, normalized)

    for pattern in _SUFFIX_PATTERNS:
        normalized = pattern.sub("", normalized)

    return re.sub(r"\s+", " ", normalized).strip()


def names_match(name_a: str | None, name_b: str | None) -> bool:
    return normalize_company_name(name_a) == normalize_company_name(name_b)


def normalize_company_number(company_number: str | None) -> str:
    """Canonical UK company number.

    Two-letter prefixes (SC, NI, OC, ...) keep the prefix and pad digits to 6;
    purely numeric numbers pad to 8. Anything else is returned uppercased and
    stripped of non-alphanumerics.
    """
    if not company_number:
        return ""

    normalized = re.sub(r"[^A-Z0-9]", "", company_number.strip().upper())

    prefixed = _PREFIXED_NUMBER.match(normalized)
    if prefixed:
        prefix, digits = prefixed.groups()
        return prefix + digits.zfill(6)

    if normalized.isdigit():
        return normalized.zfill(8)

    return normalized


def company_numbers_match(number_a: str | None, number_b: str | None) -> bool:
    """True when both numbers are non-empty and equal after normalization."""
    a = normalize_company_number(number_a)
    b = normalize_company_number(number_b)
    return bool(a) and bool(b) and a == b
