# src/dossier/sort.py — v1
"""Stable multi-key orderings for deterministic dossier output.

All comparisons are plain lexicographic string comparisons (code point
order). Missing dates sort after every present date.
"""

from __future__ import annotations

from suppliercheck.core.models import PSC, Officer


def _date_key(value: str | None) -> tuple[bool, str]:
    """Sort key placing empty or missing dates last."""
    return (not value, value or "")


def sort_officers(officers: list[Officer]) -> list[Officer]:
    """Sort by appointment date, then name, then role. Returns a new list."""
    return sorted(
        officers,
        key=lambda o: (*_date_key(o.appointed_on), o.name, o.role),
    )


def sort_pscs(pscs: list[PSC]) -> list[PSC]:
    """Sort by notified-on date, then name, then first nature of control."""
    return sorted(
        pscs,
        key=lambda p: (
            *_date_key(p.notified_on),
            p.name,
            p.nature_of_control[0] if p.nature_of_control else "",
        ),
    )


def sort_natures_of_control(natures: list[str]) -> list[str]:
    return sorted(natures)


def sort_sic_codes(codes: list[str]) -> list[str]:
    """Lexicographic string order, not numeric."""
    return sorted(codes)
