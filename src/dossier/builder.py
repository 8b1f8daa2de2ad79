# src/dossier/builder.py — v1
"""Dossier builder: deterministic Dossier documents from raw upstream records.

Guarantees:
  - Same input and generated_at produce byte-identical JSON.
  - Officers and PSCs use stable multi-key orderings.
  - Evidence ids are hashes of API URLs; the evidence list is sorted by id.
  - generated_at is the only field that may differ between two builds.

Risk flags are not part of the build; the dossier comes back with an empty
risk_flags list and the risk engine attaches flags afterwards.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import BaseModel

from suppliercheck.core.models import Dossier, EvidenceRecord
from suppliercheck.dossier.evidence import bundle_evidence
from suppliercheck.dossier.normalizers import (
    normalize_company,
    normalize_modern_slavery,
    normalize_officers,
    normalize_pscs,
)
from suppliercheck.dossier.sort import sort_officers, sort_pscs
from suppliercheck.dossier.upstream import DossierInput

logger = logging.getLogger(__name__)


class DeterminismError(Exception):
    """Two builds of the same input serialized differently."""


class DossierResult(BaseModel):
    """Built dossier plus the evidence records that fed it."""

    dossier: Dossier
    evidence: list[EvidenceRecord]


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a 'Z' suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def build_dossier(data: DossierInput, generated_at: str | None = None) -> DossierResult:
    """Build a Dossier from raw connector output.

    Args:
        data: Raw profile, officers, PSCs, registry result and evidence.
        generated_at: Fixed timestamp; defaults to the current UTC time.

    Returns:
        DossierResult with the dossier (risk_flags empty) and evidence sorted by id.
    """
    company = normalize_company(data.profile)
    officers = sort_officers(normalize_officers(data.officers))
    pscs = sort_pscs(normalize_pscs(data.pscs))
    modern_slavery = normalize_modern_slavery(data.modern_slavery)

    evidence = bundle_evidence(
        [data.evidence.profile, data.evidence.officers, data.evidence.pscs]
    )

    dossier = Dossier(
        company=company,
        officers=officers,
        pscs=pscs,
        risk_flags=[],
        modern_slavery=modern_slavery,
        generated_at=generated_at or utc_timestamp(),
    )

    logger.info(
        "Built dossier for %s: %d officers, %d PSCs, statement=%s",
        company.company_number, len(officers), len(pscs), modern_slavery is not None,
    )
    return DossierResult(dossier=dossier, evidence=evidence)


def serialize_dossier(dossier: Dossier) -> str:
    """Deterministic JSON: camelCase keys in declaration order, absent values omitted."""
    return dossier.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def verify_determinism(dossier: Dossier) -> bool:
    """True when two serializations of the dossier are byte-identical."""
    return serialize_dossier(dossier) == serialize_dossier(dossier)


def assert_deterministic(data: DossierInput, generated_at: str) -> DossierResult:
    """Build twice with a fixed timestamp and fail loudly if the outputs differ.

    Raises:
        DeterminismError: If the two serialized dossiers or evidence lists differ.
    """
    first = build_dossier(data, generated_at)
    second = build_dossier(data, generated_at)
    if (
        serialize_dossier(first.dossier) != serialize_dossier(second.dossier)
        or first.evidence != second.evidence
        or not verify_determinism(first.dossier)
    ):
        logger.error(
            "Determinism violation for %s", first.dossier.company.company_number
        )
        raise DeterminismError(
            f"Dossier for {first.dossier.company.company_number!r} is not deterministic"
        )
    return first
