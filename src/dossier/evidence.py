# src/dossier/evidence.py — v1
"""Stable evidence ids derived from API URLs.

An id is the SHA-256 of the API URL truncated to 12 hex characters. It is a
provenance label for citing upstream calls, not a security token, so the
shortened digest is acceptable.
"""

from __future__ import annotations

import hashlib
from typing import Iterable

from suppliercheck.core.models import Evidence, EvidenceRecord

EVIDENCE_ID_LENGTH = 12


def evidence_id(api_url: str) -> str:
    """Return the 12-character lowercase hex id for an API URL."""
    return hashlib.sha256(api_url.encode("utf-8")).hexdigest()[:EVIDENCE_ID_LENGTH]


def with_id(evidence: Evidence) -> EvidenceRecord:
    """Attach the stable id to an evidence record. The input is left untouched."""
    return EvidenceRecord(
        id=evidence_id(evidence.api_url),
        api_url=evidence.api_url,
        public_url=evidence.public_url,
        fetched_at=evidence.fetched_at,
        from_cache=evidence.from_cache,
    )


def bundle_evidence(evidence_list: Iterable[Evidence]) -> list[EvidenceRecord]:
    """Attach ids and sort by id for deterministic serialization order."""
    return sorted((with_id(e) for e in evidence_list), key=lambda r: r.id)


def create_evidence_map(evidence_list: Iterable[Evidence]) -> dict[str, EvidenceRecord]:
    """Map id -> record, iterating in id order.

    Records citing the same API URL collapse to one entry; the one with the
    greatest api_url/fetched_at ordering wins, so the result does not depend on
    input order.
    """
    ordered = sorted(evidence_list, key=lambda e: (e.api_url, e.fetched_at))
    by_id: dict[str, EvidenceRecord] = {}
    for evidence in ordered:
        record = with_id(evidence)
        by_id[record.id] = record
    return dict(sorted(by_id.items()))
