# src/api/models.py — v1
"""API-level models: CompiledDossier."""

from __future__ import annotations

import json

from pydantic import BaseModel, Field

from suppliercheck.core.models import Dossier, EvidenceRecord, RiskFlag


class CompiledDossier(BaseModel):
    """Return value of facade.compile_dossier(): dossier with flags applied."""

    dossier: Dossier
    evidence: list[EvidenceRecord] = Field(default_factory=list)
    flags: list[RiskFlag] = Field(default_factory=list)
    request_id: str = ""

    def to_json(self) -> str:
        """Dossier and evidence as one deterministic JSON document."""
        payload = {
            "dossier": self.dossier.model_dump(mode="json", by_alias=True, exclude_none=True),
            "evidence": [
                e.model_dump(mode="json", by_alias=True, exclude_none=True)
                for e in self.evidence
            ],
        }
        return json.dumps(payload, indent=2, ensure_ascii=False)
