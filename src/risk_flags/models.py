# src/risk_flags/models.py — v1
"""Risk flag engine inputs, results and configuration."""

from __future__ import annotations

from typing import Callable

from pydantic import BaseModel, Field

from suppliercheck.core.models import Dossier, RiskFlag
from suppliercheck.dossier.upstream import DossierInput


class OfficerChangesConfig(BaseModel):
    """F6 window: changes within lookback_months >= threshold fire the flag."""

    lookback_months: int = Field(default=12, ge=1)
    threshold: int = Field(default=3, ge=1)


class RiskEngineConfig(BaseModel):
    officer_changes: OfficerChangesConfig = Field(default_factory=OfficerChangesConfig)


class RiskFlagsInput(BaseModel):
    """Normalized dossier plus raw input for fields the dossier does not carry."""

    dossier: Dossier
    raw_input: DossierInput
    reference_date: str


class RiskFlagsResult(BaseModel):
    flags: list[RiskFlag] = Field(default_factory=list)


RiskFlagRule = Callable[[RiskFlagsInput, RiskEngineConfig], RiskFlag | None]
