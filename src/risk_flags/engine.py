# src/risk_flags/engine.py — v1
"""Risk flag engine: evaluates rules F1-F7 against a dossier.

Usage:
    result = compute_risk_flags(dossier, raw_input, reference_date="2024-01-15")
    dossier = apply_risk_flags(dossier, result.flags)

Flags are explicit rule outcomes, never scores. Output is always sorted by id.
"""

from __future__ import annotations

import logging

from suppliercheck.core.models import Dossier, RiskFlag
from suppliercheck.dossier.upstream import DossierInput
from suppliercheck.risk_flags.models import RiskEngineConfig, RiskFlagsInput, RiskFlagsResult
from suppliercheck.risk_flags.rules import RULES

logger = logging.getLogger(__name__)


def compute_risk_flags(
    dossier: Dossier,
    raw_input: DossierInput,
    reference_date: str,
    config: RiskEngineConfig | None = None,
) -> RiskFlagsResult:
    """Run every rule and return the fired flags sorted by id.

    Args:
        dossier: Normalized dossier from the builder.
        raw_input: Raw input, for fields the dossier does not carry.
        reference_date: Anchor for time-window rules (F6), ISO date or timestamp.
        config: Engine configuration; defaults to a 12 month / 3 change F6 window.
    """
    config = config or RiskEngineConfig()
    data = RiskFlagsInput(dossier=dossier, raw_input=raw_input, reference_date=reference_date)

    flags: list[RiskFlag] = []
    for rule in RULES.values():
        flag = rule(data, config)
        if flag is not None:
            flags.append(flag)
    flags.sort(key=lambda f: f.id.value)

    logger.info(
        "Computed %d risk flags for %s: %s",
        len(flags), dossier.company.company_number,
        ",".join(f.id.value for f in flags) or "none",
    )
    return RiskFlagsResult(flags=flags)


def apply_risk_flags(dossier: Dossier, flags: list[RiskFlag]) -> Dossier:
    """Return a new dossier carrying flags (sorted by id). The input is unchanged."""
    return dossier.model_copy(
        update={"risk_flags": sorted(flags, key=lambda f: f.id.value)}
    )


def build_dossier_with_risk_flags(
    dossier: Dossier,
    raw_input: DossierInput,
    reference_date: str,
    config: RiskEngineConfig | None = None,
) -> Dossier:
    """Compute and apply flags in one step."""
    result = compute_risk_flags(dossier, raw_input, reference_date, config)
    return apply_risk_flags(dossier, result.flags)
