# src/risk_flags/rules.py — v1
"""Risk flag rules F1-F7.

Each rule returns a RiskFlag when its condition holds and None otherwise.
Rules are independent, never mutate their input, and put the concrete figures
behind the decision into the explanation text.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timezone

from suppliercheck.core.models import FlagId, FlagSeverity, RiskFlag
from suppliercheck.risk_flags.models import RiskEngineConfig, RiskFlagRule, RiskFlagsInput

_DEFAULT_CONFIG = RiskEngineConfig()


def check_f1_status_not_active(
    data: RiskFlagsInput, config: RiskEngineConfig = _DEFAULT_CONFIG
) -> RiskFlag | None:
    """F1: company status is anything other than 'active'."""
    status = data.dossier.company.status
    if status == "active":
        return None
    return RiskFlag(
        id=FlagId.F1,
        title="Company not active",
        severity=FlagSeverity.HIGH,
        explanation=(
            f'Company status is "{status}". The company is not currently active '
            "and may not be able to fulfil obligations."
        ),
        evidence_url=data.raw_input.evidence.profile.public_url,
    )


def check_f2_accounts_overdue(
    data: RiskFlagsInput, config: RiskEngineConfig = _DEFAULT_CONFIG
) -> RiskFlag | None:
    """F2: accounts.overdue or accounts.next_accounts.overdue."""
    accounts = data.raw_input.profile.accounts
    if accounts is None:
        return None
    next_accounts = accounts.next_accounts
    overdue = accounts.overdue is True or (
        next_accounts is not None and next_accounts.overdue is True
    )
    if not overdue:
        return None

    due_on = next_accounts.due_on if next_accounts else None
    due_info = f" (due: {due_on})" if due_on else ""
    return RiskFlag(
        id=FlagId.F2,
        title="Accounts overdue",
        severity=FlagSeverity.MEDIUM,
        explanation=(
            f"The company has overdue accounts{due_info}. This may indicate "
            "financial difficulties or poor governance."
        ),
        evidence_url=data.raw_input.evidence.profile.public_url,
    )


def check_f3_confirmation_statement_overdue(
    data: RiskFlagsInput, config: RiskEngineConfig = _DEFAULT_CONFIG
) -> RiskFlag | None:
    """F3: confirmation_statement.overdue."""
    statement = data.raw_input.profile.confirmation_statement
    if statement is None or statement.overdue is not True:
        return None

    due_info = f" (due: {statement.next_due})" if statement.next_due else ""
    return RiskFlag(
        id=FlagId.F3,
        title="Confirmation statement overdue",
        severity=FlagSeverity.MEDIUM,
        explanation=(
            f"The company has an overdue confirmation statement{due_info}. This is "
            "a legal requirement and may indicate poor governance."
        ),
        evidence_url=data.raw_input.evidence.profile.public_url,
    )


def check_f4_insolvency_indicator(
    data: RiskFlagsInput, config: RiskEngineConfig = _DEFAULT_CONFIG
) -> RiskFlag | None:
    """F4: has_insolvency_history or has_been_liquidated."""
    profile = data.raw_input.profile
    indicators: list[str] = []
    if profile.has_insolvency_history is True:
        indicators.append("insolvency history")
    if profile.has_been_liquidated is True:
        indicators.append("liquidation history")
    if not indicators:
        return None

    return RiskFlag(
        id=FlagId.F4,
        title="Insolvency indicator",
        severity=FlagSeverity.HIGH,
        explanation=(
            f"The company has {' and '.join(indicators)}. This indicates "
            "significant financial distress."
        ),
        evidence_url=data.raw_input.evidence.profile.public_url,
    )


def check_f5_psc_missing(
    data: RiskFlagsInput, config: RiskEngineConfig = _DEFAULT_CONFIG
) -> RiskFlag | None:
    """F5: no non-ceased PSC and no PSC statements link."""
    active = [psc for psc in data.dossier.pscs if not psc.ceased_on]
    has_statements_link = bool(
        data.raw_input.pscs.links.persons_with_significant_control_statements
    )
    if active or has_statements_link:
        return None

    ceased = len(data.dossier.pscs)
    ceased_info = f" ({ceased} ceased)" if ceased else ""
    return RiskFlag(
        id=FlagId.F5,
        title="PSC missing",
        severity=FlagSeverity.HIGH,
        explanation=(
            f"The company has no active Persons with Significant Control (PSCs)"
            f"{ceased_info} and no valid statement explaining why. This is a legal "
            "requirement."
        ),
        evidence_url=data.raw_input.evidence.pscs.public_url,
    )


def check_f6_frequent_officer_changes(
    data: RiskFlagsInput, config: RiskEngineConfig = _DEFAULT_CONFIG
) -> RiskFlag | None:
    """F6: appointments + resignations inside the lookback window >= threshold."""
    window = config.officer_changes
    window_end = parse_date(data.reference_date)
    if window_end is None:
        return None
    window_start = subtract_months(window_end, window.lookback_months)

    appointments = sum(
        1 for o in data.dossier.officers
        if _within(o.appointed_on, window_start, window_end)
    )
    resignations = sum(
        1 for o in data.dossier.officers
        if _within(o.resigned_on, window_start, window_end)
    )
    total = appointments + resignations
    if total < window.threshold:
        return None

    return RiskFlag(
        id=FlagId.F6,
        title="Frequent officer changes",
        severity=FlagSeverity.MEDIUM,
        explanation=(
            f"{total} officer changes in the last {window.lookback_months} months "
            f"({appointments} appointments, {resignations} resignations). "
            "This may indicate instability."
        ),
        evidence_url=data.raw_input.evidence.officers.public_url,
    )


def check_f7_modern_slavery_missing(
    data: RiskFlagsInput, config: RiskEngineConfig = _DEFAULT_CONFIG
) -> RiskFlag | None:
    """F7: active company without a modern slavery statement.

    Only active companies are checked, so F7 never fires alongside F1. The
    statutory duty applies to large companies (turnover > £36M); turnover is
    not available, so every active company without a statement is flagged.
    """
    company = data.dossier.company
    if company.status != "active" or data.dossier.modern_slavery is not None:
        return None

    return RiskFlag(
        id=FlagId.F7,
        title="Modern slavery statement missing",
        severity=FlagSeverity.MEDIUM,
        explanation=(
            f"No modern slavery statement found for {company.name or company.company_number}. "
            "Large companies (turnover > £36M) are legally required to publish one "
            "annually."
        ),
        evidence_url=data.raw_input.evidence.profile.public_url,
    )


RULES: dict[FlagId, RiskFlagRule] = {
    FlagId.F1: check_f1_status_not_active,
    FlagId.F2: check_f2_accounts_overdue,
    FlagId.F3: check_f3_confirmation_statement_overdue,
    FlagId.F4: check_f4_insolvency_indicator,
    FlagId.F5: check_f5_psc_missing,
    FlagId.F6: check_f6_frequent_officer_changes,
    FlagId.F7: check_f7_modern_slavery_missing,
}

_missing = set(FlagId) - set(RULES)
if _missing:
    raise RuntimeError(f"Risk rule table incomplete: {sorted(m.value for m in _missing)}")


# --- Date helpers ---


def parse_date(value: str | None) -> datetime | None:
    """Parse 'YYYY-MM-DD' or an ISO-8601 timestamp as an aware UTC datetime.

    Date-only values are midnight UTC. Unparseable values yield None.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def subtract_months(moment: datetime, months: int) -> datetime:
    """Calendar-month subtraction, clamping the day to the target month's length."""
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _within(value: str | None, start: datetime, end: datetime) -> bool:
    moment = parse_date(value)
    return moment is not None and start <= moment <= end
