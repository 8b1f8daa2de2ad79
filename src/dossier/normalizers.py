# src/dossier/normalizers.py — v1
"""Map raw upstream records onto the canonical domain models.

Every normalizer is pure and total: absent optional upstream fields become
empty strings or None, never an exception.
"""

from __future__ import annotations

from suppliercheck.core.models import (
    PSC,
    Address,
    Company,
    ModernSlaveryStatement,
    Officer,
)
from suppliercheck.dossier.sort import sort_natures_of_control, sort_sic_codes
from suppliercheck.dossier.upstream import (
    CompanyProfileResponse,
    OfficerItem,
    OfficersResponse,
    PSCItem,
    PSCsResponse,
    RawAddress,
)
from suppliercheck.registry.models import ModernSlaveryRegistryResult


def normalize_address(addr: RawAddress | None) -> Address:
    """Line 1 prefers address_line_1 and falls back to premises."""
    if addr is None:
        return Address()
    return Address(
        line1=addr.address_line_1 or addr.premises or "",
        line2=addr.address_line_2 or None,
        town=addr.locality or "",
        postcode=addr.postal_code or "",
        country=addr.country or "",
    )


def normalize_company(profile: CompanyProfileResponse) -> Company:
    return Company(
        company_number=profile.company_number,
        name=profile.company_name,
        status=profile.company_status,
        type=profile.type,
        incorporation_date=profile.date_of_creation or "",
        registered_office=normalize_address(profile.registered_office_address),
        sic_codes=sort_sic_codes(profile.sic_codes or []),
    )


def humanize_role(role: str) -> str:
    """'corporate-secretary' -> 'Corporate Secretary'."""
    return " ".join(word[:1].upper() + word[1:] for word in role.split("-"))


def normalize_officer(item: OfficerItem) -> Officer:
    dob = item.date_of_birth
    return Officer(
        name=item.name,
        role=humanize_role(item.officer_role),
        appointed_on=item.appointed_on or "",
        resigned_on=item.resigned_on or None,
        nationality=item.nationality or "",
        birth_month=dob.month if dob else None,
        birth_year=dob.year if dob else None,
    )


def normalize_officers(response: OfficersResponse) -> list[Officer]:
    return [normalize_officer(item) for item in response.items]


def normalize_psc(item: PSCItem) -> PSC:
    return PSC(
        name=item.name or "",
        nature_of_control=sort_natures_of_control(item.natures_of_control or []),
        notified_on=item.notified_on or "",
        ceased_on=item.ceased_on or None,
        nationality=item.nationality or "",
    )


def normalize_pscs(response: PSCsResponse) -> list[PSC]:
    return [normalize_psc(item) for item in response.items]


def normalize_modern_slavery(
    result: ModernSlaveryRegistryResult,
) -> ModernSlaveryStatement | None:
    """Statement for a registry hit, None otherwise.

    The registry lists that a statement exists and links its summary page.
    Signer and signing date are not part of it and are left empty.
    """
    if not result.found:
        return None
    return ModernSlaveryStatement(
        url=result.statement_summary_url or "",
        signed_by="",
        date_signed="",
        compliant=True,
    )
