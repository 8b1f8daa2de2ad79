# src/dossier/upstream.py — v1
"""Raw upstream records as returned by the Companies House API.

These mirror the wire schema loosely: every field has a default and unknown
fields are kept, so a partial or newer payload still validates and the
normalizers can degrade to empty values instead of failing.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from suppliercheck.core.models import Evidence
from suppliercheck.registry.models import ModernSlaveryRegistryResult


class UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="allow")


# === SHARED ===


class RawAddress(UpstreamModel):
    address_line_1: str | None = None
    address_line_2: str | None = None
    care_of: str | None = None
    country: str | None = None
    locality: str | None = None
    po_box: str | None = None
    postal_code: str | None = None
    premises: str | None = None
    region: str | None = None


class DateOfBirth(UpstreamModel):
    day: int | None = None
    month: int | None = None
    year: int | None = None


# === COMPANY PROFILE ===


class NextAccounts(UpstreamModel):
    due_on: str | None = None
    overdue: bool | None = None
    period_end_on: str | None = None
    period_start_on: str | None = None


class LastAccounts(UpstreamModel):
    made_up_to: str | None = None
    period_end_on: str | None = None
    period_start_on: str | None = None
    type: str | None = None


class Accounts(UpstreamModel):
    last_accounts: LastAccounts | None = None
    next_accounts: NextAccounts | None = None
    next_due: str | None = None
    next_made_up_to: str | None = None
    overdue: bool | None = None


class ConfirmationStatement(UpstreamModel):
    last_made_up_to: str | None = None
    next_due: str | None = None
    next_made_up_to: str | None = None
    overdue: bool | None = None


class ProfileLinks(UpstreamModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    self_link: str = Field("", alias="self")


class CompanyProfileResponse(UpstreamModel):
    accounts: Accounts | None = None
    can_file: bool = False
    company_name: str = ""
    company_number: str = ""
    company_status: str = ""
    company_status_detail: str | None = None
    confirmation_statement: ConfirmationStatement | None = None
    date_of_cessation: str | None = None
    date_of_creation: str | None = None
    has_been_liquidated: bool | None = None
    has_charges: bool | None = None
    has_insolvency_history: bool | None = None
    jurisdiction: str | None = None
    links: ProfileLinks = Field(default_factory=ProfileLinks)
    registered_office_address: RawAddress | None = None
    sic_codes: list[str] | None = None
    type: str = ""


# === OFFICERS ===


class OfficerItem(UpstreamModel):
    address: RawAddress | None = None
    appointed_on: str | None = None
    country_of_residence: str | None = None
    date_of_birth: DateOfBirth | None = None
    name: str = ""
    nationality: str | None = None
    occupation: str | None = None
    officer_role: str = ""
    resigned_on: str | None = None


class OfficersResponse(UpstreamModel):
    active_count: int | None = None
    inactive_count: int | None = None
    resigned_count: int | None = None
    items: list[OfficerItem] = Field(default_factory=list)
    items_per_page: int = 0
    kind: str = ""
    start_index: int = 0
    total_results: int = 0


# === PSCS ===


class PSCItem(UpstreamModel):
    address: RawAddress | None = None
    ceased_on: str | None = None
    country_of_residence: str | None = None
    date_of_birth: DateOfBirth | None = None
    kind: str = ""
    name: str | None = None
    nationality: str | None = None
    natures_of_control: list[str] | None = None
    notified_on: str | None = None


class PSCLinks(UpstreamModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    self_link: str = Field("", alias="self")
    persons_with_significant_control_statements: str | None = None


class PSCsResponse(UpstreamModel):
    active_count: int | None = None
    ceased_count: int | None = None
    items: list[PSCItem] = Field(default_factory=list)
    items_per_page: int = 0
    kind: str = ""
    links: PSCLinks = Field(default_factory=PSCLinks)
    start_index: int = 0
    total_results: int = 0


# === SEARCH ===


class CompanySearchItem(UpstreamModel):
    address: RawAddress | None = None
    address_snippet: str | None = None
    company_number: str = ""
    company_status: str = ""
    company_type: str = ""
    date_of_cessation: str | None = None
    date_of_creation: str | None = None
    description: str | None = None
    kind: str = ""
    title: str = ""


class CompanySearchResponse(UpstreamModel):
    items: list[CompanySearchItem] = Field(default_factory=list)
    items_per_page: int = 0
    kind: str = ""
    page_number: int | None = None
    start_index: int = 0
    total_results: int = 0


# === BUILDER INPUT ===


class DossierEvidence(BaseModel):
    """Evidence of the three upstream calls feeding a dossier."""

    profile: Evidence
    officers: Evidence
    pscs: Evidence


class DossierInput(BaseModel):
    """Raw input for one dossier build."""

    profile: CompanyProfileResponse
    officers: OfficersResponse = Field(default_factory=OfficersResponse)
    pscs: PSCsResponse = Field(default_factory=PSCsResponse)
    modern_slavery: ModernSlaveryRegistryResult = Field(
        default_factory=ModernSlaveryRegistryResult
    )
    evidence: DossierEvidence
