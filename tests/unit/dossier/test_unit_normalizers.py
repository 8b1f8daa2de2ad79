# tests/unit/dossier/test_unit_normalizers.py — v1
"""Tests for dossier/normalizers.py and dossier/sort.py."""

from __future__ import annotations

from suppliercheck.core.models import PSC, Address, Officer
from suppliercheck.dossier.normalizers import (
    humanize_role,
    normalize_address,
    normalize_company,
    normalize_modern_slavery,
    normalize_officer,
    normalize_psc,
)
from suppliercheck.dossier.sort import (
    sort_natures_of_control,
    sort_officers,
    sort_pscs,
    sort_sic_codes,
)
from suppliercheck.dossier.upstream import (
    CompanyProfileResponse,
    OfficerItem,
    PSCItem,
    RawAddress,
)
from suppliercheck.registry.models import ModernSlaveryRegistryResult


class TestNormalizeAddress:
    def test_full_address(self):
        addr = normalize_address(RawAddress(
            address_line_1="1 High St", address_line_2="Floor 2",
            locality="Leeds", postal_code="LS1 1AA", country="England",
        ))
        assert addr == Address(
            line1="1 High St", line2="Floor 2", town="Leeds",
            postcode="LS1 1AA", country="England",
        )

    def test_premises_fallback(self):
        assert normalize_address(RawAddress(premises="Unit 4")).line1 == "Unit 4"

    def test_missing_address_is_empty(self):
        addr = normalize_address(None)
        assert addr.line1 == ""
        assert addr.line2 is None
        assert addr.postcode == ""

    def test_empty_line2_becomes_none(self):
        assert normalize_address(RawAddress(address_line_2="")).line2 is None


class TestNormalizeCompany:
    def test_maps_and_sorts_sic_codes(self):
        profile = CompanyProfileResponse(
            company_number="12345678", company_name="ACME LTD", company_status="active",
            type="ltd", date_of_creation="2020-01-15", sic_codes=["62090", "62020"],
        )
        company = normalize_company(profile)
        assert company.company_number == "12345678"
        assert company.name == "ACME LTD"
        assert company.incorporation_date == "2020-01-15"
        assert company.sic_codes == ["62020", "62090"]

    def test_missing_optionals(self):
        company = normalize_company(CompanyProfileResponse(company_number="1"))
        assert company.incorporation_date == ""
        assert company.sic_codes == []
        assert company.registered_office == Address()


class TestNormalizeOfficer:
    def test_role_and_birth_fields(self):
        officer = normalize_officer(OfficerItem.model_validate({
            "name": "SMITH, John", "officer_role": "corporate-secretary",
            "appointed_on": "2020-01-15",
            "date_of_birth": {"day": 3, "month": 6, "year": 1985},
        }))
        assert officer.role == "Corporate Secretary"
        assert officer.birth_month == 6
        assert officer.birth_year == 1985
        assert "day" not in officer.model_dump()

    def test_missing_fields(self):
        officer = normalize_officer(OfficerItem(name="X", officer_role="director"))
        assert officer.appointed_on == ""
        assert officer.resigned_on is None
        assert officer.nationality == ""
        assert officer.birth_month is None

    def test_humanize_role(self):
        assert humanize_role("director") == "Director"
        assert humanize_role("llp-designated-member") == "Llp Designated Member"
        assert humanize_role("") == ""


class TestNormalizePsc:
    def test_natures_sorted(self):
        psc = normalize_psc(PSCItem(
            name="Mr A", natures_of_control=["voting-rights", "ownership-of-shares"],
            notified_on="2020-01-01",
        ))
        assert psc.nature_of_control == ["ownership-of-shares", "voting-rights"]
        assert psc.ceased_on is None

    def test_missing_name(self):
        assert normalize_psc(PSCItem()).name == ""


class TestNormalizeModernSlavery:
    def test_not_found_is_none(self):
        assert normalize_modern_slavery(ModernSlaveryRegistryResult()) is None

    def test_found(self):
        statement = normalize_modern_slavery(ModernSlaveryRegistryResult(
            found=True, latest_year=2024, statement_summary_url="https://msr/s/1",
        ))
        assert statement.url == "https://msr/s/1"
        assert statement.compliant is True
        assert statement.signed_by == ""
        assert statement.date_signed == ""


class TestSorting:
    def test_officers_date_then_name_then_role(self):
        officers = [
            Officer(name="JONES", role="Director", appointed_on="2020-02-01"),
            Officer(name="SMITH", role="Director", appointed_on="2020-01-15"),
            Officer(name="BROWN", role="Secretary", appointed_on="2020-01-15"),
            Officer(name="BROWN", role="Director", appointed_on="2020-01-15"),
        ]
        ordered = sort_officers(officers)
        assert [(o.name, o.role) for o in ordered] == [
            ("BROWN", "Director"), ("BROWN", "Secretary"),
            ("SMITH", "Director"), ("JONES", "Director"),
        ]

    def test_officers_missing_date_last(self):
        ordered = sort_officers([
            Officer(name="A", appointed_on=""),
            Officer(name="B", appointed_on="2021-01-01"),
        ])
        assert [o.name for o in ordered] == ["B", "A"]

    def test_sort_does_not_mutate(self):
        officers = [Officer(name="B"), Officer(name="A")]
        sort_officers(officers)
        assert [o.name for o in officers] == ["B", "A"]

    def test_pscs_date_name_first_nature(self):
        pscs = [
            PSC(name="Z", notified_on="2019-01-01", nature_of_control=["b"]),
            PSC(name="A", notified_on="2020-01-01", nature_of_control=["b"]),
            PSC(name="A", notified_on="2020-01-01", nature_of_control=["a"]),
        ]
        ordered = sort_pscs(pscs)
        assert [(p.name, p.nature_of_control[0]) for p in ordered] == [
            ("Z", "b"), ("A", "a"), ("A", "b"),
        ]

    def test_code_point_order(self):
        assert sort_natures_of_control(["b", "B", "a"]) == ["B", "a", "b"]
        assert sort_sic_codes(["62090", "10110", "62020"]) == ["10110", "62020", "62090"]
