"""
Tests for taxpayers, officers and the tax enforcement service.

Validates:
- Compliance score bookkeeping on filing, payment and audit
- Duplicate-period rejection leaves the taxpayer unchanged
- Compliance report and audit summary layout
- Sequential declaration IDs and the unpaid summary
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from mgmt_kernel.exceptions import (
    DuplicateDeclarationError,
    DuplicateEntityError,
    InvalidArgumentError,
)
from mgmt_modules.tax_enforcement.models import DeclarationType, WithholdingCategory
from mgmt_modules.tax_enforcement.parties import TaxOfficer, Taxpayer, TaxpayerType


def _paye(service, taxpayer, filed=date(2025, 5, 10), **kwargs):
    return service.register_declaration(
        taxpayer, DeclarationType.PAYE, filed,
        gross_salary=Decimal("150000"), num_dependents=2, **kwargs,
    )


# =============================================================================
# Taxpayer
# =============================================================================


class TestTaxpayer:

    def test_score_clamps(self):
        taxpayer = Taxpayer("123456789", "Kigali Enterprises Ltd", TaxpayerType.COMPANY)
        assert taxpayer.compliance_score == 100
        assert taxpayer.increase_compliance_score(5) == 100
        assert taxpayer.decrease_compliance_score(150) == 0

    def test_negative_points_rejected(self):
        taxpayer = Taxpayer("123456789", "Name", "INDIVIDUAL")
        with pytest.raises(InvalidArgumentError, match="Points cannot be negative"):
            taxpayer.increase_compliance_score(-1)

    def test_unknown_type_rejected(self):
        with pytest.raises(InvalidArgumentError, match="Taxpayer type"):
            Taxpayer("123456789", "Name", "PARTNERSHIP")

    def test_str(self):
        taxpayer = Taxpayer("987654321", "Jean-Paul Munyakazi", "INDIVIDUAL")
        assert str(taxpayer) == (
            "Taxpayer: Jean-Paul Munyakazi (TIN: 987654321, Type: INDIVIDUAL)"
        )

    def test_empty_report(self):
        taxpayer = Taxpayer("123456789", "Name", "COMPANY")
        report = taxpayer.generate_compliance_report()
        assert "No declarations found." in report
        assert "Total Amount Due: RWF 0.00" in report


# =============================================================================
# Declarations through the service
# =============================================================================


class TestDeclarationFiling:

    def test_unpaid_filing_costs_five_points(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        declaration = _paye(tax_service, taxpayer)
        assert declaration.declaration_id == "DEC-0001"
        assert declaration.tax_amount == Decimal("23000.00")
        assert taxpayer.compliance_score == 95
        assert taxpayer.declarations() == [declaration]

    def test_paid_filing_keeps_score(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        _paye(tax_service, taxpayer, is_paid=True)
        assert taxpayer.compliance_score == 100

    def test_ids_are_sequential(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        _paye(tax_service, taxpayer)
        vat = tax_service.register_declaration(
            taxpayer, "VAT", date(2025, 5, 10),
            taxable_sales=Decimal("1000000"), taxable_purchases=Decimal("400000"),
        )
        assert vat.declaration_id == "DEC-0002"
        assert tax_service.next_declaration_id() == "DEC-0003"

    def test_duplicate_period_rejected(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        _paye(tax_service, taxpayer, filed=date(2025, 5, 10))
        with pytest.raises(DuplicateDeclarationError, match="Duplicate declaration for the same period"):
            _paye(tax_service, taxpayer, filed=date(2025, 5, 28))
        assert len(taxpayer.declarations()) == 1
        assert len(tax_service.declarations()) == 1
        assert taxpayer.compliance_score == 95
        assert tax_service.next_declaration_id() == "DEC-0002"

    def test_other_variant_same_month_allowed(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        _paye(tax_service, taxpayer)
        tax_service.register_declaration(
            taxpayer, DeclarationType.WITHHOLDING, date(2025, 5, 20),
            category=WithholdingCategory.RENT, base_amount=Decimal("200000"),
        )
        assert len(taxpayer.declarations()) == 2

    def test_future_date_rejected(self, tax_service):
        taxpayer = tax_service.find_taxpayer("987654321")
        with pytest.raises(InvalidArgumentError, match="cannot be in the future"):
            _paye(tax_service, taxpayer, filed=date(2025, 7, 1))
        assert taxpayer.declarations() == []
        assert taxpayer.compliance_score == 100

    def test_missing_variant_field(self, tax_service):
        taxpayer = tax_service.find_taxpayer("987654321")
        with pytest.raises(InvalidArgumentError, match="Invalid fields for VAT"):
            tax_service.register_declaration(
                taxpayer, DeclarationType.VAT, date(2025, 5, 1),
                taxable_sales=Decimal("100"),
            )

    def test_unknown_kind(self, tax_service):
        taxpayer = tax_service.find_taxpayer("987654321")
        with pytest.raises(InvalidArgumentError, match="Unknown declaration type"):
            tax_service.register_declaration(taxpayer, "Excise", date(2025, 5, 1))

    def test_tin_mismatch_rejected(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        stranger = Taxpayer("111111111", "Other", "COMPANY")
        declaration = _paye(tax_service, stranger)
        with pytest.raises(InvalidArgumentError, match="does not match"):
            taxpayer.add_declaration(declaration)

    def test_purchases_warning(self, tax_service):
        assert tax_service.purchases_warning(Decimal("100000"), Decimal("130000"))
        assert not tax_service.purchases_warning(Decimal("100000"), Decimal("120000"))


# =============================================================================
# Payment, audits and reports
# =============================================================================


class TestPaymentAndAudit:

    def test_mark_paid_rewards_once(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        declaration = _paye(tax_service, taxpayer)
        assert tax_service.mark_paid(declaration) is True
        assert declaration.is_paid
        assert taxpayer.compliance_score == 100
        assert tax_service.mark_paid(declaration) is False
        assert taxpayer.compliance_score == 100

    def test_passed_audit_keeps_score(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        declaration = _paye(tax_service, taxpayer)
        officer = tax_service.officers()[0]
        outcome = tax_service.conduct_audit(officer, declaration)
        assert outcome.passed
        assert not outcome.score_decreased
        assert outcome.compliance_score == 95

    def test_failed_audit_costs_ten_points(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        declaration = _paye(tax_service, taxpayer)
        declaration.validate_declaration = lambda: False
        officer = tax_service.get_officer(1)
        outcome = tax_service.conduct_audit(officer, declaration)
        assert not outcome.passed
        assert outcome.score_decreased
        assert taxpayer.compliance_score == 85

    def test_audit_summary(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        good = _paye(tax_service, taxpayer)
        bad = tax_service.register_declaration(
            taxpayer, DeclarationType.VAT, date(2025, 5, 10),
            taxable_sales=Decimal("1000"), taxable_purchases=Decimal("100"),
        )
        bad.validate_declaration = lambda: False
        officer = tax_service.get_officer(1)
        tax_service.conduct_audit(officer, good)
        tax_service.conduct_audit(officer, bad)
        summary = officer.generate_audit_summary().splitlines()
        assert summary[0] == "=== AUDIT SUMMARY ==="
        assert "Officer: Claude Mugisha (RRA001)" in summary
        assert "Audits Conducted: 2" in summary
        assert "- Declaration DEC-0001 (Kigali Enterprises Ltd): PASSED" in summary
        assert "- Declaration DEC-0002 (Kigali Enterprises Ltd): FAILED" in summary
        assert summary[-2] == "Overall Compliance Rate: 50.0%"
        assert summary[-1] == "=" * 22
        assert officer.audits_conducted() == [good, bad]

    def test_summary_before_any_audit(self, clock):
        officer = TaxOfficer("RRA009", "Test Officer", "Northern Province", clock=clock)
        assert officer.compliance_rate() is None
        assert "Overall Compliance Rate" not in officer.generate_audit_summary()

    def test_compliance_report_totals(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        late = _paye(tax_service, taxpayer, filed=date(2025, 4, 10))
        paid = tax_service.register_declaration(
            taxpayer, DeclarationType.WITHHOLDING, date(2025, 6, 1),
            category=WithholdingCategory.RENT, base_amount=Decimal("200000"),
        )
        tax_service.mark_paid(paid)
        report = tax_service.compliance_report(taxpayer).splitlines()
        assert report[0] == "=== COMPLIANCE REPORT ==="
        assert "Compliance Score: 95" in report
        assert f"- {late.declaration_id} (PAYEDeclaration): RWF 23000.00 [UNPAID] - Penalty: RWF 1173.00" in report
        assert f"- {paid.declaration_id} (WithholdingTaxDeclaration): RWF 30000.00 [PAID]" in report
        assert "Total Tax Due: RWF 53000.00" in report
        assert "Total Penalties: RWF 1173.00" in report
        assert "Total Amount Due: RWF 54173.00" in report
        assert report[-1] == "=" * 27

    def test_compliance_report_counts_paid_tax(self, tax_service):
        taxpayer = tax_service.find_taxpayer("987654321")
        tax_service.mark_paid(_paye(tax_service, taxpayer))
        report = tax_service.compliance_report(taxpayer).splitlines()
        assert "Total Tax Due: RWF 23000.00" in report
        assert "Total Penalties: RWF 0.00" in report
        assert "Total Amount Due: RWF 23000.00" in report

    def test_unpaid_summary(self, tax_service):
        company = tax_service.find_taxpayer("123456789")
        person = tax_service.find_taxpayer("987654321")
        _paye(tax_service, company, filed=date(2025, 4, 10))
        paid = _paye(tax_service, person)
        tax_service.mark_paid(paid)
        summary = tax_service.unpaid_summary()
        assert len(summary.lines) == 1
        assert summary.total_tax == Decimal("23000.00")
        assert summary.total_penalties == Decimal("1173.00")
        assert summary.grand_total == Decimal("24173.00")


# =============================================================================
# Registries and seeding
# =============================================================================


class TestRegistries:

    def test_seeded_parties(self, tax_service):
        assert [t.tin for t in tax_service.taxpayers()] == ["123456789", "987654321"]
        assert tax_service.find_taxpayer("987654321").taxpayer_type is TaxpayerType.INDIVIDUAL
        assert [o.officer_id for o in tax_service.officers()] == ["RRA001", "RRA002"]

    def test_duplicate_tin(self, tax_service):
        with pytest.raises(DuplicateEntityError, match="TIN already exists"):
            tax_service.register_taxpayer("123456789", "Copy", "COMPANY")

    def test_duplicate_officer(self, tax_service):
        with pytest.raises(DuplicateEntityError, match="Officer ID already exists"):
            tax_service.register_officer("RRA001", "Copy", "Kigali")

    def test_receipt_via_service(self, tax_service):
        taxpayer = tax_service.find_taxpayer("123456789")
        declaration = _paye(tax_service, taxpayer)
        assert tax_service.receipt(declaration) == declaration.generate_receipt()
        assert tax_service.get_declaration(1) is declaration
        assert tax_service.taxpayer_for(declaration) is taxpayer
