"""Tax enforcement shell: declarations, receipts, unpaid summary and audits."""

from __future__ import annotations

from datetime import date
from typing import Any

from mgmt_cli.menu import TAX_MENU, print_section, run_menu_loop
from mgmt_cli.util import (
    print_blocks,
    print_numbered,
    prompt_bool,
    prompt_non_negative,
    prompt_non_negative_int,
    prompt_position,
    prompt_positive,
    prompt_text,
    prompt_until_valid,
    select_member,
    select_position,
)
from mgmt_kernel.exceptions import ManagementError
from mgmt_kernel.formatting import fmt_money
from mgmt_kernel.validation import parse_date, require_digits, require_not_future
from mgmt_modules.tax_enforcement.models import (
    TIN_LENGTH,
    DeclarationType,
    TaxDeclaration,
    WithholdingCategory,
)
from mgmt_modules.tax_enforcement.parties import Taxpayer, TaxpayerType
from mgmt_modules.tax_enforcement.service import TaxEnforcementService

DECLARATION_RULE = "-" * 38
UNPAID_RULE = "-" * 27

DECLARATION_TYPE_LABELS = (
    "PAYE (Pay As You Earn)",
    "VAT (Value Added Tax)",
    "Withholding Tax",
)


def _money(service: TaxEnforcementService, value) -> str:
    return fmt_money(value, service.config.currency)


def _declaration_date(service: TaxEnforcementService, raw: str) -> date:
    filed = parse_date(raw, "dd/MM/yyyy")
    return require_not_future(
        filed, service.clock.today(), "Declaration date cannot be in the future"
    )


# -----------------------------------------------------------------------------
# Taxpayer selection
# -----------------------------------------------------------------------------

def create_taxpayer(service: TaxEnforcementService) -> Taxpayer | None:
    tin = prompt_until_valid(
        f"Enter TIN ({TIN_LENGTH} digits): ", lambda raw: require_digits(raw, TIN_LENGTH, "TIN")
    )
    existing = service.find_taxpayer(tin)
    if existing is not None:
        print("A taxpayer with this TIN already exists.")
        return existing
    name = prompt_text("Enter taxpayer name: ", "Name cannot be empty")
    print("Select taxpayer type:")
    taxpayer_type = select_member(
        "Enter your choice: ", list(TaxpayerType), "taxpayer type", ("Individual", "Company")
    )
    try:
        taxpayer = service.register_taxpayer(tin, name, taxpayer_type)
    except ManagementError as exc:
        print(f"Taxpayer creation failed: {exc}")
        return None
    print("Taxpayer created successfully!")
    return taxpayer


def select_or_create_taxpayer(service: TaxEnforcementService) -> Taxpayer | None:
    print("\nDo you want to use an existing taxpayer or create a new one?")
    print("1. Use existing taxpayer")
    print("2. Create new taxpayer")
    choice = prompt_position("Enter your choice: ", 2, "choice")
    if choice == 2:
        return create_taxpayer(service)

    taxpayers = service.taxpayers()
    if not taxpayers:
        print("No taxpayers registered yet. Please create a new taxpayer.")
        return create_taxpayer(service)
    print_section("SELECT TAXPAYER")
    print_numbered(taxpayers)
    return service.get_taxpayer(select_position("Enter taxpayer number: ", len(taxpayers), "taxpayer"))


# -----------------------------------------------------------------------------
# Declarations
# -----------------------------------------------------------------------------

def _variant_fields(service: TaxEnforcementService, kind: DeclarationType) -> dict[str, Any] | None:
    """Prompt for the variant fields; ``None`` when the user cancels."""
    if kind is DeclarationType.PAYE:
        return {
            "gross_salary": prompt_positive(
                "Enter gross salary (RWF): ", "Gross salary must be greater than 0"),
            "num_dependents": prompt_non_negative_int(
                "Enter number of dependents: ", "Number of dependents cannot be negative"),
        }
    if kind is DeclarationType.VAT:
        sales = prompt_non_negative(
            "Enter taxable sales (RWF): ", "Taxable sales cannot be negative")
        purchases = prompt_non_negative(
            "Enter taxable purchases (RWF): ", "Taxable purchases cannot be negative")
        if service.purchases_warning(sales, purchases):
            print("Warning: Purchases exceed sales by more than 20%. This may trigger an audit.")
            if not prompt_bool("Do you want to continue? (true/false): "):
                return None
        return {"taxable_sales": sales, "taxable_purchases": purchases}

    print("Select withholding tax category:")
    categories = list(WithholdingCategory)
    category = select_member(
        "Enter choice: ",
        categories,
        "category",
        [f"{c.label} ({c.rate_percent:.0f}%)" for c in categories],
    )
    return {
        "category": category,
        "base_amount": prompt_positive(
            "Enter base amount (RWF): ", "Base amount must be greater than 0"),
    }


def register_declaration(service: TaxEnforcementService) -> None:
    print_section("TAX DECLARATION REGISTRATION")
    print("Select tax type:")
    kind = select_member(
        "Enter your choice: ", list(DeclarationType), "tax type", DECLARATION_TYPE_LABELS
    )
    taxpayer = select_or_create_taxpayer(service)
    if taxpayer is None:
        return

    declaration_date = prompt_until_valid(
        "Enter declaration date (dd/MM/yyyy): ", lambda raw: _declaration_date(service, raw)
    )
    fields = _variant_fields(service, kind)
    if fields is None:
        print("Declaration cancelled.")
        return

    try:
        declaration = service.register_declaration(taxpayer, kind, declaration_date, **fields)
    except ManagementError as exc:
        print(f"Declaration failed: {exc}")
        return
    print("Tax declaration registered successfully!")
    print(f"Declaration ID: {declaration.declaration_id}")
    print(f"Tax amount calculated: {_money(service, declaration.tax_amount)}")


def view_declarations(service: TaxEnforcementService) -> None:
    declarations = service.declarations()
    if not declarations:
        print("\nNo tax declarations registered yet.")
        return
    print_section("REGISTERED TAX DECLARATIONS")
    print_blocks(declarations, "Declaration", DECLARATION_RULE)


def view_compliance_report(service: TaxEnforcementService) -> None:
    taxpayers = service.taxpayers()
    if not taxpayers:
        print("\nNo taxpayers registered yet.")
        return
    print_section("SELECT TAXPAYER")
    print_numbered(taxpayers)
    position = select_position("Enter taxpayer number: ", len(taxpayers), "taxpayer")
    print()
    print(service.compliance_report(service.get_taxpayer(position)))


def _print_declaration_choices(service: TaxEnforcementService,
                               declarations: list[TaxDeclaration]) -> None:
    for i, d in enumerate(declarations, 1):
        status = "PAID" if d.is_paid else "UNPAID"
        print(f"{i}. {d.declaration_id} - {d.kind_name} ({_money(service, d.tax_amount)}) - {status}")


def print_receipt(service: TaxEnforcementService) -> None:
    declarations = service.declarations()
    if not declarations:
        print("\nNo tax declarations registered yet.")
        return
    print_section("SELECT DECLARATION FOR RECEIPT")
    _print_declaration_choices(service, declarations)
    declaration = service.get_declaration(
        select_position("Enter declaration number: ", len(declarations), "declaration")
    )
    if not declaration.is_paid:
        if prompt_bool("Declaration is unpaid. Mark as paid now? (true/false): "):
            service.mark_paid(declaration)
            print("Declaration marked as paid.")
    print()
    print(service.receipt(declaration))


def view_unpaid_summary(service: TaxEnforcementService) -> None:
    if not service.declarations():
        print("\nNo tax declarations registered yet.")
        return
    summary = service.unpaid_summary()
    if not summary.lines:
        print("\nNo unpaid tax declarations found.")
        return
    print_section("UNPAID TAXES SUMMARY")
    for line in summary.lines:
        d = line.declaration
        print(f"Declaration ID: {d.declaration_id} - {d.kind_name}")
        print(f"Taxpayer: {d.taxpayer_name} (TIN: {d.taxpayer_tin})")
        print(f"Due Date: {d.due_date().strftime('%d/%m/%Y')}")
        print(f"Tax Due: {_money(service, d.tax_amount)}")
        print(f"Penalty: {_money(service, line.penalty)}")
        print(f"Total Due: {_money(service, line.total_due)}")
        print(UNPAID_RULE)
    print(f"\nTotal Unpaid Taxes: {_money(service, summary.total_tax)}")
    print(f"Total Penalties: {_money(service, summary.total_penalties)}")
    print(f"Grand Total Due: {_money(service, summary.grand_total)}")


def conduct_audit(service: TaxEnforcementService) -> None:
    declarations = service.declarations()
    if not declarations:
        print("\nNo tax declarations to audit.")
        return
    officers = service.officers()
    if not officers:
        print("\nNo tax officers available to conduct audit.")
        return

    print_section("SELECT TAX OFFICER")
    print_numbered(officers)
    officer = service.get_officer(
        select_position("Enter officer number: ", len(officers), "officer")
    )
    print_section("SELECT DECLARATION TO AUDIT")
    _print_declaration_choices(service, declarations)
    declaration = service.get_declaration(
        select_position("Enter declaration number: ", len(declarations), "declaration")
    )

    outcome = service.conduct_audit(officer, declaration)
    print("\nAudit completed.")
    print(f"Result: {'PASSED' if outcome.passed else 'FAILED'}")
    if not outcome.passed:
        print("The declaration has failed the audit due to validation issues.")
        if outcome.score_decreased:
            print("Taxpayer compliance score has been decreased.")
    print()
    print(officer.generate_audit_summary())


def run_tax_shell(service: TaxEnforcementService) -> None:
    print("Welcome to RRA Tax Enforcement Management System")
    run_menu_loop(
        "RRA TAX ENFORCEMENT MANAGEMENT SYSTEM",
        TAX_MENU,
        {
            1: lambda: register_declaration(service),
            2: lambda: view_declarations(service),
            3: lambda: view_compliance_report(service),
            4: lambda: print_receipt(service),
            5: lambda: view_unpaid_summary(service),
            6: lambda: conduct_audit(service),
        },
        "Thank you for using RRA Tax Enforcement Management System.",
    )
