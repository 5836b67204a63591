"""
Tax Enforcement Helpers -- Pure calculation functions.

Responsibility:
    Bracket, net-VAT, withholding and late-penalty arithmetic shared by the
    declaration variants.  The variants decide which inputs to pass; these
    functions only compute.

Architecture:
    Every function is pure: no I/O, no clock, no side effects.

Invariants:
    - All monetary inputs and outputs are ``Decimal``.
    - Returned amounts are rounded to cents (ROUND_HALF_UP).
    - Penalty percentages are never negative.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from mgmt_kernel.formatting import quantize_money
from mgmt_kernel.periods import add_months

ZERO = Decimal("0")

# PAYE monthly brackets: 0% up to 30,000; 20% up to 100,000; 30% above.
PAYE_ZERO_BAND = Decimal("30000")
PAYE_MIDDLE_BAND = Decimal("100000")
PAYE_MIDDLE_RATE = Decimal("0.2")
PAYE_TOP_RATE = Decimal("0.3")


def paye_taxable_income(
    gross_salary: Decimal,
    num_dependents: int,
    dependent_deduction: Decimal,
) -> Decimal:
    return gross_salary - dependent_deduction * num_dependents


def calculate_paye(
    gross_salary: Decimal,
    num_dependents: int,
    dependent_deduction: Decimal = Decimal("10000"),
) -> Decimal:
    """
    Progressive PAYE on monthly salary after dependent deductions.

    Postconditions:
        - Returns 0 when taxable income is at or below the zero band,
          including negative taxable income.

    Example:
        gross 150,000 with 2 dependents -> taxable 130,000
        -> 70,000 x 20% + 30,000 x 30% = 23,000.00
    """
    taxable = paye_taxable_income(gross_salary, num_dependents, dependent_deduction)
    if taxable <= PAYE_ZERO_BAND:
        return quantize_money(ZERO)
    if taxable <= PAYE_MIDDLE_BAND:
        return quantize_money((taxable - PAYE_ZERO_BAND) * PAYE_MIDDLE_RATE)
    middle = (PAYE_MIDDLE_BAND - PAYE_ZERO_BAND) * PAYE_MIDDLE_RATE
    return quantize_money(middle + (taxable - PAYE_MIDDLE_BAND) * PAYE_TOP_RATE)


def calculate_net_vat(
    taxable_sales: Decimal,
    taxable_purchases: Decimal,
    vat_rate: Decimal,
) -> Decimal:
    """Output VAT minus input VAT, floored at zero (no refunds)."""
    output_vat = taxable_sales * vat_rate
    input_vat = taxable_purchases * vat_rate
    return quantize_money(max(ZERO, output_vat - input_vat))


def calculate_withholding(base_amount: Decimal, rate_percent: Decimal) -> Decimal:
    return quantize_money(base_amount * rate_percent / 100)


def purchase_to_sales_ratio(taxable_sales: Decimal, taxable_purchases: Decimal) -> Decimal | None:
    """``None`` when there are no sales to compare against."""
    if taxable_sales <= 0:
        return None
    return taxable_purchases / taxable_sales


def purchases_exceed_sales(
    taxable_sales: Decimal,
    taxable_purchases: Decimal,
    warning_ratio: Decimal = Decimal("1.2"),
) -> bool:
    """True when purchases exceed sales by more than ``warning_ratio``."""
    return taxable_purchases > taxable_sales * warning_ratio


def monthly_due_date(declaration_date: date, due_day: int = 15) -> date:
    """``due_day`` of the month following the declaration."""
    return add_months(declaration_date, 1).replace(day=due_day)


def days_after_due_date(declaration_date: date, due_days: int) -> date:
    return declaration_date + timedelta(days=due_days)


def late_penalty_percent(
    base_percent: Decimal,
    step_percent: Decimal,
    units_late: int,
    cap_percent: Decimal | None = None,
) -> Decimal:
    """
    ``base + step x units``, optionally capped.

    Units are whole days or whole months depending on the declaration type.
    """
    percent = base_percent + step_percent * max(units_late, 0)
    if cap_percent is not None:
        percent = min(percent, cap_percent)
    return percent


def penalty_amount(tax_amount: Decimal, percent: Decimal) -> Decimal:
    return quantize_money(tax_amount * percent / 100)
