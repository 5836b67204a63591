"""
Tax Declaration Domain Models.

Responsibility:
    The declaration hierarchy: an abstract ``TaxDeclaration`` holding the
    shared filing fields and three concrete variants (PAYE, VAT,
    withholding), each with its own tax formula, due date, late-penalty
    schedule and receipt.

Invariants:
    - Every setter validates before assigning; a rejected value leaves the
      previous value in place.
    - ``tax_amount`` starts at the value given to the constructor (normally
      zero) and is set by ``assess()`` once the variant fields exist.
    - Penalties are computed against the assessed ``tax_amount`` and the
      injected clock; a paid or not-yet-due declaration has no penalty.

Failure modes:
    - ``InvalidArgumentError`` from any setter.
    - ``EntityValidationError`` if a variant's ``validate_declaration``
      rejects the constructed declaration.

Filing rules:

    PAYE         due 15th of next month; 2% + 0.1%/day late, cap 20%
    VAT          due 15th of next month; 10% + 1.5%/month late, no cap
    Withholding  due 15 days after the declaration; 50% + 10%/month, cap 100%
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from mgmt_kernel.clock import Clock, SystemClock
from mgmt_kernel.exceptions import EntityValidationError
from mgmt_kernel.formatting import fmt_date_dmy, fmt_money, fmt_percent, yes_no
from mgmt_kernel.logging_config import get_logger
from mgmt_kernel.periods import days_between, months_between
from mgmt_kernel.validation import (
    require_bool,
    require_choice,
    require_date,
    require_digits,
    require_non_negative,
    require_non_negative_int,
    require_not_future,
    require_positive,
    require_text,
)
from mgmt_modules.tax_enforcement.config import TaxEnforcementConfig
from mgmt_modules.tax_enforcement.helpers import (
    calculate_net_vat,
    calculate_paye,
    calculate_withholding,
    days_after_due_date,
    late_penalty_percent,
    monthly_due_date,
    penalty_amount,
    purchase_to_sales_ratio,
)

logger = get_logger("modules.tax_enforcement.models")

TIN_LENGTH = 9


class DeclarationType(Enum):
    """Declaration variants accepted by the revenue authority."""
    PAYE = "PAYE"
    VAT = "VAT"
    WITHHOLDING = "Withholding"


class WithholdingCategory(Enum):
    """Withholding tax categories; each carries a fixed rate."""
    RENT = "RENT"
    DIVIDENDS = "DIVIDENDS"
    INTEREST = "INTEREST"
    PROFESSIONAL_SERVICES = "PROFESSIONAL_SERVICES"
    IMPORTS = "IMPORTS"
    PUBLIC_TENDER = "PUBLIC_TENDER"

    @property
    def rate_percent(self) -> Decimal:
        return WITHHOLDING_RATES[self]

    @property
    def label(self) -> str:
        """``PROFESSIONAL_SERVICES`` -> ``Professional Services``."""
        return self.value.replace("_", " ").title()


WITHHOLDING_RATES: dict[WithholdingCategory, Decimal] = {
    WithholdingCategory.RENT: Decimal("15.0"),
    WithholdingCategory.DIVIDENDS: Decimal("15.0"),
    WithholdingCategory.INTEREST: Decimal("15.0"),
    WithholdingCategory.PROFESSIONAL_SERVICES: Decimal("15.0"),
    WithholdingCategory.IMPORTS: Decimal("5.0"),
    WithholdingCategory.PUBLIC_TENDER: Decimal("3.0"),
}


class TaxDeclaration(ABC):
    """
    Abstract base for all tax declarations.

    Contract:
        Subclasses implement ``calculate_tax``, ``validate_declaration``,
        ``due_date``, ``penalty_percent`` and ``receipt_details``, and call
        ``_check_valid()`` once their own fields are set.
    """

    declaration_kind: ClassVar[DeclarationType]
    receipt_title: ClassVar[str]
    penalty_label: ClassVar[str] = "Late Payment Penalty"

    def __init__(
        self,
        declaration_id: str,
        taxpayer_name: str,
        taxpayer_tin: str,
        declaration_date: date,
        tax_amount: Decimal = Decimal("0"),
        is_paid: bool = False,
        *,
        clock: Clock | None = None,
        config: TaxEnforcementConfig | None = None,
    ):
        self._clock = clock or SystemClock()
        self._config = config or TaxEnforcementConfig.with_defaults()
        self.declaration_id = declaration_id
        self.taxpayer_name = taxpayer_name
        self.taxpayer_tin = taxpayer_tin
        self.declaration_date = declaration_date
        self.tax_amount = tax_amount
        self.is_paid = is_paid

    # -- shared fields -------------------------------------------------------

    @property
    def declaration_id(self) -> str:
        return self._declaration_id

    @declaration_id.setter
    def declaration_id(self, value: str) -> None:
        self._declaration_id = require_text(
            value, "Declaration ID cannot be empty", "declaration_id"
        )

    @property
    def taxpayer_name(self) -> str:
        return self._taxpayer_name

    @taxpayer_name.setter
    def taxpayer_name(self, value: str) -> None:
        self._taxpayer_name = require_text(
            value, "Taxpayer name cannot be empty", "taxpayer_name"
        )

    @property
    def taxpayer_tin(self) -> str:
        return self._taxpayer_tin

    @taxpayer_tin.setter
    def taxpayer_tin(self, value: str) -> None:
        self._taxpayer_tin = require_digits(value, TIN_LENGTH, "TIN", "taxpayer_tin")

    @property
    def declaration_date(self) -> date:
        return self._declaration_date

    @declaration_date.setter
    def declaration_date(self, value: date) -> None:
        filed = require_date(value, "Declaration date cannot be empty", "declaration_date")
        self._declaration_date = require_not_future(
            filed,
            self._clock.today(),
            "Declaration date cannot be in the future",
            "declaration_date",
        )

    @property
    def tax_amount(self) -> Decimal:
        return self._tax_amount

    @tax_amount.setter
    def tax_amount(self, value: Decimal) -> None:
        self._tax_amount = require_non_negative(
            value, "Tax amount cannot be negative", "tax_amount"
        )

    @property
    def is_paid(self) -> bool:
        return self._is_paid

    @is_paid.setter
    def is_paid(self, value: bool) -> None:
        self._is_paid = require_bool(value, "Paid flag must be true or false", "is_paid")

    @property
    def kind_name(self) -> str:
        """Class name shown in listings, e.g. ``PAYEDeclaration``."""
        return type(self).__name__

    # -- polymorphic behaviour ----------------------------------------------

    @abstractmethod
    def calculate_tax(self) -> Decimal:
        """Tax owed from the variant fields, rounded to cents."""

    @abstractmethod
    def validate_declaration(self) -> bool:
        """Audit predicate over the variant fields."""

    @abstractmethod
    def due_date(self) -> date:
        """Last day on which payment is on time."""

    @abstractmethod
    def penalty_percent(self, today: date) -> Decimal:
        """Penalty as a percentage of the tax amount, for an overdue declaration."""

    @abstractmethod
    def receipt_details(self) -> list[str]:
        """Variant lines printed between the summary and the status."""

    @abstractmethod
    def type_label(self) -> str:
        """The ``Type:`` line value."""

    def receipt_warnings(self) -> list[str]:
        return []

    def _check_valid(self) -> None:
        if not self.validate_declaration():
            raise EntityValidationError(
                self.kind_name, [f"{self.declaration_kind.value} declaration is invalid"]
            )

    def assess(self) -> Decimal:
        """Set ``tax_amount`` from ``calculate_tax()`` and return it."""
        self.tax_amount = self.calculate_tax()
        logger.debug(
            "declaration_assessed",
            extra={
                "declaration_id": self.declaration_id,
                "declaration_type": self.declaration_kind,
                "tax_amount": self.tax_amount,
            },
        )
        return self.tax_amount

    def is_overdue(self) -> bool:
        return not self.is_paid and self._clock.today() > self.due_date()

    def enforce_compliance(self) -> Decimal:
        """Late penalty owed today; zero when paid or not yet due."""
        if not self.is_overdue():
            return Decimal("0.00")
        return penalty_amount(self.tax_amount, self.penalty_percent(self._clock.today()))

    def total_amount_due(self) -> Decimal:
        if self.is_paid:
            return Decimal("0.00")
        return self.tax_amount + self.enforce_compliance()

    def money(self, value: Decimal) -> str:
        return fmt_money(value, self._config.currency)

    def generate_receipt(self) -> str:
        lines = [f"======= {self.receipt_title} =======", str(self)]
        lines.extend(self.receipt_details())
        lines.append(f"Compliance Status: {'Paid' if self.is_paid else 'Unpaid'}")
        if not self.is_paid:
            penalty = self.enforce_compliance()
            if penalty > 0:
                lines.append(f"{self.penalty_label}: {self.money(penalty)}")
                lines.append(f"Total Amount Due: {self.money(self.tax_amount + penalty)}")
        lines.extend(self.receipt_warnings())
        lines.append("=" * len(lines[0]))
        return "\n".join(lines)

    def __str__(self) -> str:
        return "\n".join([
            f"Declaration ID: {self.declaration_id}",
            f"Taxpayer: {self.taxpayer_name}",
            f"TIN: {self.taxpayer_tin}",
            f"Date: {fmt_date_dmy(self.declaration_date)}",
            f"Amount: {self.money(self.tax_amount)}",
            f"Paid: {yes_no(self.is_paid)}",
            f"Type: {self.type_label()}",
        ])

    def __repr__(self) -> str:
        return (
            f"{self.kind_name}(declaration_id={self.declaration_id!r}, "
            f"taxpayer_tin={self.taxpayer_tin!r})"
        )


class PAYEDeclaration(TaxDeclaration):
    declaration_kind = DeclarationType.PAYE
    receipt_title = "PAYE TAX RECEIPT"

    def __init__(self, declaration_id, taxpayer_name, taxpayer_tin, declaration_date,
                 tax_amount=Decimal("0"), is_paid=False, *, gross_salary: Decimal,
                 num_dependents: int, **kwargs: Any):
        super().__init__(declaration_id, taxpayer_name, taxpayer_tin,
                         declaration_date, tax_amount, is_paid, **kwargs)
        self.gross_salary = gross_salary
        self.num_dependents = num_dependents
        self._check_valid()

    @property
    def gross_salary(self) -> Decimal:
        return self._gross_salary

    @gross_salary.setter
    def gross_salary(self, value: Decimal) -> None:
        self._gross_salary = require_positive(
            value, "Gross salary must be greater than 0", "gross_salary"
        )

    @property
    def num_dependents(self) -> int:
        return self._num_dependents

    @num_dependents.setter
    def num_dependents(self, value: int) -> None:
        self._num_dependents = require_non_negative_int(
            value, "Number of dependents cannot be negative", "num_dependents"
        )

    def dependent_deductions(self) -> Decimal:
        return self._config.dependent_deduction * self.num_dependents

    def calculate_tax(self) -> Decimal:
        return calculate_paye(
            self.gross_salary, self.num_dependents, self._config.dependent_deduction
        )

    def validate_declaration(self) -> bool:
        return self.gross_salary > 0

    def due_date(self) -> date:
        return monthly_due_date(self.declaration_date, self._config.due_day_of_month)

    def penalty_percent(self, today: date) -> Decimal:
        return late_penalty_percent(
            Decimal("2"), Decimal("0.1"), days_between(self.due_date(), today), Decimal("20")
        )

    def type_label(self) -> str:
        return "PAYE"

    def receipt_details(self) -> list[str]:
        return [
            f"Gross Salary: {self.money(self.gross_salary)}",
            f"Number of Dependents: {self.num_dependents}",
            f"Dependent Deductions: {self.money(self.dependent_deductions())}",
            f"Tax Due: {self.money(self.tax_amount)}",
        ]


class VATDeclaration(TaxDeclaration):
    declaration_kind = DeclarationType.VAT
    receipt_title = "VAT RECEIPT"
    penalty_label = "Late Declaration Penalty"

    def __init__(self, declaration_id, taxpayer_name, taxpayer_tin, declaration_date,
                 tax_amount=Decimal("0"), is_paid=False, *, taxable_sales: Decimal,
                 taxable_purchases: Decimal, **kwargs: Any):
        super().__init__(declaration_id, taxpayer_name, taxpayer_tin,
                         declaration_date, tax_amount, is_paid, **kwargs)
        self.taxable_sales = taxable_sales
        self.taxable_purchases = taxable_purchases
        self._check_valid()

    @property
    def taxable_sales(self) -> Decimal:
        return self._taxable_sales

    @taxable_sales.setter
    def taxable_sales(self, value: Decimal) -> None:
        self._taxable_sales = require_non_negative(
            value, "Taxable sales cannot be negative", "taxable_sales"
        )

    @property
    def taxable_purchases(self) -> Decimal:
        return self._taxable_purchases

    @taxable_purchases.setter
    def taxable_purchases(self, value: Decimal) -> None:
        self._taxable_purchases = require_non_negative(
            value, "Taxable purchases cannot be negative", "taxable_purchases"
        )

    def output_vat(self) -> Decimal:
        return self.taxable_sales * self._config.vat_rate

    def input_vat(self) -> Decimal:
        return self.taxable_purchases * self._config.vat_rate

    def has_high_purchase_ratio(self) -> bool:
        ratio = purchase_to_sales_ratio(self.taxable_sales, self.taxable_purchases)
        return ratio is not None and ratio > self._config.high_purchase_ratio

    def calculate_tax(self) -> Decimal:
        return calculate_net_vat(
            self.taxable_sales, self.taxable_purchases, self._config.vat_rate
        )

    def validate_declaration(self) -> bool:
        return self.taxable_sales >= 0 and self.taxable_purchases >= 0

    def due_date(self) -> date:
        return monthly_due_date(self.declaration_date, self._config.due_day_of_month)

    def penalty_percent(self, today: date) -> Decimal:
        return late_penalty_percent(
            Decimal("10"), Decimal("1.5"), months_between(self.due_date(), today)
        )

    def type_label(self) -> str:
        return "VAT"

    def receipt_details(self) -> list[str]:
        rate = f"{self._config.vat_rate * 100:.0f}%"
        return [
            f"Taxable Sales: {self.money(self.taxable_sales)}",
            f"Output VAT ({rate}): {self.money(self.output_vat())}",
            f"Taxable Purchases: {self.money(self.taxable_purchases)}",
            f"Input VAT ({rate}): {self.money(self.input_vat())}",
            f"Net VAT Due: {self.money(self.tax_amount)}",
        ]

    def receipt_warnings(self) -> list[str]:
        if self.validate_declaration() and self.has_high_purchase_ratio():
            return ["WARNING: High purchase-to-sales ratio detected. May be flagged for audit."]
        return []


class WithholdingTaxDeclaration(TaxDeclaration):
    declaration_kind = DeclarationType.WITHHOLDING
    receipt_title = "WITHHOLDING TAX RECEIPT"
    penalty_label = "Non-Declaration Penalty"

    def __init__(self, declaration_id, taxpayer_name, taxpayer_tin, declaration_date,
                 tax_amount=Decimal("0"), is_paid=False, *,
                 category: WithholdingCategory | str, base_amount: Decimal, **kwargs: Any):
        super().__init__(declaration_id, taxpayer_name, taxpayer_tin,
                         declaration_date, tax_amount, is_paid, **kwargs)
        self.category = category
        self.base_amount = base_amount
        self._check_valid()

    @property
    def category(self) -> WithholdingCategory:
        return self._category

    @category.setter
    def category(self, value: WithholdingCategory | str) -> None:
        self._category = require_choice(
            value,
            WithholdingCategory,
            "Withholding tax category cannot be empty",
            "category",
        )

    @property
    def base_amount(self) -> Decimal:
        return self._base_amount

    @base_amount.setter
    def base_amount(self, value: Decimal) -> None:
        self._base_amount = require_positive(
            value, "Base amount must be greater than 0", "base_amount"
        )

    def calculate_tax(self) -> Decimal:
        return calculate_withholding(self.base_amount, self.category.rate_percent)

    def validate_declaration(self) -> bool:
        return self.base_amount > 0 and self.category is not None

    def due_date(self) -> date:
        return days_after_due_date(self.declaration_date, self._config.withholding_due_days)

    def penalty_percent(self, today: date) -> Decimal:
        return late_penalty_percent(
            Decimal("50"), Decimal("10"), months_between(self.due_date(), today), Decimal("100")
        )

    def type_label(self) -> str:
        return f"Withholding Tax - {self.category.value}"

    def receipt_details(self) -> list[str]:
        return [
            f"Category: {self.category.value}",
            f"Tax Rate: {fmt_percent(self.category.rate_percent)}",
            f"Base Amount: {self.money(self.base_amount)}",
            f"Tax Due: {self.money(self.tax_amount)}",
        ]


DECLARATION_CLASSES: dict[DeclarationType, type[TaxDeclaration]] = {
    DeclarationType.PAYE: PAYEDeclaration,
    DeclarationType.VAT: VATDeclaration,
    DeclarationType.WITHHOLDING: WithholdingTaxDeclaration,
}
