"""
Taxpayers and tax officers.

Responsibility:
    ``Taxpayer`` aggregates its declarations and keeps a compliance score;
    ``TaxOfficer`` audits declarations and summarizes the outcomes.

Invariants:
    - ``compliance_score`` is always within [0, 100]; adjustments clamp.
    - A taxpayer never holds two declarations of the same variant for the
      same calendar month.
    - A rejected declaration leaves the taxpayer's list and score unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from mgmt_kernel.clock import Clock, SystemClock
from mgmt_kernel.exceptions import DuplicateDeclarationError, InvalidArgumentError
from mgmt_kernel.formatting import fmt_money
from mgmt_kernel.logging_config import get_logger
from mgmt_kernel.periods import period_code, same_month
from mgmt_kernel.validation import (
    require_choice,
    require_digits,
    require_non_negative_int,
    require_text,
    to_int,
)
from mgmt_modules.tax_enforcement.config import TaxEnforcementConfig
from mgmt_modules.tax_enforcement.models import TIN_LENGTH, TaxDeclaration

logger = get_logger("modules.tax_enforcement.parties")

MIN_SCORE = 0
MAX_SCORE = 100


class TaxpayerType(Enum):
    INDIVIDUAL = "INDIVIDUAL"
    COMPANY = "COMPANY"


class Taxpayer:
    """A registered taxpayer, identified by a 9-digit TIN."""

    def __init__(
        self,
        tin: str,
        name: str,
        taxpayer_type: TaxpayerType | str,
        *,
        config: TaxEnforcementConfig | None = None,
    ):
        self._config = config or TaxEnforcementConfig.with_defaults()
        self.tin = tin
        self.name = name
        self.taxpayer_type = taxpayer_type
        self._compliance_score = self._config.initial_compliance_score
        self._declarations: list[TaxDeclaration] = []

    @property
    def tin(self) -> str:
        return self._tin

    @tin.setter
    def tin(self, value: str) -> None:
        self._tin = require_digits(value, TIN_LENGTH, "TIN", "tin")

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = require_text(value, "Name cannot be empty", "name")

    @property
    def taxpayer_type(self) -> TaxpayerType:
        return self._taxpayer_type

    @taxpayer_type.setter
    def taxpayer_type(self, value: TaxpayerType | str) -> None:
        self._taxpayer_type = require_choice(
            value, TaxpayerType, "Taxpayer type cannot be empty", "taxpayer_type"
        )

    @property
    def compliance_score(self) -> int:
        return self._compliance_score

    @compliance_score.setter
    def compliance_score(self, value: int) -> None:
        self._compliance_score = max(MIN_SCORE, min(MAX_SCORE, to_int(value, "compliance_score")))

    def increase_compliance_score(self, points: int) -> int:
        points = require_non_negative_int(points, "Points cannot be negative", "points")
        self.compliance_score = self._compliance_score + points
        return self._compliance_score

    def decrease_compliance_score(self, points: int) -> int:
        points = require_non_negative_int(points, "Points cannot be negative", "points")
        self.compliance_score = self._compliance_score - points
        return self._compliance_score

    # -- declarations --------------------------------------------------------

    def has_declaration_for_period(self, kind: type[TaxDeclaration], period: date) -> bool:
        return any(
            type(existing) is kind and same_month(existing.declaration_date, period)
            for existing in self._declarations
        )

    def add_declaration(self, declaration: TaxDeclaration) -> None:
        """
        Attach ``declaration`` to this taxpayer.

        Raises:
            InvalidArgumentError: the declaration was filed under another TIN.
            DuplicateDeclarationError: same variant already filed this month.
        """
        if declaration.taxpayer_tin != self.tin:
            raise InvalidArgumentError(
                "Declaration TIN does not match the taxpayer", field="taxpayer_tin"
            )
        if self.has_declaration_for_period(type(declaration), declaration.declaration_date):
            logger.warning(
                "declaration_duplicate_rejected",
                extra={
                    "tin": self.tin,
                    "declaration_type": declaration.declaration_kind,
                    "period": period_code(declaration.declaration_date),
                },
            )
            raise DuplicateDeclarationError(
                self.tin,
                declaration.declaration_kind.value,
                period_code(declaration.declaration_date),
            )

        self._declarations.append(declaration)
        if not declaration.is_paid:
            self.decrease_compliance_score(self._config.unpaid_declaration_penalty_points)
        logger.info(
            "declaration_attached",
            extra={
                "tin": self.tin,
                "declaration_id": declaration.declaration_id,
                "is_paid": declaration.is_paid,
                "compliance_score": self._compliance_score,
            },
        )

    def declarations(self) -> list[TaxDeclaration]:
        return list(self._declarations)

    def generate_compliance_report(self) -> str:
        """
        Declarations with paid/unpaid status and today's penalties.

        Total tax covers every declaration; penalties accrue on unpaid ones only.
        """
        currency = self._config.currency
        lines = [
            "=== COMPLIANCE REPORT ===",
            f"Taxpayer: {self.name}",
            f"TIN: {self.tin}",
            f"Type: {self.taxpayer_type.value}",
            f"Compliance Score: {self.compliance_score}",
            "",
            "Declarations:",
        ]
        total_tax = Decimal("0")
        total_penalties = Decimal("0")
        if not self._declarations:
            lines.append("No declarations found.")
        for declaration in self._declarations:
            entry = (
                f"- {declaration.declaration_id} ({declaration.kind_name}): "
                f"{fmt_money(declaration.tax_amount, currency)}"
            )
            total_tax += declaration.tax_amount
            if declaration.is_paid:
                lines.append(f"{entry} [PAID]")
                continue
            penalty = declaration.enforce_compliance()
            lines.append(f"{entry} [UNPAID] - Penalty: {fmt_money(penalty, currency)}")
            total_penalties += penalty
        lines.extend([
            "",
            f"Total Tax Due: {fmt_money(total_tax, currency)}",
            f"Total Penalties: {fmt_money(total_penalties, currency)}",
            f"Total Amount Due: {fmt_money(total_tax + total_penalties, currency)}",
            "=" * 27,
        ])
        return "\n".join(lines)

    def __str__(self) -> str:
        return f"Taxpayer: {self.name} (TIN: {self.tin}, Type: {self.taxpayer_type.value})"

    def __repr__(self) -> str:
        return f"Taxpayer(tin={self.tin!r}, name={self.name!r})"


@dataclass(frozen=True)
class AuditRecord:
    """One audit: which declaration, when, and the outcome at that time."""
    declaration: TaxDeclaration
    passed: bool
    audited_on: date


class TaxOfficer:
    """A revenue officer who audits declarations in an assigned region."""

    def __init__(
        self,
        officer_id: str,
        full_name: str,
        assigned_region: str,
        *,
        clock: Clock | None = None,
    ):
        self._clock = clock or SystemClock()
        self.officer_id = officer_id
        self.full_name = full_name
        self.assigned_region = assigned_region
        self._audits: list[AuditRecord] = []

    @property
    def officer_id(self) -> str:
        return self._officer_id

    @officer_id.setter
    def officer_id(self, value: str) -> None:
        self._officer_id = require_text(value, "Officer ID cannot be empty", "officer_id")

    @property
    def full_name(self) -> str:
        return self._full_name

    @full_name.setter
    def full_name(self, value: str) -> None:
        self._full_name = require_text(value, "Full name cannot be empty", "full_name")

    @property
    def assigned_region(self) -> str:
        return self._assigned_region

    @assigned_region.setter
    def assigned_region(self, value: str) -> None:
        self._assigned_region = require_text(
            value, "Assigned region cannot be empty", "assigned_region"
        )

    def audit_declaration(self, declaration: TaxDeclaration) -> bool:
        passed = declaration.validate_declaration()
        self._audits.append(AuditRecord(declaration, passed, self._clock.today()))
        log = logger.info if passed else logger.warning
        log(
            "declaration_audited",
            extra={
                "officer_id": self.officer_id,
                "declaration_id": declaration.declaration_id,
                "passed": passed,
                "penalty": declaration.enforce_compliance(),
            },
        )
        return passed

    def audits_conducted(self) -> list[TaxDeclaration]:
        return [record.declaration for record in self._audits]

    def compliance_rate(self) -> Decimal | None:
        """Percentage of audits passed; ``None`` before the first audit."""
        if not self._audits:
            return None
        passed = sum(1 for record in self._audits if record.passed)
        return Decimal(passed) * 100 / len(self._audits)

    def generate_audit_summary(self) -> str:
        lines = [
            "=== AUDIT SUMMARY ===",
            f"Officer: {self.full_name} ({self.officer_id})",
            f"Region: {self.assigned_region}",
            f"Audits Conducted: {len(self._audits)}",
            "",
        ]
        for record in self._audits:
            lines.append(
                f"- Declaration {record.declaration.declaration_id} "
                f"({record.declaration.taxpayer_name}): "
                f"{'PASSED' if record.passed else 'FAILED'}"
            )
        rate = self.compliance_rate()
        if rate is not None:
            lines.extend(["", f"Overall Compliance Rate: {rate:.1f}%"])
        lines.append("=" * 22)
        return "\n".join(lines)

    def __str__(self) -> str:
        return (
            f"Tax Officer: {self.full_name} (ID: {self.officer_id}, "
            f"Region: {self.assigned_region})"
        )
