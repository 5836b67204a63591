"""
Tax Enforcement Service -- declarations, payment, audits and reports.

Responsibility:
    Owns the session's taxpayer, officer and declaration registries, issues
    declaration IDs and applies the compliance-score consequences of
    filing, payment and audit outcomes.

Failure modes:
    - ``register_declaration`` raises ``InvalidArgumentError`` for invalid
      fields and ``DuplicateDeclarationError`` when the taxpayer already
      filed that variant for the month.  Either way nothing is appended to
      any registry and the taxpayer's score is unchanged.
    - ``register_taxpayer`` / ``register_officer`` raise
      ``DuplicateEntityError`` for a taken TIN or officer ID.

Usage:
    service = TaxEnforcementService(clock=DeterministicClock(date(2025, 6, 15)))
    payer = service.register_taxpayer("123456789", "Kigali Enterprises Ltd", "COMPANY")
    dec = service.register_declaration(
        payer, DeclarationType.PAYE, date(2025, 6, 1),
        gross_salary=Decimal("150000"), num_dependents=2,
    )
    dec.tax_amount  # Decimal("23000.00")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from mgmt_kernel.clock import Clock, SystemClock
from mgmt_kernel.exceptions import InvalidArgumentError
from mgmt_kernel.logging_config import get_logger
from mgmt_kernel.registry import Registry, UniqueKey
from mgmt_kernel.sample_data import load_package_yaml, require_section
from mgmt_kernel.validation import require_choice
from mgmt_modules.tax_enforcement.config import TaxEnforcementConfig
from mgmt_modules.tax_enforcement.helpers import purchases_exceed_sales
from mgmt_modules.tax_enforcement.models import (
    DECLARATION_CLASSES,
    DeclarationType,
    TaxDeclaration,
)
from mgmt_modules.tax_enforcement.parties import TaxOfficer, Taxpayer, TaxpayerType

logger = get_logger("modules.tax_enforcement.service")

DECLARATION_ID_KEY = "Declaration ID"
TIN_KEY = "TIN"
OFFICER_ID_KEY = "Officer ID"


@dataclass(frozen=True)
class UnpaidLine:
    declaration: TaxDeclaration
    penalty: Decimal

    @property
    def total_due(self) -> Decimal:
        return self.declaration.tax_amount + self.penalty


@dataclass(frozen=True)
class UnpaidSummary:
    """Unpaid declarations with today's penalties and the grand totals."""
    lines: tuple[UnpaidLine, ...]

    @property
    def total_tax(self) -> Decimal:
        return sum((line.declaration.tax_amount for line in self.lines), Decimal("0"))

    @property
    def total_penalties(self) -> Decimal:
        return sum((line.penalty for line in self.lines), Decimal("0"))

    @property
    def grand_total(self) -> Decimal:
        return self.total_tax + self.total_penalties


@dataclass(frozen=True)
class AuditOutcome:
    passed: bool
    score_decreased: bool
    compliance_score: int | None


class TaxEnforcementService:
    """
    Session-scoped tax enforcement operations.

    Contract:
        Declarations, taxpayers and officers created here share the
        service's ``Clock`` and ``TaxEnforcementConfig``.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        config: TaxEnforcementConfig | None = None,
    ):
        self._clock = clock or SystemClock()
        self._config = config or TaxEnforcementConfig.with_defaults()
        self._declarations: Registry[TaxDeclaration] = Registry(
            "declaration",
            (UniqueKey(DECLARATION_ID_KEY, lambda d: d.declaration_id),),
        )
        self._taxpayers: Registry[Taxpayer] = Registry(
            "taxpayer", (UniqueKey(TIN_KEY, lambda t: t.tin),)
        )
        self._officers: Registry[TaxOfficer] = Registry(
            "officer", (UniqueKey(OFFICER_ID_KEY, lambda o: o.officer_id),)
        )
        self._next_sequence = 1

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def config(self) -> TaxEnforcementConfig:
        return self._config

    # =========================================================================
    # Taxpayers and officers
    # =========================================================================

    def register_taxpayer(
        self, tin: str, name: str, taxpayer_type: TaxpayerType | str
    ) -> Taxpayer:
        taxpayer = Taxpayer(tin, name, taxpayer_type, config=self._config)
        self._taxpayers.add(taxpayer)
        logger.info(
            "taxpayer_registered",
            extra={"tin": taxpayer.tin, "taxpayer_type": taxpayer.taxpayer_type},
        )
        return taxpayer

    def find_taxpayer(self, tin: str) -> Taxpayer | None:
        return self._taxpayers.find_by(TIN_KEY, tin)

    def taxpayers(self) -> list[Taxpayer]:
        return self._taxpayers.all()

    def get_taxpayer(self, position: int) -> Taxpayer:
        return self._taxpayers.get(position, "taxpayer")

    def register_officer(
        self, officer_id: str, full_name: str, assigned_region: str
    ) -> TaxOfficer:
        officer = TaxOfficer(officer_id, full_name, assigned_region, clock=self._clock)
        self._officers.add(officer)
        logger.info(
            "officer_registered",
            extra={"officer_id": officer.officer_id, "region": officer.assigned_region},
        )
        return officer

    def officers(self) -> list[TaxOfficer]:
        return self._officers.all()

    def get_officer(self, position: int) -> TaxOfficer:
        return self._officers.get(position, "officer")

    # =========================================================================
    # Declarations
    # =========================================================================

    def next_declaration_id(self) -> str:
        """Peek at the ID the next registered declaration will receive."""
        candidate = self._next_sequence
        while self._declarations.is_taken(DECLARATION_ID_KEY, f"DEC-{candidate:04d}"):
            candidate += 1
        return f"DEC-{candidate:04d}"

    def purchases_warning(self, taxable_sales: Decimal, taxable_purchases: Decimal) -> bool:
        """True when VAT purchases exceed sales by more than the warning ratio."""
        return purchases_exceed_sales(
            taxable_sales, taxable_purchases, self._config.purchase_warning_ratio
        )

    def register_declaration(
        self,
        taxpayer: Taxpayer,
        kind: DeclarationType | str,
        declaration_date: date,
        *,
        declaration_id: str | None = None,
        is_paid: bool = False,
        **fields: Any,
    ) -> TaxDeclaration:
        """
        Build, assess and file a declaration for ``taxpayer``.

        Preconditions:
            ``fields`` are the variant fields (``gross_salary`` and
            ``num_dependents`` for PAYE, and so on).
        Postconditions:
            On success the declaration is in the registry and in the
            taxpayer's list with ``tax_amount`` assessed.
        """
        declaration_type = require_choice(
            kind, DeclarationType, f"Unknown declaration type: {kind}", "declaration_type"
        )
        cls = DECLARATION_CLASSES[declaration_type]
        declaration_id = declaration_id or self.next_declaration_id()
        try:
            declaration = cls(
                declaration_id,
                taxpayer.name,
                taxpayer.tin,
                declaration_date,
                Decimal("0"),
                is_paid,
                clock=self._clock,
                config=self._config,
                **fields,
            )
        except TypeError as exc:
            raise InvalidArgumentError(
                f"Invalid fields for {declaration_type.value}: {exc}"
            ) from exc
        declaration.assess()

        self._declarations.check_unique(declaration)
        taxpayer.add_declaration(declaration)
        self._declarations.add(declaration)
        self._next_sequence += 1

        logger.info(
            "declaration_registered",
            extra={
                "declaration_id": declaration.declaration_id,
                "declaration_type": declaration_type,
                "tin": taxpayer.tin,
                "tax_amount": declaration.tax_amount,
            },
        )
        return declaration

    def declarations(self) -> list[TaxDeclaration]:
        return self._declarations.all()

    def get_declaration(self, position: int) -> TaxDeclaration:
        return self._declarations.get(position, "declaration")

    def taxpayer_for(self, declaration: TaxDeclaration) -> Taxpayer | None:
        return self.find_taxpayer(declaration.taxpayer_tin)

    def mark_paid(self, declaration: TaxDeclaration) -> bool:
        """
        Mark ``declaration`` paid and reward its taxpayer.

        Returns False (and changes nothing) if it was already paid.
        """
        if declaration.is_paid:
            return False
        declaration.is_paid = True
        taxpayer = self.taxpayer_for(declaration)
        if taxpayer is not None:
            taxpayer.increase_compliance_score(self._config.payment_reward_points)
        logger.info(
            "declaration_paid",
            extra={
                "declaration_id": declaration.declaration_id,
                "tin": declaration.taxpayer_tin,
                "compliance_score": taxpayer.compliance_score if taxpayer else None,
            },
        )
        return True

    def unpaid_summary(self) -> UnpaidSummary:
        return UnpaidSummary(
            tuple(
                UnpaidLine(d, d.enforce_compliance())
                for d in self._declarations
                if not d.is_paid
            )
        )

    # =========================================================================
    # Audits and reports
    # =========================================================================

    def conduct_audit(self, officer: TaxOfficer, declaration: TaxDeclaration) -> AuditOutcome:
        passed = officer.audit_declaration(declaration)
        taxpayer = self.taxpayer_for(declaration)
        score_decreased = False
        if not passed and taxpayer is not None:
            taxpayer.decrease_compliance_score(self._config.audit_failure_penalty_points)
            score_decreased = True
        return AuditOutcome(
            passed=passed,
            score_decreased=score_decreased,
            compliance_score=taxpayer.compliance_score if taxpayer else None,
        )

    def compliance_report(self, taxpayer: Taxpayer) -> str:
        return taxpayer.generate_compliance_report()

    def receipt(self, declaration: TaxDeclaration) -> str:
        return declaration.generate_receipt()

    # =========================================================================
    # Seeding
    # =========================================================================

    def seed_sample_data(self) -> None:
        """Register the bundled sample taxpayers and officers."""
        data = load_package_yaml("mgmt_modules.tax_enforcement", "sample_data.yaml")
        for row in require_section(data, "taxpayers"):
            self.register_taxpayer(row["tin"], row["name"], row["taxpayer_type"])
        for row in require_section(data, "officers"):
            self.register_officer(row["officer_id"], row["full_name"], row["assigned_region"])
        logger.info(
            "tax_enforcement_sample_data_seeded",
            extra={"taxpayers": len(self._taxpayers), "officers": len(self._officers)},
        )
