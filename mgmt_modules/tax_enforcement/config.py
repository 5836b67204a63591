"""
Tax Enforcement Configuration Schema.

Defines the structure and defaults for tax enforcement settings.  The
defaults are the revenue authority's published figures; override at
instantiation when modelling a different regime:

    config = TaxEnforcementConfig(vat_rate=Decimal("0.16"))
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Self

from mgmt_kernel.logging_config import get_logger

logger = get_logger("modules.tax_enforcement.config")


@dataclass
class TaxEnforcementConfig:
    """Configuration schema for the tax enforcement module."""

    currency: str = "RWF"

    # Rates
    vat_rate: Decimal = Decimal("0.18")
    dependent_deduction: Decimal = Decimal("10000")

    # Filing calendar
    due_day_of_month: int = 15
    withholding_due_days: int = 15

    # Compliance scoring
    initial_compliance_score: int = 100
    unpaid_declaration_penalty_points: int = 5
    payment_reward_points: int = 5
    audit_failure_penalty_points: int = 10

    # Audit heuristics
    high_purchase_ratio: Decimal = Decimal("0.9")
    purchase_warning_ratio: Decimal = Decimal("1.2")

    def __post_init__(self):
        if not self.currency or not self.currency.strip():
            raise ValueError("currency cannot be empty")

        if not (Decimal("0") <= self.vat_rate <= Decimal("1")):
            raise ValueError("vat_rate must be between 0 and 1")

        if self.dependent_deduction < 0:
            raise ValueError("dependent_deduction cannot be negative")

        if not (1 <= self.due_day_of_month <= 28):
            raise ValueError("due_day_of_month must be between 1 and 28")

        if self.withholding_due_days < 0:
            raise ValueError("withholding_due_days cannot be negative")

        if not (0 <= self.initial_compliance_score <= 100):
            raise ValueError("initial_compliance_score must be between 0 and 100")

        for name in (
            "unpaid_declaration_penalty_points",
            "payment_reward_points",
            "audit_failure_penalty_points",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")

        if self.high_purchase_ratio < 0 or self.purchase_warning_ratio < 0:
            raise ValueError("purchase ratios cannot be negative")

        logger.debug(
            "tax_enforcement_config_initialized",
            extra={
                "currency": self.currency,
                "vat_rate": self.vat_rate,
                "dependent_deduction": self.dependent_deduction,
                "due_day_of_month": self.due_day_of_month,
                "initial_compliance_score": self.initial_compliance_score,
            },
        )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the standard defaults."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from a dictionary of overrides."""
        logger.info(
            "tax_enforcement_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        data = dict(data)
        for key in (
            "vat_rate",
            "dependent_deduction",
            "high_purchase_ratio",
            "purchase_warning_ratio",
        ):
            if key in data:
                data[key] = Decimal(str(data[key]))
        return cls(**data)
