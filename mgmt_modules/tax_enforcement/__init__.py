"""
Tax Enforcement Module.

Responsibility:
    PAYE, VAT and withholding declarations filed by registered taxpayers,
    late-payment penalties, taxpayer compliance scoring and officer audits.

Invariants:
    - TINs are exactly nine digits.
    - One declaration per variant, per taxpayer, per calendar month.
    - Compliance scores stay within [0, 100].
    - All monetary amounts use ``Decimal``.
"""

from mgmt_modules.tax_enforcement.config import TaxEnforcementConfig
from mgmt_modules.tax_enforcement.models import (
    DeclarationType,
    PAYEDeclaration,
    TaxDeclaration,
    VATDeclaration,
    WithholdingCategory,
    WithholdingTaxDeclaration,
)
from mgmt_modules.tax_enforcement.parties import (
    AuditRecord,
    TaxOfficer,
    Taxpayer,
    TaxpayerType,
)
from mgmt_modules.tax_enforcement.service import (
    AuditOutcome,
    TaxEnforcementService,
    UnpaidLine,
    UnpaidSummary,
)

__all__ = [
    "TaxDeclaration",
    "DeclarationType",
    "PAYEDeclaration",
    "VATDeclaration",
    "WithholdingCategory",
    "WithholdingTaxDeclaration",
    "Taxpayer",
    "TaxpayerType",
    "TaxOfficer",
    "AuditRecord",
    "TaxEnforcementConfig",
    "TaxEnforcementService",
    "UnpaidLine",
    "UnpaidSummary",
    "AuditOutcome",
]
