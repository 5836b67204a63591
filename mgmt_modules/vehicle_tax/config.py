"""
Vehicle Tax Configuration Schema.

Defines the structure and defaults for vehicle tax settings.  Defaults are
the programme's fixed values; override at instantiation for experiments:

    config = VehicleTaxConfig(min_year_of_fabrication=1950)
"""

from dataclasses import dataclass
from typing import Self

from mgmt_kernel.logging_config import get_logger

logger = get_logger("modules.vehicle_tax.config")


@dataclass
class VehicleTaxConfig:
    """Configuration schema for the vehicle tax module."""

    min_year_of_fabrication: int = 1900
    currency_symbol: str = "$"

    def __post_init__(self):
        if self.min_year_of_fabrication < 1:
            raise ValueError("min_year_of_fabrication must be positive")
        if not self.currency_symbol or not self.currency_symbol.strip():
            raise ValueError("currency_symbol cannot be empty")

        logger.debug(
            "vehicle_tax_config_initialized",
            extra={
                "min_year_of_fabrication": self.min_year_of_fabrication,
                "currency_symbol": self.currency_symbol,
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
            "vehicle_tax_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
