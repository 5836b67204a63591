"""
Internship Configuration Schema.

Defines the placement rules each university imposes.  Defaults are the
current published rules; override at instantiation:

    config = InternshipConfig(min_weeks=8)
"""

from dataclasses import dataclass
from typing import Self

from mgmt_kernel.logging_config import get_logger

logger = get_logger("modules.internship.config")


@dataclass
class InternshipConfig:
    """Configuration schema for the internship module."""

    # Minimum length for ULK and remote placements, in whole weeks.
    min_weeks: int = 6

    # UR placements must last between these many whole calendar months.
    ur_min_months: int = 2
    ur_max_months: int = 6

    # Supervisor qualifications accepted for ULK placements.
    senior_qualifications: tuple[str, ...] = ("Masters", "PhD")

    def __post_init__(self):
        if self.min_weeks < 0:
            raise ValueError("min_weeks cannot be negative")

        if self.ur_min_months < 0:
            raise ValueError("ur_min_months cannot be negative")

        if self.ur_max_months < self.ur_min_months:
            raise ValueError("ur_max_months cannot be less than ur_min_months")

        if not self.senior_qualifications:
            raise ValueError("senior_qualifications cannot be empty")

        logger.debug(
            "internship_config_initialized",
            extra={
                "min_weeks": self.min_weeks,
                "ur_min_months": self.ur_min_months,
                "ur_max_months": self.ur_max_months,
                "senior_qualifications": list(self.senior_qualifications),
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
            "internship_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        data = dict(data)
        if "senior_qualifications" in data:
            data["senior_qualifications"] = tuple(data["senior_qualifications"])
        return cls(**data)
