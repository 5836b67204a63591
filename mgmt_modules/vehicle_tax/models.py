"""
Vehicle Tax Domain Models.

Responsibility:
    The vehicle hierarchy: an abstract ``Vehicle`` holding the shared,
    validated registration fields and five concrete variants, each with its
    own annual-tax formula and report.

Invariants:
    - Every setter validates before assigning; a rejected value leaves the
      previous value in place.
    - Constructors go through the setters, so construction either yields a
      fully valid vehicle or raises ``InvalidArgumentError``.
    - Monetary values are ``Decimal``; computed tax is rounded to cents.

Failure modes:
    - ``InvalidArgumentError`` (or ``InvalidNumberFormatError``) from any
      setter.

Tax rules (multipliers apply to the base tax rate, in table order):

    Car         electric x0.80, age > 10 x0.90
    Truck       age > 15 x1.15, load > 10 t x1.25
    Motorcycle  engine > 500 cc x1.20, then x(1 - min(5% per 5 years, 25%))
    Bus         x(1 + 2% per 10 passengers), age > 20 x1.10
    SUV         4WD x1.10, age > 10 x0.95
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from mgmt_kernel.clock import Clock, SystemClock
from mgmt_kernel.exceptions import InvalidArgumentError
from mgmt_kernel.formatting import fmt_amount, fmt_money, quantize_money, yes_no
from mgmt_kernel.logging_config import get_logger
from mgmt_kernel.validation import (
    require_bool,
    require_non_negative,
    require_positive,
    require_positive_int,
    require_text,
    to_int,
)
from mgmt_modules.vehicle_tax.config import VehicleTaxConfig

logger = get_logger("modules.vehicle_tax.models")

REPORT_RULE = "=" * 22


class VehicleType(Enum):
    """Registrable vehicle variants."""
    CAR = "Car"
    TRUCK = "Truck"
    MOTORCYCLE = "Motorcycle"
    BUS = "Bus"
    SUV = "SUV"


class Vehicle(ABC):
    """
    Abstract base for all vehicles.

    Contract:
        Subclasses implement ``calculate_tax``, ``applied_rules`` and
        ``details`` (their extra summary lines).
    """

    vehicle_kind: ClassVar[VehicleType]

    def __init__(
        self,
        vehicle_id: str,
        owner_name: str,
        year_of_fabrication: int,
        registration_number: str,
        base_tax_rate: Decimal,
        vehicle_type: str,
        *,
        clock: Clock | None = None,
        config: VehicleTaxConfig | None = None,
    ):
        self._clock = clock or SystemClock()
        self._config = config or VehicleTaxConfig.with_defaults()
        self.vehicle_id = vehicle_id
        self.owner_name = owner_name
        self.year_of_fabrication = year_of_fabrication
        self.registration_number = registration_number
        self.base_tax_rate = base_tax_rate
        self.vehicle_type = vehicle_type

    # -- shared fields -------------------------------------------------------

    @property
    def vehicle_id(self) -> str:
        return self._vehicle_id

    @vehicle_id.setter
    def vehicle_id(self, value: str) -> None:
        self._vehicle_id = require_text(value, "Vehicle ID cannot be empty", "vehicle_id")

    @property
    def owner_name(self) -> str:
        return self._owner_name

    @owner_name.setter
    def owner_name(self, value: str) -> None:
        self._owner_name = require_text(value, "Owner name cannot be empty", "owner_name")

    @property
    def year_of_fabrication(self) -> int:
        return self._year_of_fabrication

    @year_of_fabrication.setter
    def year_of_fabrication(self, value: int) -> None:
        self._year_of_fabrication = validate_year_of_fabrication(
            value, self._clock.current_year(), self._config.min_year_of_fabrication
        )

    @property
    def registration_number(self) -> str:
        return self._registration_number

    @registration_number.setter
    def registration_number(self, value: str) -> None:
        self._registration_number = require_text(
            value, "Registration number cannot be empty", "registration_number"
        )

    @property
    def base_tax_rate(self) -> Decimal:
        return self._base_tax_rate

    @base_tax_rate.setter
    def base_tax_rate(self, value: Decimal) -> None:
        self._base_tax_rate = require_non_negative(
            value, "Base tax rate cannot be negative", "base_tax_rate"
        )

    @property
    def vehicle_type(self) -> str:
        return self._vehicle_type

    @vehicle_type.setter
    def vehicle_type(self, value: str) -> None:
        self._vehicle_type = require_text(value, "Vehicle type cannot be empty", "vehicle_type")

    @property
    def vehicle_age(self) -> int:
        return self._clock.current_year() - self._year_of_fabrication

    # -- polymorphic behaviour ----------------------------------------------

    @abstractmethod
    def calculate_tax(self) -> Decimal:
        """Annual tax in currency units, rounded to cents."""

    @abstractmethod
    def applied_rules(self) -> tuple[str, ...]:
        """Adjustment rules that triggered for this vehicle, in formula order."""

    @abstractmethod
    def details(self) -> tuple[str, ...]:
        """Variant-specific summary lines."""

    def summary_lines(self) -> list[str]:
        symbol = self._config.currency_symbol
        return [
            f"Vehicle ID: {self.vehicle_id}",
            f"Owner: {self.owner_name}",
            f"Type: {self.vehicle_type}",
            f"Year: {self.year_of_fabrication}",
            f"Registration: {self.registration_number}",
            f"Base Tax Rate: {fmt_money(self.base_tax_rate, symbol)}",
            *self.details(),
        ]

    def generate_tax_report(self) -> str:
        """Full tax report; pure, so repeated calls give identical text."""
        rules = self.applied_rules()
        lines = [f"=== TAX REPORT: {self.vehicle_type.upper()} ==="]
        lines.extend(self.summary_lines())
        lines.append(f"Vehicle Age: {self.vehicle_age} years")
        lines.append("Applied Tax Rules:")
        if rules:
            lines.extend(f"- {rule}" for rule in rules)
        else:
            lines.append("- None")
        lines.append(
            f"Total Annual Tax: {fmt_money(self.calculate_tax(), self._config.currency_symbol)}"
        )
        lines.append(REPORT_RULE)
        return "\n".join(lines)

    def __str__(self) -> str:
        return "\n".join(self.summary_lines())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(vehicle_id={self.vehicle_id!r}, "
            f"registration_number={self.registration_number!r})"
        )


def validate_year_of_fabrication(value: Any, current_year: int, min_year: int = 1900) -> int:
    """Shared by the model setter and the shell's year prompt."""
    year = to_int(value, "year_of_fabrication")
    if year > current_year:
        raise InvalidArgumentError(
            "Year of fabrication cannot be in the future", field="year_of_fabrication"
        )
    if year < min_year:
        raise InvalidArgumentError(
            f"Year of fabrication must be after {min_year}", field="year_of_fabrication"
        )
    return year


class Car(Vehicle):
    vehicle_kind = VehicleType.CAR

    def __init__(self, vehicle_id, owner_name, year_of_fabrication,
                 registration_number, base_tax_rate, is_electric: bool, **kwargs):
        super().__init__(vehicle_id, owner_name, year_of_fabrication,
                         registration_number, base_tax_rate, "Car", **kwargs)
        self.is_electric = is_electric

    @property
    def is_electric(self) -> bool:
        return self._is_electric

    @is_electric.setter
    def is_electric(self, value: bool) -> None:
        self._is_electric = require_bool(value, "Electric flag must be true or false", "is_electric")

    def calculate_tax(self) -> Decimal:
        tax = self.base_tax_rate
        if self.is_electric:
            tax *= Decimal("0.8")
        if self.vehicle_age > 10:
            tax *= Decimal("0.9")
        return quantize_money(tax)

    def applied_rules(self) -> tuple[str, ...]:
        rules = []
        if self.is_electric:
            rules.append("Electric vehicle discount: 20%")
        if self.vehicle_age > 10:
            rules.append("Vehicle age reduction: 10%")
        return tuple(rules)

    def details(self) -> tuple[str, ...]:
        return (f"Electric: {yes_no(self.is_electric)}",)


class Truck(Vehicle):
    vehicle_kind = VehicleType.TRUCK

    def __init__(self, vehicle_id, owner_name, year_of_fabrication,
                 registration_number, base_tax_rate, load_capacity: Decimal, **kwargs):
        super().__init__(vehicle_id, owner_name, year_of_fabrication,
                         registration_number, base_tax_rate, "Truck", **kwargs)
        self.load_capacity = load_capacity

    @property
    def load_capacity(self) -> Decimal:
        """Load capacity in tons."""
        return self._load_capacity

    @load_capacity.setter
    def load_capacity(self, value: Decimal) -> None:
        self._load_capacity = require_positive(
            value, "Load capacity must be greater than 0", "load_capacity"
        )

    def calculate_tax(self) -> Decimal:
        tax = self.base_tax_rate
        if self.vehicle_age > 15:
            tax *= Decimal("1.15")
        if self.load_capacity > 10:
            tax *= Decimal("1.25")
        return quantize_money(tax)

    def applied_rules(self) -> tuple[str, ...]:
        rules = []
        if self.vehicle_age > 15:
            rules.append("Age surcharge: 15%")
        if self.load_capacity > 10:
            rules.append("Heavy load capacity surcharge: 25%")
        return tuple(rules)

    def details(self) -> tuple[str, ...]:
        return (f"Load Capacity: {fmt_amount(self.load_capacity)} tons",)


class Motorcycle(Vehicle):
    vehicle_kind = VehicleType.MOTORCYCLE

    # 5% off per full 5 years of age, never more than 25%.
    DEPRECIATION_STEP = Decimal("0.05")
    DEPRECIATION_CAP = Decimal("0.25")

    def __init__(self, vehicle_id, owner_name, year_of_fabrication,
                 registration_number, base_tax_rate, engine_capacity: int, **kwargs):
        super().__init__(vehicle_id, owner_name, year_of_fabrication,
                         registration_number, base_tax_rate, "Motorcycle", **kwargs)
        self.engine_capacity = engine_capacity

    @property
    def engine_capacity(self) -> int:
        """Engine capacity in cc."""
        return self._engine_capacity

    @engine_capacity.setter
    def engine_capacity(self, value: int) -> None:
        self._engine_capacity = require_positive_int(
            value, "Engine capacity must be greater than 0", "engine_capacity"
        )

    def depreciation(self) -> Decimal:
        return min(self.DEPRECIATION_STEP * (self.vehicle_age // 5), self.DEPRECIATION_CAP)

    def calculate_tax(self) -> Decimal:
        tax = self.base_tax_rate
        if self.engine_capacity > 500:
            tax *= Decimal("1.2")
        tax *= 1 - self.depreciation()
        return quantize_money(tax)

    def applied_rules(self) -> tuple[str, ...]:
        rules = []
        if self.engine_capacity > 500:
            rules.append("High engine capacity surcharge: 20%")
        steps = self.vehicle_age // 5
        if steps > 0:
            rules.append(
                f"Age-based depreciation: {self.DEPRECIATION_STEP * steps * 100:.0f}% reduction"
            )
        return tuple(rules)

    def details(self) -> tuple[str, ...]:
        return (f"Engine Capacity: {self.engine_capacity} cc",)


class Bus(Vehicle):
    vehicle_kind = VehicleType.BUS

    def __init__(self, vehicle_id, owner_name, year_of_fabrication,
                 registration_number, base_tax_rate, passenger_capacity: int, **kwargs):
        super().__init__(vehicle_id, owner_name, year_of_fabrication,
                         registration_number, base_tax_rate, "Bus", **kwargs)
        self.passenger_capacity = passenger_capacity

    @property
    def passenger_capacity(self) -> int:
        return self._passenger_capacity

    @passenger_capacity.setter
    def passenger_capacity(self, value: int) -> None:
        self._passenger_capacity = require_positive_int(
            value, "Passenger capacity must be greater than 0", "passenger_capacity"
        )

    def passenger_increase_percent(self) -> Decimal:
        """2% per 10 passengers, pro rata."""
        return Decimal(self.passenger_capacity) / 10 * 2

    def calculate_tax(self) -> Decimal:
        tax = self.base_tax_rate
        tax *= 1 + self.passenger_increase_percent() / 100
        if self.vehicle_age > 20:
            tax *= Decimal("1.1")
        return quantize_money(tax)

    def applied_rules(self) -> tuple[str, ...]:
        rules = [f"Passenger capacity increase: {self.passenger_increase_percent():.1f}%"]
        if self.vehicle_age > 20:
            rules.append("Age surcharge: 10%")
        return tuple(rules)

    def details(self) -> tuple[str, ...]:
        return (f"Passenger Capacity: {self.passenger_capacity}",)


class SUV(Vehicle):
    vehicle_kind = VehicleType.SUV

    def __init__(self, vehicle_id, owner_name, year_of_fabrication,
                 registration_number, base_tax_rate, four_wheel_drive: bool, **kwargs):
        super().__init__(vehicle_id, owner_name, year_of_fabrication,
                         registration_number, base_tax_rate, "SUV", **kwargs)
        self.four_wheel_drive = four_wheel_drive

    @property
    def four_wheel_drive(self) -> bool:
        return self._four_wheel_drive

    @four_wheel_drive.setter
    def four_wheel_drive(self, value: bool) -> None:
        self._four_wheel_drive = require_bool(
            value, "Four wheel drive flag must be true or false", "four_wheel_drive"
        )

    def calculate_tax(self) -> Decimal:
        tax = self.base_tax_rate
        if self.four_wheel_drive:
            tax *= Decimal("1.1")
        if self.vehicle_age > 10:
            tax *= Decimal("0.95")
        return quantize_money(tax)

    def applied_rules(self) -> tuple[str, ...]:
        rules = []
        if self.four_wheel_drive:
            rules.append("Four wheel drive surcharge: 10%")
        if self.vehicle_age > 10:
            rules.append("Age-based reduction: 5%")
        return tuple(rules)

    def details(self) -> tuple[str, ...]:
        return (f"Four Wheel Drive: {yes_no(self.four_wheel_drive)}",)


VEHICLE_CLASSES: dict[VehicleType, type[Vehicle]] = {
    VehicleType.CAR: Car,
    VehicleType.TRUCK: Truck,
    VehicleType.MOTORCYCLE: Motorcycle,
    VehicleType.BUS: Bus,
    VehicleType.SUV: SUV,
}
