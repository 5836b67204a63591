"""
Vehicle Tax Service -- registration, tax calculation and reports.

Responsibility:
    Owns the session's vehicle registry and the uniqueness rules for vehicle
    IDs and registration numbers (both case-insensitive).  Tax arithmetic
    lives on the vehicle variants; this service only composes it.

Failure modes:
    - ``register_vehicle`` raises ``DuplicateEntityError`` for a taken ID or
      registration number and ``InvalidArgumentError`` for invalid fields
      or an unknown vehicle kind.  Nothing is registered on failure.

Usage:
    service = VehicleTaxService(clock=DeterministicClock(date(2025, 6, 15)))
    car = service.register_vehicle(
        VehicleType.CAR,
        vehicle_id="V001",
        owner_name="Alice",
        year_of_fabrication=2013,
        registration_number="RAB123A",
        base_tax_rate=Decimal("1000"),
        is_electric=True,
    )
    car.calculate_tax()  # Decimal("720.00")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from mgmt_kernel.clock import Clock, SystemClock
from mgmt_kernel.exceptions import InvalidArgumentError
from mgmt_kernel.logging_config import get_logger
from mgmt_kernel.registry import Registry, UniqueKey
from mgmt_kernel.validation import require_choice
from mgmt_modules.vehicle_tax.config import VehicleTaxConfig
from mgmt_modules.vehicle_tax.models import VEHICLE_CLASSES, Vehicle, VehicleType

logger = get_logger("modules.vehicle_tax.service")

VEHICLE_ID_KEY = "Vehicle ID"
REGISTRATION_NUMBER_KEY = "Registration number"


@dataclass(frozen=True)
class VehicleTaxLine:
    """One row of the tax calculation listing."""
    position: int
    vehicle_type: str
    registration_number: str
    tax: Decimal


class VehicleTaxService:
    """
    Session-scoped vehicle tax operations.

    Contract:
        Callers supply an optional ``Clock`` and ``VehicleTaxConfig``; every
        vehicle created here shares them.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        config: VehicleTaxConfig | None = None,
    ):
        self._clock = clock or SystemClock()
        self._config = config or VehicleTaxConfig.with_defaults()
        self._vehicles: Registry[Vehicle] = Registry(
            "vehicle",
            (
                UniqueKey(VEHICLE_ID_KEY, lambda v: v.vehicle_id),
                UniqueKey(REGISTRATION_NUMBER_KEY, lambda v: v.registration_number),
            ),
        )

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def config(self) -> VehicleTaxConfig:
        return self._config

    # =========================================================================
    # Registration
    # =========================================================================

    def is_vehicle_id_taken(self, vehicle_id: str) -> bool:
        return self._vehicles.is_taken(VEHICLE_ID_KEY, vehicle_id)

    def is_registration_number_taken(self, registration_number: str) -> bool:
        return self._vehicles.is_taken(REGISTRATION_NUMBER_KEY, registration_number)

    def build_vehicle(self, kind: VehicleType | str, **fields: Any) -> Vehicle:
        """Construct (but do not register) a vehicle of the given kind."""
        vehicle_type = require_choice(
            kind, VehicleType, f"Unknown vehicle type: {kind}", "vehicle_type"
        )
        cls = VEHICLE_CLASSES[vehicle_type]
        try:
            return cls(**fields, clock=self._clock, config=self._config)
        except TypeError as exc:
            # Missing or unexpected keyword for this variant.
            raise InvalidArgumentError(
                f"Invalid fields for {vehicle_type.value}: {exc}"
            ) from exc

    def register_vehicle(self, kind: VehicleType | str, **fields: Any) -> Vehicle:
        vehicle = self.build_vehicle(kind, **fields)
        self._vehicles.add(vehicle)
        logger.info(
            "vehicle_registered",
            extra={
                "vehicle_id": vehicle.vehicle_id,
                "vehicle_type": vehicle.vehicle_type,
                "registration_number": vehicle.registration_number,
                "registered_count": len(self._vehicles),
            },
        )
        return vehicle

    # =========================================================================
    # Queries
    # =========================================================================

    def vehicles(self) -> list[Vehicle]:
        return self._vehicles.all()

    def get_vehicle(self, position: int) -> Vehicle:
        return self._vehicles.get(position, "vehicle")

    def find_by_owner(self, term: str) -> list[Vehicle]:
        """Case-insensitive owner-name substring search."""
        needle = term.strip().casefold()
        return self._vehicles.filter(lambda v: needle in v.owner_name.casefold())

    def calculate_all(self) -> list[VehicleTaxLine]:
        lines = [
            VehicleTaxLine(
                position=i,
                vehicle_type=v.vehicle_type,
                registration_number=v.registration_number,
                tax=v.calculate_tax(),
            )
            for i, v in enumerate(self._vehicles, 1)
        ]
        logger.debug(
            "vehicle_tax_calculated",
            extra={"vehicle_count": len(lines), "total_tax": self.total_tax()},
        )
        return lines

    def total_tax(self) -> Decimal:
        return sum((v.calculate_tax() for v in self._vehicles), Decimal("0"))

    def tax_reports(self) -> list[str]:
        return [v.generate_tax_report() for v in self._vehicles]
