"""
Vehicle Tax Module.

Responsibility:
    Annual road tax for registered vehicles.  Five vehicle variants share
    validated registration fields and each apply their own multipliers to
    the base tax rate.

Invariants:
    - Vehicle IDs and registration numbers are unique, case-insensitive.
    - All monetary amounts use ``Decimal``.
"""

from mgmt_modules.vehicle_tax.config import VehicleTaxConfig
from mgmt_modules.vehicle_tax.models import (
    SUV,
    Bus,
    Car,
    Motorcycle,
    Truck,
    Vehicle,
    VehicleType,
)
from mgmt_modules.vehicle_tax.service import VehicleTaxLine, VehicleTaxService

__all__ = [
    "Vehicle",
    "VehicleType",
    "Car",
    "Truck",
    "Motorcycle",
    "Bus",
    "SUV",
    "VehicleTaxConfig",
    "VehicleTaxLine",
    "VehicleTaxService",
]
