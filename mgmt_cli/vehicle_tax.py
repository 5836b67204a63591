"""Vehicle tax shell: registration, listings, tax calculation and reports."""

from __future__ import annotations

from mgmt_cli.menu import VEHICLE_MENU, print_section, run_menu_loop
from mgmt_cli.util import (
    print_blocks,
    prompt_bool,
    prompt_non_negative,
    prompt_positive,
    prompt_positive_int,
    prompt_text,
    prompt_until_valid,
    select_member,
)
from mgmt_kernel.exceptions import DuplicateEntityError, ManagementError
from mgmt_kernel.formatting import fmt_money
from mgmt_kernel.validation import require_text
from mgmt_modules.vehicle_tax.models import VehicleType, validate_year_of_fabrication
from mgmt_modules.vehicle_tax.service import (
    REGISTRATION_NUMBER_KEY,
    VEHICLE_ID_KEY,
    VehicleTaxService,
)

VEHICLE_RULE = "-" * 29


def _unique_vehicle_id(service: VehicleTaxService, raw: str) -> str:
    vehicle_id = require_text(raw, "Vehicle ID cannot be empty", "vehicle_id")
    if service.is_vehicle_id_taken(vehicle_id):
        raise DuplicateEntityError("vehicle", VEHICLE_ID_KEY, vehicle_id)
    return vehicle_id


def _unique_registration(service: VehicleTaxService, raw: str) -> str:
    number = require_text(raw, "Registration number cannot be empty", "registration_number")
    if service.is_registration_number_taken(number):
        raise DuplicateEntityError("vehicle", REGISTRATION_NUMBER_KEY, number)
    return number


def _variant_fields(kind: VehicleType) -> dict:
    if kind is VehicleType.CAR:
        return {"is_electric": prompt_bool("Is the car electric (true/false): ")}
    if kind is VehicleType.TRUCK:
        return {"load_capacity": prompt_positive(
            "Enter load capacity (in tons): ", "Load capacity must be greater than 0")}
    if kind is VehicleType.MOTORCYCLE:
        return {"engine_capacity": prompt_positive_int(
            "Enter engine capacity (in cc): ", "Engine capacity must be greater than 0")}
    if kind is VehicleType.BUS:
        return {"passenger_capacity": prompt_positive_int(
            "Enter passenger capacity: ", "Passenger capacity must be greater than 0")}
    return {"four_wheel_drive": prompt_bool("Is the SUV four-wheel drive (true/false): ")}


def register_vehicle(service: VehicleTaxService) -> None:
    print_section("VEHICLE REGISTRATION")
    print("Select vehicle type:")
    kind = select_member("Enter your choice: ", list(VehicleType), "vehicle type")

    config = service.config
    vehicle_id = prompt_until_valid(
        "Enter vehicle ID: ", lambda raw: _unique_vehicle_id(service, raw)
    )
    owner_name = prompt_text("Enter owner name: ", "Owner name cannot be empty")
    year = prompt_until_valid(
        "Enter year of fabrication: ",
        lambda raw: validate_year_of_fabrication(
            raw, service.clock.current_year(), config.min_year_of_fabrication
        ),
    )
    registration_number = prompt_until_valid(
        "Enter registration number: ", lambda raw: _unique_registration(service, raw)
    )
    base_tax_rate = prompt_non_negative(
        f"Enter base tax rate: {config.currency_symbol}", "Base tax rate cannot be negative"
    )
    extra = _variant_fields(kind)

    try:
        service.register_vehicle(
            kind,
            vehicle_id=vehicle_id,
            owner_name=owner_name,
            year_of_fabrication=year,
            registration_number=registration_number,
            base_tax_rate=base_tax_rate,
            **extra,
        )
    except ManagementError as exc:
        print(f"Registration failed: {exc}")
        return
    print("Vehicle registered successfully!")


def view_vehicles(service: VehicleTaxService) -> None:
    vehicles = service.vehicles()
    if not vehicles:
        print("\nNo vehicles registered yet.")
        return
    print_section("REGISTERED VEHICLES")
    print_blocks(vehicles, "Vehicle", VEHICLE_RULE)


def calculate_taxes(service: VehicleTaxService) -> None:
    lines = service.calculate_all()
    if not lines:
        print("\nNo vehicles registered yet.")
        return
    symbol = service.config.currency_symbol
    print_section("TAX CALCULATION")
    for line in lines:
        print(
            f"Vehicle #{line.position} ({line.vehicle_type} - {line.registration_number}): "
            f"{fmt_money(line.tax, symbol)}"
        )
    print(f"\nTotal Tax: {fmt_money(service.total_tax(), symbol)}")


def show_tax_reports(service: VehicleTaxService) -> None:
    reports = service.tax_reports()
    if not reports:
        print("\nNo vehicles registered yet.")
        return
    print_section("VEHICLE TAX REPORTS")
    for report in reports:
        print(report)
        print()


def search_by_owner(service: VehicleTaxService) -> None:
    if not service.vehicles():
        print("\nNo vehicles registered yet.")
        return
    term = prompt_text("Enter owner name to search: ", "Search term cannot be empty")
    matches = service.find_by_owner(term)
    print_section("SEARCH RESULTS")
    if not matches:
        print(f"No vehicles found for owners with name containing '{term}'")
        return
    for vehicle in matches:
        print(vehicle)
        print(VEHICLE_RULE)


def run_vehicle_shell(service: VehicleTaxService) -> None:
    print("Welcome to Vehicle Tax Management System")
    run_menu_loop(
        "VEHICLE TAX MANAGEMENT SYSTEM",
        VEHICLE_MENU,
        {
            1: lambda: register_vehicle(service),
            2: lambda: view_vehicles(service),
            3: lambda: calculate_taxes(service),
            4: lambda: show_tax_reports(service),
            5: lambda: search_by_owner(service),
        },
        "Thank you for using Vehicle Tax Management System.",
    )
