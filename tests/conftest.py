"""
Pytest fixtures for the management systems test suite.

Provides:
- A deterministic clock pinned to 2025-06-15
- One service per management system (tax and internship services come
  seeded with the bundled sample data)
- Logging state reset around every test
"""

from datetime import date

import pytest

from mgmt_kernel.clock import DeterministicClock
from mgmt_kernel.logging_config import LogContext, reset_logging
from mgmt_modules.internship.service import InternshipService
from mgmt_modules.tax_enforcement.service import TaxEnforcementService
from mgmt_modules.vehicle_tax.service import VehicleTaxService

TODAY = date(2025, 6, 15)


@pytest.fixture(autouse=True)
def _clean_logging():
    """The shells configure logging globally; undo it between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(TODAY)


@pytest.fixture
def vehicle_service(clock) -> VehicleTaxService:
    return VehicleTaxService(clock=clock)


@pytest.fixture
def tax_service(clock) -> TaxEnforcementService:
    service = TaxEnforcementService(clock=clock)
    service.seed_sample_data()
    return service


@pytest.fixture
def internship_service(clock) -> InternshipService:
    service = InternshipService(clock=clock)
    service.seed_sample_data()
    return service


@pytest.fixture
def feed_input(monkeypatch):
    """Replace ``input()`` with a scripted sequence of answers."""

    def _feed(*answers: str) -> list[str]:
        remaining = list(answers)
        prompts: list[str] = []

        def fake_input(prompt: str = "") -> str:
            prompts.append(prompt)
            if not remaining:
                raise EOFError
            return remaining.pop(0)

        monkeypatch.setattr("builtins.input", fake_input)
        return prompts

    return _feed
