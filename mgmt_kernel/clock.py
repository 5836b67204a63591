"""
Clock -- Deterministic time abstraction.

Responsibility:
    Provides an injectable clock so that domain and service code never call
    ``date.today()`` directly.  Vehicle age, future-date checks, late-payment
    penalties and progress-note timestamps all read "today" from a Clock.

Failure modes:
    - ``DeterministicClock.set_today`` accepts any ``date``; no validation.
"""

from abc import ABC, abstractmethod
from datetime import date, timedelta


class Clock(ABC):
    """
    Abstract clock interface.

    Contract:
        Everything that needs the current date receives a Clock instance via
        constructor injection.
    """

    @abstractmethod
    def today(self) -> date:
        """Get the current date."""
        ...

    def current_year(self) -> int:
        """Get the current calendar year."""
        return self.today().year


class SystemClock(Clock):
    """
    Production clock that returns the local system date.

    Non-goals:
        Not suitable for deterministic tests.
    """

    def today(self) -> date:
        return date.today()


class DeterministicClock(Clock):
    """
    Test clock with a controlled date.

    Guarantees:
        - ``today()`` returns the same value on repeated calls until
          ``advance()`` or ``set_today()`` is called.
    """

    def __init__(self, fixed_date: date | None = None):
        """
        Initialize with optional fixed date.

        Args:
            fixed_date: If provided, clock always returns this date.
                        If None, uses 2025-06-15.
        """
        self._fixed_date = fixed_date or date(2025, 6, 15)
        self._advance_days = 0

    def today(self) -> date:
        return self._fixed_date + timedelta(days=self._advance_days)

    def set_today(self, value: date) -> None:
        """Set the clock to a specific date."""
        self._fixed_date = value
        self._advance_days = 0

    def advance(self, days: int = 1) -> None:
        """Advance the clock by the specified number of days."""
        self._advance_days += days
