"""Tests for calendar arithmetic (mgmt_kernel/periods.py)."""

from datetime import date

import pytest

from mgmt_kernel.periods import (
    add_months,
    days_between,
    months_between,
    period_code,
    same_month,
    weeks_between,
)


class TestAddMonths:

    def test_simple(self):
        assert add_months(date(2025, 5, 20), 1) == date(2025, 6, 20)

    def test_year_rollover(self):
        assert add_months(date(2025, 12, 10), 1) == date(2026, 1, 10)

    def test_clamps_to_month_end(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_negative(self):
        assert add_months(date(2025, 3, 15), -3) == date(2024, 12, 15)


class TestDifferences:

    @pytest.mark.parametrize(
        "start, end, expected",
        [
            (date(2025, 1, 15), date(2025, 3, 15), 2),
            (date(2025, 1, 15), date(2025, 3, 14), 1),
            (date(2025, 1, 31), date(2025, 2, 28), 0),
            (date(2025, 6, 15), date(2025, 6, 15), 0),
            (date(2025, 3, 15), date(2025, 1, 20), -1),
        ],
    )
    def test_months_between(self, start, end, expected):
        assert months_between(start, end) == expected

    def test_weeks_between_truncates(self):
        assert weeks_between(date(2025, 6, 1), date(2025, 7, 13)) == 6
        assert weeks_between(date(2025, 6, 1), date(2025, 7, 12)) == 5

    def test_days_between(self):
        assert days_between(date(2025, 6, 15), date(2025, 6, 20)) == 5
        assert days_between(date(2025, 6, 20), date(2025, 6, 15)) == -5


class TestLabels:

    def test_same_month(self):
        assert same_month(date(2025, 6, 1), date(2025, 6, 30))
        assert not same_month(date(2025, 6, 1), date(2024, 6, 1))

    def test_period_code(self):
        assert period_code(date(2025, 6, 9)) == "2025-06"
