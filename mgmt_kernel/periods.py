"""
Calendar arithmetic on ``date`` values.

Whole-unit differences truncate toward zero: 2025-01-31 -> 2025-02-28 is
0 whole months, 2025-01-15 -> 2025-03-15 is 2.
"""

from __future__ import annotations

import calendar
from datetime import date


def add_months(value: date, months: int) -> date:
    """Shift by calendar months, clamping the day to the target month's end."""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end`` (negative if reversed)."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and end.day < start.day:
        months -= 1
    elif months < 0 and end.day > start.day:
        months += 1
    return months


def weeks_between(start: date, end: date) -> int:
    """Whole weeks from ``start`` to ``end``."""
    days = (end - start).days
    return days // 7 if days >= 0 else -((-days) // 7)


def days_between(start: date, end: date) -> int:
    return (end - start).days


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def period_code(value: date) -> str:
    """``2025-06`` style label for a calendar month."""
    return f"{value.year:04d}-{value.month:02d}"
