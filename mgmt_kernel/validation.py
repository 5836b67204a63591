"""
Field validation helpers shared by every entity setter.

Pure checks with no I/O.  Each helper either returns the normalized value
(trimmed string, ``Decimal``, ``int``, enum member, ``date``) or raises an
``InvalidArgumentError`` subclass carrying a human-readable message.  Setters
call a helper first and assign only on success, so a rejected value never
touches existing state.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from mgmt_kernel.exceptions import (
    InvalidArgumentError,
    InvalidDateFormatError,
    InvalidNumberFormatError,
)

E = TypeVar("E", bound=Enum)

TRUE_WORDS = frozenset({"true", "yes", "y", "1"})
FALSE_WORDS = frozenset({"false", "no", "n", "0"})

# Largest magnitude accepted for any amount; keeps cent rounding within the
# default 28-digit decimal context.
MAX_AMOUNT = Decimal("1e15")

# Java-style patterns used in prompts mapped to strptime formats.
DATE_PATTERNS = {
    "dd/MM/yyyy": "%d/%m/%Y",
    "yyyy-MM-dd": "%Y-%m-%d",
}

# Every field at full width: 01/06/2025, never 1/6/2025.
DATE_SHAPES = {
    "dd/MM/yyyy": re.compile(r"\d{2}/\d{2}/\d{4}"),
    "yyyy-MM-dd": re.compile(r"\d{4}-\d{2}-\d{2}"),
}


def require_text(value: Any, message: str, field: str | None = None) -> str:
    """Return ``value`` trimmed; reject None, non-strings and blank strings."""
    if value is None or not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(message, field=field)
    return value.strip()


def to_decimal(value: Any, field: str | None = None) -> Decimal:
    """
    Coerce ``value`` to ``Decimal``.

    Floats go through ``str()`` so 0.1 stays 0.1.  Booleans, NaN and
    infinities are rejected, as is anything beyond ``MAX_AMOUNT``.
    """
    if isinstance(value, bool):
        raise InvalidNumberFormatError(str(value))
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidNumberFormatError(value) from None
    else:
        raise InvalidNumberFormatError(str(value))
    if not result.is_finite():
        raise InvalidNumberFormatError(str(value))
    if abs(result) > MAX_AMOUNT:
        raise InvalidArgumentError(
            f"Amount is too large (maximum {MAX_AMOUNT:,.0f})", field=field
        )
    return result


def to_int(value: Any, field: str | None = None) -> int:
    """Coerce ``value`` to ``int``; strings must be plain base-10 integers."""
    if isinstance(value, bool):
        raise InvalidNumberFormatError(str(value), expected="integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.fullmatch(r"[+-]?\d+", value.strip()):
        return int(value.strip())
    raise InvalidNumberFormatError(str(value), expected="integer")


def require_non_negative(value: Any, message: str, field: str | None = None) -> Decimal:
    amount = to_decimal(value, field)
    if amount < 0:
        raise InvalidArgumentError(message, field=field)
    return amount


def require_positive(value: Any, message: str, field: str | None = None) -> Decimal:
    amount = to_decimal(value, field)
    if amount <= 0:
        raise InvalidArgumentError(message, field=field)
    return amount


def require_non_negative_int(value: Any, message: str, field: str | None = None) -> int:
    number = to_int(value, field)
    if number < 0:
        raise InvalidArgumentError(message, field=field)
    return number


def require_positive_int(value: Any, message: str, field: str | None = None) -> int:
    number = to_int(value, field)
    if number <= 0:
        raise InvalidArgumentError(message, field=field)
    return number


def require_bool(value: Any, message: str, field: str | None = None) -> bool:
    """Accept real booleans and the yes/no words understood by ``parse_bool``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return parse_bool(value, message)
    raise InvalidArgumentError(message, field=field)


def require_choice(
    value: Any,
    enum_type: type[E],
    message: str,
    field: str | None = None,
) -> E:
    """Return the enum member for ``value`` (a member or its exact value)."""
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        for member in enum_type:
            if member.value == value.strip():
                return member
    raise InvalidArgumentError(message, field=field)


def require_email(value: Any, empty_message: str = "Email cannot be empty",
                  field: str | None = "email") -> str:
    email = require_text(value, empty_message, field)
    if "@" not in email:
        raise InvalidArgumentError("Email must contain '@'", field=field)
    return email


def require_digits(value: Any, length: int, label: str, field: str | None = None) -> str:
    """Exact-length numeric string, e.g. a 9-digit TIN."""
    text = require_text(value, f"{label} cannot be empty", field)
    if len(text) != length:
        raise InvalidArgumentError(
            f"{label} must be exactly {length} digits", field=field
        )
    if not re.fullmatch(rf"\d{{{length}}}", text):
        raise InvalidArgumentError(f"{label} must contain only digits", field=field)
    return text


def require_date(value: Any, message: str, field: str | None = None) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidArgumentError(message, field=field)


def require_not_future(value: date, today: date, message: str,
                       field: str | None = None) -> date:
    if value > today:
        raise InvalidArgumentError(message, field=field)
    return value


def parse_date(raw: str, pattern: str) -> date:
    """Parse ``raw`` with one of the ``DATE_PATTERNS`` (``dd/MM/yyyy`` ...)."""
    fmt = DATE_PATTERNS[pattern]
    text = raw.strip()
    if not DATE_SHAPES[pattern].fullmatch(text):
        raise InvalidDateFormatError(raw, pattern)
    try:
        return datetime.strptime(text, fmt).date()
    except ValueError:
        raise InvalidDateFormatError(raw, pattern) from None


def parse_bool(raw: str, message: str = "Invalid input. Please enter 'true' or 'false'.") -> bool:
    word = raw.strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise InvalidArgumentError(message)
