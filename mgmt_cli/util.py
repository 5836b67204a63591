"""CLI utilities: re-prompting input helpers and list printing."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Callable, Sequence, TypeVar

from mgmt_kernel.exceptions import InvalidSelectionError, ManagementError
from mgmt_kernel.validation import (
    parse_bool,
    parse_date,
    require_non_negative,
    require_non_negative_int,
    require_positive,
    require_positive_int,
    require_text,
    to_int,
)

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


def prompt_until_valid(prompt: str, parse: Callable[[str], T]) -> T:
    """
    Ask until ``parse`` accepts the answer.

    ``parse`` signals rejection with a ``ManagementError``; its message is
    shown as ``Error: <message>`` and the prompt repeats.  EOF and Ctrl-C
    propagate to the caller.
    """
    while True:
        raw = input(prompt)
        try:
            return parse(raw)
        except ManagementError as exc:
            print(f"Error: {exc}")


def prompt_text(prompt: str, empty_message: str = "Input cannot be empty") -> str:
    return prompt_until_valid(prompt, lambda raw: require_text(raw, empty_message))


def prompt_int(prompt: str) -> int:
    return prompt_until_valid(prompt, lambda raw: to_int(raw))


def prompt_non_negative(prompt: str, message: str) -> Decimal:
    return prompt_until_valid(prompt, lambda raw: require_non_negative(raw, message))


def prompt_positive(prompt: str, message: str) -> Decimal:
    return prompt_until_valid(prompt, lambda raw: require_positive(raw, message))


def prompt_non_negative_int(prompt: str, message: str) -> int:
    return prompt_until_valid(prompt, lambda raw: require_non_negative_int(raw, message))


def prompt_positive_int(prompt: str, message: str) -> int:
    return prompt_until_valid(prompt, lambda raw: require_positive_int(raw, message))


def prompt_bool(prompt: str) -> bool:
    return prompt_until_valid(prompt, parse_bool)


def prompt_yes_no(prompt: str) -> bool:
    return prompt_until_valid(
        prompt, lambda raw: parse_bool(raw, "Invalid input. Please enter 'yes' or 'no'.")
    )


def prompt_date(prompt: str, pattern: str) -> date:
    return prompt_until_valid(prompt, lambda raw: parse_date(raw, pattern))


def prompt_validated(prompt: str, check: Callable[[str], T]) -> T:
    """Re-prompt with a field validator such as ``require_email``."""
    return prompt_until_valid(prompt, check)


def select_position(prompt: str, count: int, what: str) -> int:
    """Read a 1-based menu position; out of range raises ``InvalidSelectionError``."""
    choice = prompt_int(prompt)
    if choice < 1 or choice > count:
        raise InvalidSelectionError(what, choice, count)
    return choice


def prompt_position(prompt: str, count: int, what: str) -> int:
    """Like ``select_position`` but re-prompts until the choice is in range."""
    def parse(raw: str) -> int:
        choice = to_int(raw)
        if choice < 1 or choice > count:
            raise InvalidSelectionError(what, choice, count)
        return choice
    return prompt_until_valid(prompt, parse)


def select_member(prompt: str, options: Sequence[E], what: str,
                  labels: Sequence[str] | None = None) -> E:
    """Print numbered options and return the chosen enum member."""
    for i, member in enumerate(options, 1):
        label = labels[i - 1] if labels else member.value
        print(f"{i}. {label}")
    return options[prompt_position(prompt, len(options), what) - 1]


def print_numbered(items: Sequence[object]) -> None:
    for i, item in enumerate(items, 1):
        print(f"{i}. {item}")


def print_blocks(items: Sequence[object], heading: str, rule: str) -> None:
    """``Heading #n:`` followed by the item's text and a separator rule."""
    for i, item in enumerate(items, 1):
        print(f"\n{heading} #{i}:")
        print(item)
        print(rule)
