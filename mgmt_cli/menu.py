"""CLI menus: print each program's menus and run the dispatch loop."""

from __future__ import annotations

from typing import Callable

from mgmt_cli.util import prompt_int
from mgmt_kernel.formatting import banner
from mgmt_kernel.exceptions import ManagementError
from mgmt_kernel.logging_config import LogContext, get_logger

logger = get_logger("cli.menu")

VEHICLE_MENU = (
    "Register a new vehicle",
    "View registered vehicles",
    "Calculate tax for all vehicles",
    "Generate tax reports",
    "Search vehicles by owner",
    "Exit",
)

TAX_MENU = (
    "Register a new tax declaration",
    "View registered declarations",
    "View taxpayer compliance report",
    "Print tax receipt",
    "View summary of unpaid taxes",
    "Conduct audit",
    "Exit",
)

INTERNSHIP_MENU = (
    "Manage Students",
    "Manage Supervisors",
    "Manage Companies",
    "Manage Internships",
    "Search Internships",
    "Generate Reports",
    "Exit",
)

SEARCH_MENU = (
    "Search by student name",
    "Search by university",
    "Back to main menu",
)

REPORT_MENU = (
    "Generate reports for all internships",
    "Generate report for specific internship",
    "Track progress for an internship",
    "Update internship status",
    "Back to main menu",
)


def print_menu(title: str, options: tuple[str, ...], width: int | None = None) -> None:
    """Print ``===== TITLE =====``, numbered options and a closing rule."""
    heading = banner(title)
    print()
    print(heading)
    for i, option in enumerate(options, 1):
        print(f"{i}. {option}")
    print("=" * (width or len(heading)))


def print_submenu(title: str, options: tuple[str, ...]) -> None:
    print(f"\n----- {title} -----")
    for i, option in enumerate(options, 1):
        print(f"{i}. {option}")


def print_section(title: str) -> None:
    print(f"\n----- {title} -----")


def entity_menu(entity: str, plural: str | None = None) -> tuple[str, ...]:
    """Register / view / back options for one entity kind."""
    return (f"Register new {entity}", f"View all {plural or entity + 's'}", "Back to main menu")


def run_menu_loop(
    title: str,
    options: tuple[str, ...],
    handlers: dict[int, Callable[[], None]],
    farewell: str,
) -> None:
    """
    Print the menu, dispatch the choice, repeat until the last option.

    Handler errors are reported as ``Error: <message>`` and the loop goes on.
    Unexpected exceptions are logged with their traceback first.
    """
    exit_choice = len(options)
    while True:
        print_menu(title, options)
        choice = prompt_int("Enter your choice: ")
        if choice == exit_choice:
            print(farewell)
            return
        handler = handlers.get(choice)
        if handler is None:
            print("Invalid choice. Please try again.")
            continue
        try:
            with LogContext.bind(operation=options[choice - 1]):
                handler()
        except ManagementError as exc:
            logger.info("menu_action_failed", extra={"choice": choice, "error_code": exc.code})
            print(f"Error: {exc}")
        except Exception as exc:
            logger.exception("menu_action_crashed", extra={"choice": choice})
            print(f"Error: {exc}")
