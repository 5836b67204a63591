"""CLI entry point: pick a program, wire clock and logging, run its shell."""

from __future__ import annotations

import argparse
import logging
import sys
import uuid
from datetime import date
from typing import Callable, Sequence

from mgmt_cli.internship import run_internship_shell
from mgmt_cli.tax_enforcement import run_tax_shell
from mgmt_cli.vehicle_tax import run_vehicle_shell
from mgmt_kernel.clock import Clock, DeterministicClock, SystemClock
from mgmt_kernel.exceptions import ManagementError
from mgmt_kernel.logging_config import LogContext, configure_logging, get_logger
from mgmt_kernel.validation import parse_date
from mgmt_modules.internship.service import InternshipService
from mgmt_modules.tax_enforcement.service import TaxEnforcementService
from mgmt_modules.vehicle_tax.service import VehicleTaxService

logger = get_logger("cli.main")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class _FlushingFileHandler(logging.FileHandler):
    """FileHandler that flushes after every emit so the log follows the session."""

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.flush()


def _parse_today(raw: str) -> date:
    try:
        return parse_date(raw, "yyyy-MM-dd")
    except ManagementError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mgmt-cli",
        description="Interactive management systems: vehicle tax, RRA tax "
                    "enforcement and internship placement.",
    )
    parser.add_argument(
        "program",
        choices=("vehicles", "tax", "internships"),
        help="which management system to run",
    )
    parser.add_argument(
        "--today",
        type=_parse_today,
        metavar="YYYY-MM-DD",
        help="pin the session date (default: the system date)",
    )
    parser.add_argument(
        "--no-sample-data",
        action="store_true",
        help="start with empty registries instead of the bundled sample data",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="minimum level for structured log lines (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="write structured log lines to PATH instead of stderr",
    )
    return parser


def _setup_logging(level_name: str, log_file: str | None) -> None:
    level = getattr(logging, level_name)
    if log_file:
        handler = _FlushingFileHandler(log_file, mode="a", encoding="utf-8")
        configure_logging(level=level, handler=handler)
    else:
        configure_logging(level=level)


def _vehicle_program(clock: Clock, seed: bool) -> Callable[[], None]:
    service = VehicleTaxService(clock=clock)
    return lambda: run_vehicle_shell(service)


def _tax_program(clock: Clock, seed: bool) -> Callable[[], None]:
    service = TaxEnforcementService(clock=clock)
    if seed:
        service.seed_sample_data()
    return lambda: run_tax_shell(service)


def _internship_program(clock: Clock, seed: bool) -> Callable[[], None]:
    service = InternshipService(clock=clock)
    if seed:
        service.seed_sample_data()
    return lambda: run_internship_shell(service)


PROGRAMS: dict[str, Callable[[Clock, bool], Callable[[], None]]] = {
    "vehicles": _vehicle_program,
    "tax": _tax_program,
    "internships": _internship_program,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.log_level, args.log_file)

    clock: Clock = DeterministicClock(args.today) if args.today else SystemClock()
    session_id = uuid.uuid4().hex[:12]

    with LogContext.bind(program=args.program, session_id=session_id):
        logger.info(
            "cli_session_started",
            extra={
                "today": clock.today(),
                "sample_data": not args.no_sample_data,
                "log_file": args.log_file,
            },
        )
        try:
            shell = PROGRAMS[args.program](clock, not args.no_sample_data)
            shell()
        except (EOFError, KeyboardInterrupt):
            print()
            logger.info("cli_session_interrupted")
            return 0
        except ManagementError as exc:
            logger.error("cli_session_failed", extra={"error_code": exc.code})
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        logger.info("cli_session_finished")
    return 0


if __name__ == "__main__":
    sys.exit(main())
