"""Tests for the structured logging system (mgmt_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

from mgmt_kernel.exceptions import DuplicateEntityError
from mgmt_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
)
from mgmt_modules.internship.models import InternshipType


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    """Parse all JSON log lines from a stream."""
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.INFO)
        logger = get_logger("test")
        logger.info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "mgmt_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.INFO)
        logger = get_logger("test")
        logger.info("vehicle_registered", extra={"vehicle_id": "V001", "registered_count": 1})

        record = _parse_log(stream)
        assert record["vehicle_id"] == "V001"
        assert record["registered_count"] == 1

    def test_decimal_date_and_enum_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.INFO)
        logger = get_logger("test")
        logger.info(
            "declaration_registered",
            extra={
                "tax_amount": Decimal("23000.00"),
                "filed_on": date(2025, 6, 1),
                "kind": InternshipType.REMOTE,
            },
        )

        record = _parse_log(stream)
        assert record["tax_amount"] == "23000.00"
        assert record["filed_on"] == "2025-06-01"
        assert record["kind"] == "Remote"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.INFO)
        logger = get_logger("test")
        LogContext.set(program="tax", session_id="abc123")
        logger.info("test_msg")

        record = _parse_log(stream)
        assert record["program"] == "tax"
        assert record["session_id"] == "abc123"

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        try:
            raise ValueError("boom")
        except ValueError:
            logger.error("failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_management_exception_code_extracted(self):
        """Management exceptions carry a .code attribute and structured fields."""
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")

        try:
            raise DuplicateEntityError("vehicle", "Registration number", "RAB123A")
        except DuplicateEntityError:
            logger.error("registration_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "DUPLICATE_ENTITY"
        assert record["exc_type"] == "DuplicateEntityError"
        assert record["exc_entity_kind"] == "vehicle"
        assert record["exc_key_value"] == "RAB123A"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.INFO)
        logger = get_logger("test")
        logger.info("bare_message")

        record = _parse_log(stream)
        assert "program" not in record
        assert "session_id" not in record

    def test_default_level_is_warning(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("quiet")
        logger.warning("loud", extra={"k": "v"})

        logs = _parse_all_logs(stream)
        assert [r["message"] for r in logs] == ["loud"]
        for record in logs:
            assert "ts" in record
            assert "level" in record
            assert "logger" in record


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(program="vehicles", operation="register")
        assert LogContext.get_all() == {"program": "vehicles", "operation": "register"}

    def test_clear(self):
        LogContext.set(program="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(program="outer")
        with LogContext.bind(program="inner"):
            assert LogContext.get_all()["program"] == "inner"
        assert LogContext.get_all()["program"] == "outer"

    def test_bind_restores_none(self):
        """bind() restores to None if there was no previous value."""
        assert "session_id" not in LogContext.get_all()
        with LogContext.bind(session_id="temp"):
            assert LogContext.get_all()["session_id"] == "temp"
        assert "session_id" not in LogContext.get_all()

    def test_all_fields(self):
        LogContext.set(session_id="s", program="p", operation="o", entity_id="e")
        ctx = LogContext.get_all()
        assert len(ctx) == 4
        assert ctx["entity_id"] == "e"


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for initialization."""

    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)  # second call is no-op
        root = logging.getLogger("mgmt_kernel")
        assert len(root.handlers) == 1

    def test_get_logger_returns_child(self):
        logger = get_logger("modules.vehicle_tax.service")
        assert logger.name == "mgmt_kernel.modules.vehicle_tax.service"

    def test_logger_hierarchy(self):
        """Child loggers inherit the mgmt_kernel root config."""
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        child = get_logger("deep.nested.module")
        child.debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["message"] == "hierarchy_test"
        assert record["logger"] == "mgmt_kernel.deep.nested.module"
