from __future__ import annotations

import io
import sys

import pytest

from xlsx_records._json import load_json_str
from xlsx_records.logging import (
    DEFAULT_EXTRA_FIELDS,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
    stdlib_logging,
)


def _record(msg: str, level: int = stdlib_logging.INFO) -> stdlib_logging.LogRecord:
    return stdlib_logging.LogRecord(
        name="xlsx_records.workbook",
        level=level,
        pathname="workbook.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_basic() -> None:
    """Test JsonFormatter produces valid JSON with required fields."""
    formatter = JsonFormatter(static_fields={}, extra_field_names=[])
    output = formatter.format(_record("workbook saved"))
    parsed = load_json_str(output)
    assert type(parsed) is dict

    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "xlsx_records.workbook"
    assert parsed["message"] == "workbook saved"
    assert "timestamp" in parsed


def test_json_formatter_static_and_extra_fields() -> None:
    formatter = JsonFormatter(
        static_fields={"service": "report"},
        extra_field_names=["sheet", "rows", "missing", "service"],
    )
    record = _record("sheet finalized")
    record.sheet = "orders"
    record.rows = 3
    parsed = load_json_str(formatter.format(record))
    assert type(parsed) is dict
    assert parsed["service"] == "report"
    assert parsed["sheet"] == "orders"
    assert parsed["rows"] == 3
    assert "missing" not in parsed


def test_json_formatter_skips_non_json_extra() -> None:
    formatter = JsonFormatter(static_fields={}, extra_field_names=["path"])
    record = _record("x")
    record.path = object()
    parsed = load_json_str(formatter.format(record))
    assert type(parsed) is dict
    assert "path" not in parsed


def test_json_formatter_exception() -> None:
    formatter = JsonFormatter(static_fields={}, extra_field_names=[])
    try:
        raise ValueError("boom")
    except ValueError:
        record = stdlib_logging.LogRecord(
            name="t",
            level=stdlib_logging.ERROR,
            pathname="t.py",
            lineno=1,
            msg="failed",
            args=(),
            exc_info=sys.exc_info(),
        )
    parsed = load_json_str(formatter.format(record))
    assert type(parsed) is dict
    exc_text = parsed["exc_info"]
    assert isinstance(exc_text, str)
    assert "boom" in exc_text


def test_text_formatter() -> None:
    formatter = TextFormatter(extra_fields=["sheet", "rows"])
    record = _record("header written", stdlib_logging.DEBUG)
    record.sheet = "orders"
    output = formatter.format(record)
    assert "[DEBUG]" in output
    assert "[xlsx_records.workbook]" in output
    assert "sheet=orders" in output
    assert "rows=" not in output
    assert output.endswith("header written")


def test_setup_logging_text(capsys: pytest.CaptureFixture[str]) -> None:
    root = setup_logging(level="DEBUG", format_mode="text", service_name="report")
    assert root.level == stdlib_logging.DEBUG
    assert len(root.handlers) == 1
    get_logger("xlsx_records.test").info("hello", extra={"sheet": "orders"})
    captured = capsys.readouterr()
    assert "sheet=orders hello" in captured.out
    root.handlers.clear()


def test_setup_logging_json() -> None:
    root = setup_logging(
        level="WARNING",
        format_mode="json",
        service_name="report",
        instance_id="host-1",
        extra_fields=["sheet"],
    )
    handler = root.handlers[0]
    stream = io.StringIO()
    assert isinstance(handler, stdlib_logging.StreamHandler)
    handler.setStream(stream)
    get_logger("xlsx_records.test").warning("careful", extra={"sheet": "orders"})
    parsed = load_json_str(stream.getvalue().strip())
    assert type(parsed) is dict
    assert parsed["service"] == "report"
    assert parsed["instance_id"] == "host-1"
    assert parsed["sheet"] == "orders"
    assert root.level == stdlib_logging.WARNING
    root.handlers.clear()


def test_default_extra_fields() -> None:
    assert "sheet" in DEFAULT_EXTRA_FIELDS
    assert "path" in DEFAULT_EXTRA_FIELDS


def test_get_logger_name() -> None:
    assert get_logger("xlsx_records.sheet").name == "xlsx_records.sheet"
