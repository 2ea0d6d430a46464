"""Workbook and logging settings.

Settings are plain TypedDicts. ``default_settings`` is what a ``Workbook``
uses when none are given; the environment and TOML loaders are opt-in.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TypedDict

from xlsx_records._json import JSONValue
from xlsx_records.logging import LogFormat, LogLevel

ENV_PREFIX = "XLSX_RECORDS_"
TOML_TABLE = ("tool", "xlsx_records")


class WorkbookSettings(TypedDict):
    """Behaviour switches for a Workbook.

    Attributes:
        default_sheet_name: Title of the sheet a new document starts with.
        header_bold: Whether header cells are bold.
        freeze_header: Whether the pane is frozen below the header row.
        auto_filter: Whether close() enables an autofilter over the header row.
        width_padding: Characters added to the widest value of a column.
        validate_schema: Whether rows must match the headings of the sheet's first row.
    """

    default_sheet_name: str
    header_bold: bool
    freeze_header: bool
    auto_filter: bool
    width_padding: int
    validate_schema: bool


class LoggingSettings(TypedDict):
    """Logging configuration for applications using the library."""

    level: LogLevel
    format_mode: LogFormat


def default_settings() -> WorkbookSettings:
    """Return the default workbook settings."""
    return WorkbookSettings(
        default_sheet_name="Sheet1",
        header_bold=True,
        freeze_header=True,
        auto_filter=True,
        width_padding=3,
        validate_schema=True,
    )


def _optional_env_str(key: str) -> str | None:
    value = os.getenv(key)
    if value is None:
        return None
    trimmed = value.strip()
    if trimmed == "":
        return None
    return trimmed


def _parse_str(key: str, default: str) -> str:
    val = _optional_env_str(key)
    return val if val is not None else default


def _parse_int(key: str, default: int) -> int:
    val = _optional_env_str(key)
    if val is None:
        return default
    return int(val)


def _parse_bool(key: str, default: bool) -> bool:
    val = _optional_env_str(key)
    if val is None:
        return default
    normalized = val.lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {key}: {val!r}")


def _parse_log_level(key: str, default: LogLevel) -> LogLevel:
    val = _optional_env_str(key)
    if val is None:
        return default
    upper_val = val.upper()
    if upper_val == "DEBUG":
        return "DEBUG"
    if upper_val == "INFO":
        return "INFO"
    if upper_val == "WARNING":
        return "WARNING"
    if upper_val == "ERROR":
        return "ERROR"
    if upper_val == "CRITICAL":
        return "CRITICAL"
    return default


def _parse_log_format(key: str, default: LogFormat) -> LogFormat:
    val = _optional_env_str(key)
    if val is None:
        return default
    lower_val = val.lower()
    if lower_val == "json":
        return "json"
    if lower_val == "text":
        return "text"
    raise ValueError(f"Invalid log format for {key}: {val!r}")


def _require_non_negative(key: str, value: int) -> int:
    if value < 0:
        raise ValueError(f"{key} must be >= 0, got {value}")
    return value


def load_settings_from_env() -> WorkbookSettings:
    """Load workbook settings from ``XLSX_RECORDS_*`` environment variables.

    Unset variables keep their default value.

    Raises:
        ValueError: If a variable holds an invalid value.
    """
    defaults = default_settings()
    padding_key = f"{ENV_PREFIX}WIDTH_PADDING"
    return WorkbookSettings(
        default_sheet_name=_parse_str(
            f"{ENV_PREFIX}DEFAULT_SHEET_NAME", defaults["default_sheet_name"]
        ),
        header_bold=_parse_bool(f"{ENV_PREFIX}HEADER_BOLD", defaults["header_bold"]),
        freeze_header=_parse_bool(f"{ENV_PREFIX}FREEZE_HEADER", defaults["freeze_header"]),
        auto_filter=_parse_bool(f"{ENV_PREFIX}AUTO_FILTER", defaults["auto_filter"]),
        width_padding=_require_non_negative(
            padding_key, _parse_int(padding_key, defaults["width_padding"])
        ),
        validate_schema=_parse_bool(f"{ENV_PREFIX}VALIDATE_SCHEMA", defaults["validate_schema"]),
    )


def load_logging_settings_from_env() -> LoggingSettings:
    """Load logging settings from ``XLSX_RECORDS_LOG_LEVEL`` and ``XLSX_RECORDS_LOG_FORMAT``."""
    return LoggingSettings(
        level=_parse_log_level(f"{ENV_PREFIX}LOG_LEVEL", "INFO"),
        format_mode=_parse_log_format(f"{ENV_PREFIX}LOG_FORMAT", "text"),
    )


def _decode_toml(path: Path) -> dict[str, JSONValue]:
    text = path.read_text(encoding="utf-8")
    parsed: JSONValue = tomllib.loads(text)
    if not isinstance(parsed, dict):
        raise RuntimeError(f"TOML root must be a table: {path}")
    return parsed


def _decode_table(data: dict[str, JSONValue], key: str) -> dict[str, JSONValue]:
    raw = data.get(key)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise RuntimeError(f"TOML key {key} must be a table")
    return {str(k): v for k, v in raw.items()}


def _toml_bool(table: dict[str, JSONValue], key: str, default: bool) -> bool:
    raw = table.get(key)
    if raw is None:
        return default
    if not isinstance(raw, bool):
        raise RuntimeError(f"TOML key {key} must be a boolean")
    return raw


def _toml_int(table: dict[str, JSONValue], key: str, default: int) -> int:
    raw = table.get(key)
    if raw is None:
        return default
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise RuntimeError(f"TOML key {key} must be an integer")
    return raw


def _toml_str(table: dict[str, JSONValue], key: str, default: str) -> str:
    raw = table.get(key)
    if raw is None:
        return default
    if not isinstance(raw, str):
        raise RuntimeError(f"TOML key {key} must be a string")
    return raw


def load_settings_from_toml(path: Path) -> WorkbookSettings:
    """Load workbook settings from the ``[tool.xlsx_records]`` table of a TOML file.

    Missing keys (or a missing table) keep their default value.

    Raises:
        RuntimeError: If the table or one of its keys has the wrong type.
        ValueError: If width_padding is negative.
    """
    data = _decode_toml(path)
    table = data
    for key in TOML_TABLE:
        table = _decode_table(table, key)

    defaults = default_settings()
    return WorkbookSettings(
        default_sheet_name=_toml_str(table, "default_sheet_name", defaults["default_sheet_name"]),
        header_bold=_toml_bool(table, "header_bold", defaults["header_bold"]),
        freeze_header=_toml_bool(table, "freeze_header", defaults["freeze_header"]),
        auto_filter=_toml_bool(table, "auto_filter", defaults["auto_filter"]),
        width_padding=_require_non_negative(
            "width_padding", _toml_int(table, "width_padding", defaults["width_padding"])
        ),
        validate_schema=_toml_bool(table, "validate_schema", defaults["validate_schema"]),
    )


__all__ = [
    "ENV_PREFIX",
    "LoggingSettings",
    "WorkbookSettings",
    "default_settings",
    "load_logging_settings_from_env",
    "load_settings_from_env",
    "load_settings_from_toml",
]
