"""Protocol definitions for openpyxl library.

Provides type-safe interfaces to openpyxl Workbook, Worksheet, and Cell
classes without importing openpyxl directly.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from datetime import date, datetime, time
from pathlib import Path
from typing import Protocol

# Values openpyxl accepts for a cell, restricted to what this library writes
XlsxCellValue = str | int | float | bool | datetime | date | time | None


class FontProtocol(Protocol):
    """Protocol for openpyxl Font."""

    bold: bool


class CellProtocol(Protocol):
    """Protocol for openpyxl Cell."""

    font: FontProtocol
    value: XlsxCellValue
    number_format: str
    data_type: str

    @property
    def coordinate(self) -> str:
        """Return cell coordinate (e.g. "A1")."""
        ...


class ColumnDimensionProtocol(Protocol):
    """Protocol for openpyxl ColumnDimension."""

    width: float


class AutoFilterProtocol(Protocol):
    """Protocol for openpyxl AutoFilter."""

    ref: str | None


class _GetColumnLetterFn(Protocol):
    """Protocol for openpyxl.utils.get_column_letter function."""

    def __call__(self, col_idx: int) -> str: ...


class WorksheetProtocol(Protocol):
    """Protocol for openpyxl Worksheet."""

    def cell(self, row: int, column: int, value: XlsxCellValue = None) -> CellProtocol:
        """Get or create cell at (row, column)."""
        ...

    @property
    def column_dimensions(self) -> MutableMapping[str, ColumnDimensionProtocol]:
        """Return column dimensions mapping."""
        ...

    @property
    def auto_filter(self) -> AutoFilterProtocol:
        """Return the worksheet autofilter."""
        ...

    @property
    def freeze_panes(self) -> str | None:
        """Return top-left cell of the unfrozen pane."""
        ...

    @freeze_panes.setter
    def freeze_panes(self, value: str | None) -> None:
        """Freeze rows above and columns left of the given cell."""
        ...

    @property
    def title(self) -> str:
        """Return worksheet title."""
        ...

    @title.setter
    def title(self, value: str) -> None:
        """Set worksheet title."""
        ...


class WorkbookProtocol(Protocol):
    """Protocol for openpyxl Workbook."""

    @property
    def sheetnames(self) -> list[str]:
        """Return list of sheet names."""
        ...

    def __getitem__(self, name: str) -> WorksheetProtocol:
        """Get worksheet by name."""
        ...

    def create_sheet(self, title: str) -> WorksheetProtocol:
        """Create a new worksheet."""
        ...

    def save(self, filename: str | Path) -> None:
        """Save workbook to file."""
        ...

    def close(self) -> None:
        """Close workbook."""
        ...

    @property
    def active(self) -> WorksheetProtocol:
        """Return active worksheet."""
        ...

    def remove(self, ws: WorksheetProtocol) -> None:
        """Remove a worksheet."""
        ...


class _WorkbookCtor(Protocol):
    """Protocol for openpyxl.Workbook constructor."""

    def __call__(self) -> WorkbookProtocol: ...


def _create_workbook() -> WorkbookProtocol:
    """Create a new openpyxl Workbook with strict typing.

    Returns:
        WorkbookProtocol for the new workbook.
    """
    openpyxl_mod = __import__("openpyxl")
    ctor: _WorkbookCtor = openpyxl_mod.Workbook
    return ctor()


def _get_column_letter(col_idx: int) -> str:
    """Get Excel column letter via typed Protocol.

    Args:
        col_idx: 1-based column index.

    Returns:
        Column letter (e.g., "A", "B", "AA").
    """
    utils_mod = __import__("openpyxl.utils", fromlist=["get_column_letter"])
    fn: _GetColumnLetterFn = utils_mod.get_column_letter
    return fn(col_idx)


def _create_font(*, bold: bool = False) -> FontProtocol:
    """Create openpyxl Font.

    Args:
        bold: Whether font is bold.

    Returns:
        FontProtocol instance.
    """
    styles_mod = __import__("openpyxl.styles", fromlist=["Font"])
    font: FontProtocol = styles_mod.Font(bold=bold)
    return font


def _builtin_number_format(num_fmt_id: int) -> str | None:
    """Look up the format code of a built-in number format.

    Args:
        num_fmt_id: Built-in number format id (e.g. 2 for "0.00", 14 for a short date).

    Returns:
        The format code, or None when the id has no built-in format.
    """
    numbers_mod = __import__("openpyxl.styles.numbers", fromlist=["BUILTIN_FORMATS"])
    builtins: Mapping[int, str] = numbers_mod.BUILTIN_FORMATS
    return builtins.get(num_fmt_id)


def _illegal_character_error() -> type[Exception]:
    """Return the exception openpyxl raises for control characters in cell text."""
    exceptions_mod = __import__(
        "openpyxl.utils.exceptions", fromlist=["IllegalCharacterError"]
    )
    error_type: type[Exception] = exceptions_mod.IllegalCharacterError
    return error_type


__all__ = [
    "AutoFilterProtocol",
    "CellProtocol",
    "ColumnDimensionProtocol",
    "FontProtocol",
    "WorkbookProtocol",
    "WorksheetProtocol",
    "XlsxCellValue",
    "_builtin_number_format",
    "_create_font",
    "_create_workbook",
    "_get_column_letter",
    "_illegal_character_error",
]
