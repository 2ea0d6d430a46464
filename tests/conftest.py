"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol

import pytest


class LoadedCellProtocol(Protocol):
    value: object
    number_format: str

    @property
    def font(self) -> LoadedFontProtocol: ...


class LoadedFontProtocol(Protocol):
    b: bool | None


class LoadedWorksheetProtocol(Protocol):
    freeze_panes: str | None

    def cell(self, row: int, column: int) -> LoadedCellProtocol: ...

    def __getitem__(self, key: str) -> LoadedCellProtocol: ...

    @property
    def max_row(self) -> int: ...

    @property
    def max_column(self) -> int: ...


class LoadedWorkbookProtocol(Protocol):
    @property
    def sheetnames(self) -> list[str]: ...

    def __getitem__(self, name: str) -> LoadedWorksheetProtocol: ...

    def close(self) -> None: ...


class _LoadWorkbookFn(Protocol):
    def __call__(self, filename: Path) -> LoadedWorkbookProtocol: ...


def load_xlsx(path: Path) -> LoadedWorkbookProtocol:
    """Load a written workbook back for assertions."""
    openpyxl_mod = __import__("openpyxl")
    load_fn: _LoadWorkbookFn = openpyxl_mod.load_workbook
    return load_fn(path)


def sheet_rows(path: Path, sheet: str) -> list[list[object]]:
    """Return the cell values of a written sheet row by row."""
    wb = load_xlsx(path)
    ws = wb[sheet]
    rows = [
        [ws.cell(row=r, column=c).value for c in range(1, ws.max_column + 1)]
        for r in range(1, ws.max_row + 1)
    ]
    wb.close()
    return rows


def _load_xlsx_fixture() -> Callable[[Path], LoadedWorkbookProtocol]:
    return load_xlsx


def _sheet_rows_fixture() -> Callable[[Path, str], list[list[object]]]:
    return sheet_rows


load_written = pytest.fixture(_load_xlsx_fixture)
read_rows = pytest.fixture(_sheet_rows_fixture)
