"""Protocol definitions for external library abstraction.

Internal protocols used to provide type-safe interfaces to openpyxl
without importing it directly at module load time.
"""

from __future__ import annotations

from xlsx_records._protocols.openpyxl import (
    AutoFilterProtocol,
    CellProtocol,
    ColumnDimensionProtocol,
    FontProtocol,
    WorkbookProtocol,
    WorksheetProtocol,
    XlsxCellValue,
    _builtin_number_format,
    _create_font,
    _create_workbook,
    _get_column_letter,
    _illegal_character_error,
)

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
