"""Per-sheet row accumulation.

A SheetAccumulator writes the header row on the first record, appends one row
per record afterwards, and tracks the widest printed value of each column so
that ``finalize`` can size the columns.
"""

from __future__ import annotations

import math

from xlsx_records._exceptions import CellWriteError, RecordShapeError, SchemaMismatchError
from xlsx_records._protocols.openpyxl import (
    CellProtocol,
    FontProtocol,
    WorksheetProtocol,
    _builtin_number_format,
    _create_font,
    _get_column_letter,
    _illegal_character_error,
)
from xlsx_records.flatten import row_headings, row_styles, row_values
from xlsx_records.logging import get_logger
from xlsx_records.settings import WorkbookSettings
from xlsx_records.types import CellStyle, CellValue, RecordLayout

_logger = get_logger(__name__)

# First cell below the header row
_FREEZE_CELL = "A2"

# Longest text a cell can hold; openpyxl truncates anything longer
MAX_CELL_TEXT_LENGTH = 32767

_CELL_ERRORS: tuple[type[Exception], ...] = (ValueError, TypeError, _illegal_character_error())


def char_to_width(chars: int) -> float:
    """Convert a character count to a column width.

    Best guess from the Open XML SDK column width formula for a 7 pixel
    maximum digit width, truncated to 1/256 of a character.
    """
    return math.floor((chars * 7 + 5) / 7 * 256 + 0.5) / 256


def _printed_length(value: CellValue) -> int:
    if value is None:
        return 0
    return len(str(value))


class SheetAccumulator:
    """Mutable write state of one sheet.

    The first record written fixes the headings and styles of the sheet.
    """

    def __init__(self, worksheet: WorksheetProtocol, settings: WorkbookSettings) -> None:
        self._ws = worksheet
        self._settings = settings
        self._header_written = False
        self._headings: tuple[str, ...] = ()
        self._styles: tuple[CellStyle | None, ...] = ()
        self._row_cursor = 0
        self._column_widths: list[int] = []
        self._header_font: FontProtocol | None = None

    @property
    def name(self) -> str:
        return self._ws.title

    @property
    def header_written(self) -> bool:
        return self._header_written

    @property
    def headings(self) -> tuple[str, ...]:
        return self._headings

    @property
    def styles(self) -> tuple[CellStyle | None, ...]:
        return self._styles

    @property
    def row_cursor(self) -> int:
        """Row number of the last row written (1 is the header row)."""
        return self._row_cursor

    @property
    def data_rows(self) -> int:
        return self._row_cursor - 1 if self._header_written else 0

    @property
    def column_widths(self) -> tuple[int, ...]:
        """Widest printed length seen per column, header included."""
        return tuple(self._column_widths)

    def write(self, layout: RecordLayout, record: object) -> None:
        """Append one record, writing the header row first if needed.

        Args:
            layout: Layout of the record's type.
            record: The record instance.

        Raises:
            RecordShapeError: If the record cannot be flattened or has no columns.
            SchemaMismatchError: If schema validation is on and the record's
                headings differ from the sheet's.
            CellWriteError: If a value or style is rejected.
        """
        headings = row_headings(layout)
        values = row_values(layout, record)

        if not self._header_written:
            if not headings:
                raise RecordShapeError(layout["type_name"], "record has no annotated fields")
            self._write_header(headings, row_styles(layout))
        elif self._settings["validate_schema"] and tuple(headings) != self._headings:
            raise SchemaMismatchError(
                self.name,
                f"{layout['type_name']} headings {headings!r} differ from {list(self._headings)!r}",
            )

        self._write_cells(values)

    def finalize(self) -> None:
        """Size columns and enable the header autofilter.

        Does nothing for a sheet that never received a row.
        """
        if not self._header_written:
            return

        padding = self._settings["width_padding"]
        for col_idx, width in enumerate(self._column_widths, start=1):
            letter = _get_column_letter(col_idx)
            self._ws.column_dimensions[letter].width = char_to_width(width + padding)

        if self._settings["auto_filter"]:
            last = _get_column_letter(len(self._column_widths))
            self._ws.auto_filter.ref = f"A1:{last}1"

        _logger.debug(
            "sheet finalized",
            extra={"sheet": self.name, "rows": self.data_rows, "columns": len(self._headings)},
        )

    def _write_header(self, headings: list[str], styles: list[CellStyle | None]) -> None:
        self._headings = tuple(headings)
        self._styles = tuple(styles)
        self._column_widths = [0] * len(headings)
        self._row_cursor = 1

        if self._settings["header_bold"] and self._header_font is None:
            self._header_font = _create_font(bold=True)

        for col_idx, heading in enumerate(headings, start=1):
            cell = self._set_cell(col_idx, heading)
            self._track_width(col_idx, heading)
            if self._header_font is not None:
                cell.font = self._header_font

        if self._settings["freeze_header"]:
            self._ws.freeze_panes = _FREEZE_CELL

        self._header_written = True
        _logger.debug("header written", extra={"sheet": self.name, "columns": len(headings)})

    def _write_cells(self, values: list[CellValue]) -> None:
        self._row_cursor += 1
        for col_idx, value in enumerate(values, start=1):
            cell = self._set_cell(col_idx, value)
            self._track_width(col_idx, value)
            style = self._styles[col_idx - 1] if col_idx <= len(self._styles) else None
            if style is not None:
                self._apply_style(cell, style)

    def _set_cell(self, col_idx: int, value: CellValue) -> CellProtocol:
        if isinstance(value, str) and len(value) > MAX_CELL_TEXT_LENGTH:
            raise CellWriteError(
                self.name,
                f"{_get_column_letter(col_idx)}{self._row_cursor}",
                f"text longer than {MAX_CELL_TEXT_LENGTH} characters",
            )
        try:
            cell = self._ws.cell(row=self._row_cursor, column=col_idx, value=value)
        except _CELL_ERRORS as exc:
            coordinate = f"{_get_column_letter(col_idx)}{self._row_cursor}"
            raise CellWriteError(self.name, coordinate, str(exc)) from exc
        # openpyxl turns strings starting with "=" into formulas
        if isinstance(value, str) and cell.data_type == "f":
            cell.data_type = "s"
        return cell

    def _track_width(self, col_idx: int, value: CellValue) -> None:
        while len(self._column_widths) < col_idx:
            self._column_widths.append(0)
        self._column_widths[col_idx - 1] = max(
            self._column_widths[col_idx - 1], _printed_length(value)
        )

    def _apply_style(self, cell: CellProtocol, style: CellStyle) -> None:
        code = _builtin_number_format(style["number_format"])
        if code is None:
            raise CellWriteError(
                self.name,
                cell.coordinate,
                f"no built-in number format {style['number_format']}",
            )
        cell.number_format = code


__all__ = [
    "MAX_CELL_TEXT_LENGTH",
    "SheetAccumulator",
    "char_to_width",
]
