"""Workbook built from annotated records.

Example::

    class Order(TypedDict):
        number: Annotated[int, xls('Number,{"number_format":2}')]
        name: Annotated[str, xls("Name")]

    wb = Workbook()
    wb.create_sheet("orders")
    wb.remove_sheet("Sheet1")
    wb.write_row("orders", Order(number=1, name="a"), Order)
    wb.close(Path("orders.xlsx"))
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from xlsx_records._exceptions import SheetError, WorkbookClosedError, WriterError
from xlsx_records._protocols.openpyxl import WorkbookProtocol, _create_workbook
from xlsx_records.layout import describe_record
from xlsx_records.logging import get_logger
from xlsx_records.settings import WorkbookSettings, default_settings
from xlsx_records.sheet import SheetAccumulator
from xlsx_records.types import RecordLayout

_logger = get_logger(__name__)

SHEET_NAME_MAX_LENGTH = 31
_INVALID_SHEET_CHARS = frozenset(":\\/?*[]")


def validate_sheet_name(name: str) -> None:
    """Check a sheet name against the rules of the file format.

    Raises:
        SheetError: If the name is empty, too long, contains one of
            ``: \\ / ? * [ ]`` or starts or ends with an apostrophe.
    """
    if name == "":
        raise SheetError(name, "sheet name must not be empty")
    if len(name) > SHEET_NAME_MAX_LENGTH:
        raise SheetError(name, f"sheet name longer than {SHEET_NAME_MAX_LENGTH} characters")
    bad = sorted(_INVALID_SHEET_CHARS.intersection(name))
    if bad:
        raise SheetError(name, f"sheet name contains invalid characters {''.join(bad)!r}")
    if name.startswith("'") or name.endswith("'"):
        raise SheetError(name, "sheet name must not start or end with an apostrophe")


class Workbook:
    """Spreadsheet document written one record per row.

    Sheets are addressed by name, case-insensitively. Each sheet's headings
    are fixed by the first record written to it. ``close`` sizes columns,
    turns on autofilters, saves the file and ends the workbook's life.

    All methods raise exceptions on failure - no recovery or fallbacks.
    """

    def __init__(self, settings: WorkbookSettings | None = None) -> None:
        """Create an empty document holding only the default sheet.

        Args:
            settings: Behaviour switches; ``default_settings()`` if None.

        Raises:
            SheetError: If the configured default sheet name is invalid.
        """
        self._settings = settings if settings is not None else default_settings()
        validate_sheet_name(self._settings["default_sheet_name"])

        self._wb: WorkbookProtocol = _create_workbook()
        self._wb.active.title = self._settings["default_sheet_name"]

        self._sheets: dict[str, SheetAccumulator] = {}
        self._layouts: dict[type, RecordLayout] = {}
        self._closed = False

    @property
    def sheet_names(self) -> list[str]:
        return list(self._wb.sheetnames)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def settings(self) -> WorkbookSettings:
        return self._settings

    def create_sheet(self, name: str) -> None:
        """Add a sheet; does nothing if a sheet with that name exists.

        Raises:
            SheetError: If the name is invalid.
            WorkbookClosedError: If the workbook was closed.
        """
        self._ensure_open()
        validate_sheet_name(name)
        if self._find_sheet(name) is not None:
            return
        self._wb.create_sheet(title=name)
        _logger.debug("sheet created", extra={"sheet": name})

    def remove_sheet(self, name: str) -> None:
        """Delete a sheet and any rows accumulated for it.

        Raises:
            SheetError: If the sheet does not exist or is the last sheet.
            WorkbookClosedError: If the workbook was closed.
        """
        self._ensure_open()
        title = self._require_sheet(name)
        if len(self._wb.sheetnames) == 1:
            raise SheetError(title, "cannot remove the last sheet")
        self._wb.remove(self._wb[title])
        self._sheets.pop(title, None)
        _logger.debug("sheet removed", extra={"sheet": title})

    def accumulator(self, name: str) -> SheetAccumulator | None:
        """Return the write state of a sheet, or None if no row was written to it."""
        title = self._find_sheet(name)
        if title is None:
            return None
        return self._sheets.get(title)

    def layout_for(self, record_type: type) -> RecordLayout:
        """Return the cached layout of a record type, building it on first use.

        Raises:
            RecordShapeError: If record_type is not a usable record type.
            AnnotationFormatError: If one of its tags is malformed.
        """
        layout = self._layouts.get(record_type)
        if layout is None:
            layout = describe_record(record_type)
            self._layouts[record_type] = layout
        return layout

    def write_row(self, sheet_name: str, record: object, record_type: type | None = None) -> None:
        """Append a record to a sheet, writing the header row on the first call.

        Args:
            sheet_name: Name of an existing sheet.
            record: TypedDict row or dataclass instance.
            record_type: The record's TypedDict class or dataclass. Defaults to
                ``type(record)``, which only works for dataclass instances.

        Raises:
            SheetError: If the sheet does not exist.
            RecordShapeError: If the record does not fit its declared shape.
            AnnotationFormatError: If one of the record type's tags is malformed.
            SchemaMismatchError: If the record's headings differ from the sheet's.
            CellWriteError: If the document rejects a value or style.
            WorkbookClosedError: If the workbook was closed.
        """
        self._ensure_open()
        title = self._require_sheet(sheet_name)
        layout = self.layout_for(record_type if record_type is not None else type(record))

        acc = self._sheets.get(title)
        if acc is None:
            acc = SheetAccumulator(self._wb[title], self._settings)
            self._sheets[title] = acc
        acc.write(layout, record)

    def write_rows(
        self, sheet_name: str, records: Iterable[object], record_type: type | None = None
    ) -> int:
        """Append records to a sheet in order.

        Returns:
            Number of rows written.
        """
        count = 0
        for record in records:
            self.write_row(sheet_name, record, record_type)
            count += 1
        return count

    def close(self, path: Path | str) -> None:
        """Finalize every written sheet and save the document.

        The parent directory is created if needed. After a successful close
        the workbook cannot be used any more.

        Raises:
            WriterError: If the file cannot be written.
            WorkbookClosedError: If the workbook was already closed.
        """
        self._ensure_open()
        out_path = Path(path)

        for acc in self._sheets.values():
            acc.finalize()

        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            self._wb.save(out_path)
        except OSError as exc:
            raise WriterError(str(out_path), f"failed to save workbook ({exc})") from exc

        rows = sum(acc.data_rows for acc in self._sheets.values())
        self._wb.close()
        self._sheets.clear()
        self._layouts.clear()
        self._closed = True
        _logger.info("workbook saved", extra={"path": str(out_path), "rows": rows})

    def _ensure_open(self) -> None:
        if self._closed:
            raise WorkbookClosedError("workbook is closed")

    def _find_sheet(self, name: str) -> str | None:
        folded = name.casefold()
        for title in self._wb.sheetnames:
            if title.casefold() == folded:
                return title
        return None

    def _require_sheet(self, name: str) -> str:
        title = self._find_sheet(name)
        if title is None:
            raise SheetError(name, "sheet does not exist")
        return title


__all__ = [
    "SHEET_NAME_MAX_LENGTH",
    "Workbook",
    "validate_sheet_name",
]
