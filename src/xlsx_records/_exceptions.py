"""Exception hierarchy for xlsx_records library.

All exceptions propagate without recovery. Callers handle failures explicitly.
"""

from __future__ import annotations


class XlsxRecordsError(Exception):
    """Base exception for xlsx_records library.

    All library exceptions inherit from this base class.
    """


class RecordShapeError(XlsxRecordsError):
    """Raised when a record or one of its fields has an unsupported shape.

    Attributes:
        context: The record type or field being described.
        message: Description of the shape problem.
    """

    def __init__(self, context: str, message: str) -> None:
        self.context = context
        self.message = message
        super().__init__(f"{context}: {message}")


class AnnotationFormatError(XlsxRecordsError):
    """Raised when a field annotation tag cannot be parsed.

    Attributes:
        tag: The raw annotation tag.
        message: Description of the format problem.
    """

    def __init__(self, tag: str, message: str) -> None:
        self.tag = tag
        self.message = message
        super().__init__(f"{message}: {tag!r}")


class SchemaMismatchError(XlsxRecordsError):
    """Raised when a row's headings differ from those fixed by the sheet's first row.

    Attributes:
        sheet: The sheet name.
        message: Description of the mismatch.
    """

    def __init__(self, sheet: str, message: str) -> None:
        self.sheet = sheet
        self.message = message
        super().__init__(f"{message}: {sheet}")


class SheetError(XlsxRecordsError):
    """Raised when the document rejects a sheet operation.

    Attributes:
        sheet: The sheet name.
        message: Description of the failure.
    """

    def __init__(self, sheet: str, message: str) -> None:
        self.sheet = sheet
        self.message = message
        super().__init__(f"{message}: {sheet}")


class CellWriteError(XlsxRecordsError):
    """Raised when a cell value or style cannot be written.

    Attributes:
        sheet: The sheet name.
        coordinate: The cell coordinate (e.g. "B7").
        message: Description of the failure.
    """

    def __init__(self, sheet: str, coordinate: str, message: str) -> None:
        self.sheet = sheet
        self.coordinate = coordinate
        self.message = message
        super().__init__(f"{message}: {sheet}!{coordinate}")


class WriterError(XlsxRecordsError):
    """Raised when writing output fails.

    Attributes:
        path: The output path.
        message: Description of the failure.
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class WorkbookClosedError(XlsxRecordsError):
    """Raised when a workbook is used after close."""


__all__ = [
    "AnnotationFormatError",
    "CellWriteError",
    "RecordShapeError",
    "SchemaMismatchError",
    "SheetError",
    "WorkbookClosedError",
    "WriterError",
    "XlsxRecordsError",
]
