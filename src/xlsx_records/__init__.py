"""Strictly typed projection of annotated records into xlsx sheets.

Record types (TypedDicts or dataclasses) mark the fields to write with
``Annotated[<type>, xls("<heading>[,<options-json>]")]``. Nested records are
flattened into the parent's columns. A Workbook writes one record per row,
derives the header row from the first record of each sheet, and saves the
document through openpyxl.
"""

from __future__ import annotations

from xlsx_records._exceptions import (
    AnnotationFormatError,
    CellWriteError,
    RecordShapeError,
    SchemaMismatchError,
    SheetError,
    WorkbookClosedError,
    WriterError,
    XlsxRecordsError,
)
from xlsx_records.annotations import XlsTag, parse_tag, xls
from xlsx_records.flatten import flatten_record, row_headings, row_styles, row_values
from xlsx_records.layout import describe_record
from xlsx_records.settings import (
    LoggingSettings,
    WorkbookSettings,
    default_settings,
    load_logging_settings_from_env,
    load_settings_from_env,
    load_settings_from_toml,
)
from xlsx_records.sheet import SheetAccumulator, char_to_width
from xlsx_records.types import (
    CellStyle,
    CellValue,
    ColumnAnnotation,
    FieldSpec,
    FlattenedCell,
    LeafField,
    NestedField,
    RecordLayout,
    ValueKind,
)
from xlsx_records.workbook import Workbook, validate_sheet_name

__all__ = [
    "AnnotationFormatError",
    "CellStyle",
    "CellValue",
    "CellWriteError",
    "ColumnAnnotation",
    "FieldSpec",
    "FlattenedCell",
    "LeafField",
    "LoggingSettings",
    "NestedField",
    "RecordLayout",
    "RecordShapeError",
    "SchemaMismatchError",
    "SheetAccumulator",
    "SheetError",
    "ValueKind",
    "Workbook",
    "WorkbookClosedError",
    "WorkbookSettings",
    "WriterError",
    "XlsTag",
    "XlsxRecordsError",
    "char_to_width",
    "default_settings",
    "describe_record",
    "flatten_record",
    "load_logging_settings_from_env",
    "load_settings_from_env",
    "load_settings_from_toml",
    "parse_tag",
    "row_headings",
    "row_styles",
    "row_values",
    "validate_sheet_name",
    "xls",
]
