"""Type definitions for record layouts and flattened rows.

A record layout is the per-type descriptor built once from a record class's
type hints. Each field is described by a tagged variant: a leaf field that
contributes one column, or a nested field whose own layout is flattened in
its place.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Literal, TypedDict

# Cell value type written to a sheet
CellValue = str | int | float | bool | datetime | date | time | None

# Scalar kinds a leaf column can hold
LeafKind = Literal["string", "integer", "float", "boolean", "datetime"]

# Closed set of field kinds
ValueKind = Literal["string", "integer", "float", "boolean", "datetime", "optional", "nested"]

# How field values are read from a record instance
ContainerKind = Literal["typeddict", "dataclass"]


class CellStyle(TypedDict):
    """Cell style derived from an annotation.

    Attributes:
        number_format: Built-in number format id.
    """

    number_format: int


class ColumnAnnotation(TypedDict):
    """Parsed field annotation."""

    heading: str
    style: CellStyle | None


class LeafField(TypedDict):
    """Field contributing exactly one column.

    Attributes:
        name: Attribute or key name on the record.
        kind: Declared kind; "optional" when the field accepts None.
        value_kind: Scalar kind of the value (the wrapped kind for optional fields).
        annotation: Heading and style of the column.
    """

    name: str
    kind: Literal["string", "integer", "float", "boolean", "datetime", "optional"]
    value_kind: LeafKind
    annotation: ColumnAnnotation


class NestedField(TypedDict):
    """Field whose own fields are flattened into the parent's columns."""

    name: str
    kind: Literal["nested"]
    layout: RecordLayout


FieldSpec = LeafField | NestedField


class RecordLayout(TypedDict):
    """Descriptor of a record type: its container kind and annotated fields in order."""

    type_name: str
    container: ContainerKind
    fields: tuple[FieldSpec, ...]


class FlattenedCell(TypedDict):
    """One (heading, style, value) triple of a flattened row."""

    heading: str
    style: CellStyle | None
    value: CellValue


__all__ = [
    "CellStyle",
    "CellValue",
    "ColumnAnnotation",
    "ContainerKind",
    "FieldSpec",
    "FlattenedCell",
    "LeafField",
    "LeafKind",
    "NestedField",
    "RecordLayout",
    "ValueKind",
]
