"""Flatten records into ordered columns.

Headings, styles and values all come from ``_iter_leaves``, so the three
projections always share the same traversal order and filtering.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from datetime import date, datetime, time, timezone

from xlsx_records._exceptions import RecordShapeError
from xlsx_records.types import (
    CellStyle,
    CellValue,
    ContainerKind,
    FlattenedCell,
    LeafField,
    LeafKind,
    RecordLayout,
)

# (field name, container kind of the owning record, owning type name)
_Step = tuple[str, ContainerKind, str]


class _Missing:
    """Sentinel for a TypedDict key that is absent from the row."""

    __slots__ = ()


_MISSING = _Missing()


def _iter_leaves(
    layout: RecordLayout, parents: tuple[_Step, ...] = ()
) -> Iterator[tuple[tuple[_Step, ...], LeafField]]:
    """Yield (path from the root record to the leaf, leaf) depth-first."""
    for field in layout["fields"]:
        step: _Step = (field["name"], layout["container"], layout["type_name"])
        if field["kind"] == "nested":
            yield from _iter_leaves(field["layout"], (*parents, step))
        else:
            yield (*parents, step), field


def _read_field(record: object, step: _Step) -> object:
    name, container, owner = step
    context = f"{owner}.{name}"
    if container == "typeddict":
        if not isinstance(record, Mapping):
            raise RecordShapeError(context, f"expected a mapping, got {type(record).__name__}")
        if name not in record:
            return _MISSING
        value: object = record[name]
        return value
    if not hasattr(record, name):
        raise RecordShapeError(context, f"{type(record).__name__} has no attribute {name!r}")
    attr: object = getattr(record, name)
    return attr


def _to_cell_value(value: object, context: str, kind: LeafKind) -> CellValue:
    """Narrow a field value to the cell value of its declared kind.

    Integers are accepted for float fields. Timezone-aware datetimes are
    converted to naive UTC.
    """
    if value is None:
        return None
    if kind == "string" and isinstance(value, str):
        return value
    if kind == "boolean" and isinstance(value, bool):
        return value
    if kind == "integer" and isinstance(value, int) and not isinstance(value, bool):
        return value
    if kind == "float" and isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if kind == "datetime":
        if isinstance(value, datetime):
            if value.tzinfo is not None and value.utcoffset() is not None:
                return value.astimezone(timezone.utc).replace(tzinfo=None)
            return value
        if isinstance(value, date):
            return value
        if isinstance(value, time):
            return value.replace(tzinfo=None)
    raise RecordShapeError(context, f"expected a {kind} value, got {type(value).__name__}")


def _leaf_value(record: object, path: tuple[_Step, ...], leaf: LeafField) -> CellValue:
    current = record
    for step in path[:-1]:
        current = _read_field(current, step)
        if current is None or isinstance(current, _Missing):
            raise RecordShapeError(f"{step[2]}.{step[0]}", "nested record is missing")

    last = path[-1]
    context = f"{last[2]}.{last[0]}"
    value = _read_field(current, last)
    if isinstance(value, _Missing):
        if leaf["kind"] != "optional":
            raise RecordShapeError(context, "required field is missing")
        return None
    return _to_cell_value(value, context, leaf["value_kind"])


def row_headings(layout: RecordLayout) -> list[str]:
    """Return the column headings of a layout."""
    return [leaf["annotation"]["heading"] for _, leaf in _iter_leaves(layout)]


def row_styles(layout: RecordLayout) -> list[CellStyle | None]:
    """Return the per-column styles of a layout; None where a column has no style."""
    return [leaf["annotation"]["style"] for _, leaf in _iter_leaves(layout)]


def row_values(layout: RecordLayout, record: object) -> list[CellValue]:
    """Return the cell values of one record.

    Raises:
        RecordShapeError: If a nested record is None, a required key is
            missing, or a value does not match its declared kind.
    """
    return [_leaf_value(record, path, leaf) for path, leaf in _iter_leaves(layout)]


def flatten_record(layout: RecordLayout, record: object) -> list[FlattenedCell]:
    """Return (heading, style, value) triples of one record in column order."""
    return [
        FlattenedCell(
            heading=leaf["annotation"]["heading"],
            style=leaf["annotation"]["style"],
            value=_leaf_value(record, path, leaf),
        )
        for path, leaf in _iter_leaves(layout)
    ]


__all__ = [
    "flatten_record",
    "row_headings",
    "row_styles",
    "row_values",
]
