"""Record layouts built from type hints.

A layout is derived once per record type from its static type hints and then
reused for every row of that type. Record types are TypedDicts or dataclasses.
Each field is classified into the closed set of value kinds:

- ``string``, ``integer``, ``float``, ``boolean``, ``datetime`` (leaf)
- ``optional`` (``X | None`` of exactly one leaf kind)
- ``nested`` (another record type, flattened in place)

Leaf fields without an ``xls`` marker are left out of the layout. Nested
fields are always flattened and their own marker is ignored. A marker must
wrap the whole field type: ``Annotated[int, xls("B")] | None`` is rejected,
``Annotated[int | None, xls("B")]`` is not.
"""

from __future__ import annotations

import dataclasses
import types
from datetime import date, datetime, time
from typing import (
    Annotated,
    NotRequired,
    Required,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    is_typeddict,
)

from xlsx_records._exceptions import RecordShapeError
from xlsx_records.annotations import XlsTag, parse_tag
from xlsx_records.types import (
    ContainerKind,
    FieldSpec,
    LeafField,
    LeafKind,
    NestedField,
    RecordLayout,
)

# Order matters: bool before int, datetime before date
_LEAF_TYPES: tuple[tuple[type, LeafKind], ...] = (
    (bool, "boolean"),
    (int, "integer"),
    (float, "float"),
    (str, "string"),
    (datetime, "datetime"),
    (date, "datetime"),
    (time, "datetime"),
)


def _type_name(record_type: object) -> str:
    if isinstance(record_type, type):
        return record_type.__qualname__
    return repr(record_type)


def container_kind(record_type: object) -> ContainerKind | None:
    """Return how fields are read from instances of record_type, or None if it is not a record."""
    if not isinstance(record_type, type):
        return None
    if is_typeddict(record_type):
        return "typeddict"
    if dataclasses.is_dataclass(record_type):
        return "dataclass"
    return None


def _field_hints(record_type: type, container: ContainerKind) -> list[tuple[str, object]]:
    try:
        hints: dict[str, object] = get_type_hints(record_type, include_extras=True)
    except NameError as exc:
        raise RecordShapeError(_type_name(record_type), f"unresolvable type hint: {exc}") from exc

    if container == "dataclass":
        names = [f.name for f in dataclasses.fields(record_type)]
    else:
        names = list(hints)
    return [(name, hints[name]) for name in names]


def _unwrap(hint: object) -> tuple[object, list[XlsTag]]:
    """Strip Annotated/Required/NotRequired wrappers, collecting xls markers."""
    tags: list[XlsTag] = []
    current = hint
    while True:
        origin = get_origin(current)
        if origin is Annotated:
            args = get_args(current)
            tags.extend(meta for meta in args[1:] if isinstance(meta, XlsTag))
            current = args[0]
        elif origin is Required or origin is NotRequired:
            current = get_args(current)[0]
        else:
            return current, tags


def _leaf_kind(tp: object) -> LeafKind | None:
    if not isinstance(tp, type):
        return None
    for leaf_type, kind in _LEAF_TYPES:
        if issubclass(tp, leaf_type):
            return kind
    return None


def _optional_leaf_kind(tp: object) -> LeafKind | None:
    """Return the wrapped leaf kind of ``X | None``, or None if tp is not such a union."""
    origin = get_origin(tp)
    if origin is not Union and origin is not types.UnionType:
        return None
    args = get_args(tp)
    non_none = [arg for arg in args if arg is not type(None)]
    if len(non_none) != 1 or len(non_none) == len(args):
        return None
    return _leaf_kind(non_none[0])


def _has_member_tags(tp: object) -> bool:
    """Return True if a member of the union tp carries an xls marker."""
    origin = get_origin(tp)
    if origin is not Union and origin is not types.UnionType:
        return False
    return any(_unwrap(arg)[1] for arg in get_args(tp))


def _describe_leaf(context: str, name: str, base: object, tag: XlsTag) -> LeafField:
    annotation = parse_tag(tag.raw)

    kind = _leaf_kind(base)
    if kind is not None:
        return LeafField(name=name, kind=kind, value_kind=kind, annotation=annotation)

    wrapped = _optional_leaf_kind(base)
    if wrapped is not None:
        return LeafField(name=name, kind="optional", value_kind=wrapped, annotation=annotation)

    raise RecordShapeError(context, f"unsupported column type {base!r}")


def _describe(record_type: object, stack: tuple[object, ...]) -> RecordLayout:
    type_name = _type_name(record_type)
    container = container_kind(record_type)
    if container is None or not isinstance(record_type, type):
        raise RecordShapeError(type_name, "not a TypedDict or dataclass record type")
    if record_type in stack:
        raise RecordShapeError(type_name, "recursive record type")

    fields: list[FieldSpec] = []
    for name, hint in _field_hints(record_type, container):
        context = f"{type_name}.{name}"
        base, tags = _unwrap(hint)

        if container_kind(base) is not None:
            child = _describe(base, (*stack, record_type))
            fields.append(NestedField(name=name, kind="nested", layout=child))
            continue

        if _has_member_tags(base):
            raise RecordShapeError(context, "xls marker must wrap the whole field type")
        if len(tags) > 1:
            raise RecordShapeError(context, "more than one xls marker")
        if not tags or tags[0].raw == "":
            continue

        fields.append(_describe_leaf(context, name, base, tags[0]))

    return RecordLayout(type_name=type_name, container=container, fields=tuple(fields))


def describe_record(record_type: object) -> RecordLayout:
    """Build the layout of a record type.

    Args:
        record_type: A TypedDict class or dataclass type.

    Returns:
        RecordLayout describing annotated leaf fields and nested records in
        declaration order.

    Raises:
        RecordShapeError: If record_type is not a record type, or a marked
            field has a type outside the supported kinds.
        AnnotationFormatError: If a marker's options component is malformed.
    """
    return _describe(record_type, ())


__all__ = [
    "container_kind",
    "describe_record",
]
