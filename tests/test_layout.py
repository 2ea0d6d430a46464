"""Tests for layout module."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Annotated, NotRequired, Optional, TypedDict

import pytest

from xlsx_records._exceptions import AnnotationFormatError, RecordShapeError
from xlsx_records.annotations import xls
from xlsx_records.layout import container_kind, describe_record
from xlsx_records.types import LeafField, NestedField


class Inner(TypedDict):
    c: Annotated[str, xls("C")]
    d: Annotated[int, xls("D")]


class Outer(TypedDict):
    a: Annotated[str, xls("A")]
    b: Annotated[Inner, xls("ignored")]
    e: Annotated[float, xls('E,{"number_format":2}')]
    skipped: int


class Kinds(TypedDict):
    s: Annotated[str, xls("S")]
    i: Annotated[int, xls("I")]
    f: Annotated[float, xls("F")]
    b: Annotated[bool, xls("B")]
    dt: Annotated[datetime, xls("DT")]
    d: Annotated[date, xls("D")]
    t: Annotated[time, xls("T")]
    o: Annotated[date | None, xls("O")]
    legacy: Annotated[Optional[int], xls("Legacy")]
    maybe: NotRequired[Annotated[str | None, xls("Maybe")]]


@dataclass
class Point:
    x: Annotated[int, xls("X")]
    y: Annotated[int, xls("Y")]
    label: str = ""


@dataclass
class Shape:
    name: Annotated[str, xls("Name")]
    origin: Point


class EmptyTag(TypedDict):
    a: Annotated[str, xls("")]
    b: Annotated[str, xls("B")]


class ListColumn(TypedDict):
    items: Annotated[list[int], xls("Items")]


class OptionalNested(TypedDict):
    inner: Annotated[Inner | None, xls("Inner")]


class UntaggedUnsupported(TypedDict):
    items: list[int]
    name: Annotated[str, xls("Name")]


class TwoMarkers(TypedDict):
    a: Annotated[str, xls("A"), xls("B")]


class BadOptions(TypedDict):
    a: Annotated[str, xls("A,garbage")]


class MarkerInsideOptional(TypedDict):
    a: Annotated[str, xls("A")]
    b: Optional[Annotated[int, xls("B")]]


class MarkerInsideUnion(TypedDict):
    b: Annotated[int, xls("B")] | None


class UnionColumn(TypedDict):
    a: Annotated[int | str, xls("A")]


class Node(TypedDict):
    name: Annotated[str, xls("Name")]
    child: Node


class NotARecord:
    a: Annotated[str, xls("A")]


def _leaf(field: LeafField | NestedField) -> LeafField:
    assert field["kind"] != "nested"
    return field


def _nested(field: LeafField | NestedField) -> NestedField:
    assert field["kind"] == "nested"
    return field


def test_container_kind() -> None:
    assert container_kind(Outer) == "typeddict"
    assert container_kind(Point) == "dataclass"
    assert container_kind(NotARecord) is None
    assert container_kind(dict) is None
    assert container_kind(Point(1, 2)) is None


def test_describe_record_nested_order_and_skips() -> None:
    layout = describe_record(Outer)
    assert layout["type_name"] == "Outer"
    assert layout["container"] == "typeddict"
    assert [f["name"] for f in layout["fields"]] == ["a", "b", "e"]

    nested = _nested(layout["fields"][1])
    assert [f["name"] for f in nested["layout"]["fields"]] == ["c", "d"]

    e = _leaf(layout["fields"][2])
    assert e["annotation"] == {"heading": "E", "style": {"number_format": 2}}


def test_describe_record_kinds() -> None:
    layout = describe_record(Kinds)
    kinds = [(_leaf(f)["kind"], _leaf(f)["value_kind"]) for f in layout["fields"]]
    assert kinds == [
        ("string", "string"),
        ("integer", "integer"),
        ("float", "float"),
        ("boolean", "boolean"),
        ("datetime", "datetime"),
        ("datetime", "datetime"),
        ("datetime", "datetime"),
        ("optional", "datetime"),
        ("optional", "integer"),
        ("optional", "string"),
    ]


def test_describe_record_dataclass() -> None:
    layout = describe_record(Shape)
    assert layout["container"] == "dataclass"
    origin = _nested(layout["fields"][1])
    assert origin["layout"]["container"] == "dataclass"
    assert [f["name"] for f in origin["layout"]["fields"]] == ["x", "y"]


def test_describe_record_empty_tag_is_skipped() -> None:
    layout = describe_record(EmptyTag)
    assert [f["name"] for f in layout["fields"]] == ["b"]


def test_describe_record_untagged_unsupported_type_is_skipped() -> None:
    layout = describe_record(UntaggedUnsupported)
    assert [f["name"] for f in layout["fields"]] == ["name"]


@pytest.mark.parametrize("record_type", [ListColumn, OptionalNested, UnionColumn])
def test_describe_record_unsupported_column_type(record_type: type) -> None:
    with pytest.raises(RecordShapeError):
        describe_record(record_type)


def test_describe_record_two_markers() -> None:
    with pytest.raises(RecordShapeError) as exc_info:
        describe_record(TwoMarkers)
    assert exc_info.value.context == "TwoMarkers.a"


def test_describe_record_bad_options() -> None:
    with pytest.raises(AnnotationFormatError):
        describe_record(BadOptions)


def test_describe_record_recursive_type() -> None:
    with pytest.raises(RecordShapeError) as exc_info:
        describe_record(Node)
    assert "recursive" in exc_info.value.message


@pytest.mark.parametrize("record_type", [NotARecord, dict, int, "Outer"])
def test_describe_record_not_a_record(record_type: object) -> None:
    with pytest.raises(RecordShapeError):
        describe_record(record_type)


@pytest.mark.parametrize("record_type", [MarkerInsideOptional, MarkerInsideUnion])
def test_describe_record_marker_inside_union_raises(record_type: type) -> None:
    with pytest.raises(RecordShapeError) as exc_info:
        describe_record(record_type)
    assert exc_info.value.context == f"{record_type.__qualname__}.b"
    assert "whole field type" in exc_info.value.message
