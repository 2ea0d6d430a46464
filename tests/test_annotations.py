"""Tests for annotations module."""

from __future__ import annotations

import pytest

from xlsx_records._exceptions import AnnotationFormatError
from xlsx_records.annotations import XlsTag, parse_style, parse_tag, xls


def test_xls_creates_marker() -> None:
    tag = xls("Name")
    assert isinstance(tag, XlsTag)
    assert tag.raw == "Name"
    assert tag == xls("Name")
    assert hash(tag) == hash(xls("Name"))
    assert tag != xls("Other")
    assert repr(tag) == "xls('Name')"


def test_parse_tag_heading_only() -> None:
    result = parse_tag("Name")
    assert result == {"heading": "Name", "style": None}


def test_parse_tag_with_number_format() -> None:
    result = parse_tag('Number,{"number_format":2}')
    assert result == {"heading": "Number", "style": {"number_format": 2}}


def test_parse_tag_allows_json_whitespace() -> None:
    result = parse_tag('Pointer to Date,{"number_format": 14}')
    assert result["heading"] == "Pointer to Date"
    assert result["style"] == {"number_format": 14}


def test_parse_tag_empty_heading() -> None:
    result = parse_tag(',{"number_format":1}')
    assert result["heading"] == ""
    assert result["style"] == {"number_format": 1}


def test_parse_tag_garbage_options_raises() -> None:
    with pytest.raises(AnnotationFormatError) as exc_info:
        parse_tag("Name,garbage")
    assert exc_info.value.tag == "Name,garbage"


def test_parse_tag_trailing_comma_raises() -> None:
    with pytest.raises(AnnotationFormatError):
        parse_tag("Name,")


@pytest.mark.parametrize(
    "options",
    [
        "[2]",
        '{"number_format":"2"}',
        '{"number_format":2.5}',
        '{"number_format":true}',
        '{"number_format":2,"bold":true}',
        '{"font":"bold"}',
        "{}",
    ],
)
def test_parse_style_rejects_other_shapes(options: str) -> None:
    with pytest.raises(AnnotationFormatError):
        parse_style(f"X,{options}", options)


def test_parse_style_accepts_number_format() -> None:
    assert parse_style("X", '{"number_format":22}') == {"number_format": 22}
