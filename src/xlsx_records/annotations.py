"""Field annotation tags.

A record field opts into a column by carrying an ``xls`` marker in its
``Annotated`` type hint. The tag holds the column heading and, after the
first comma, an optional JSON directive. Only ``number_format`` is supported::

    class Order(TypedDict):
        # written under column heading "Name"
        name: Annotated[str, xls("Name")]

        # written under "Number" with built-in number format 2 ("0.00")
        number: Annotated[int, xls('Number,{"number_format":2}')]

Fields without a marker are not written.
"""

from __future__ import annotations

from typing import Final

from xlsx_records._exceptions import AnnotationFormatError
from xlsx_records._json import (
    InvalidJsonError,
    JSONTypeError,
    load_json_str,
    narrow_json_to_dict,
    narrow_json_to_int,
)
from xlsx_records.types import CellStyle, ColumnAnnotation

TAG_SEPARATOR: Final = ","
NUMBER_FORMAT_KEY: Final = "number_format"


class XlsTag:
    """Marker carrying a raw annotation tag inside ``typing.Annotated``."""

    __slots__ = ("raw",)

    def __init__(self, raw: str) -> None:
        self.raw = raw

    def __repr__(self) -> str:
        return f"xls({self.raw!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, XlsTag) and other.raw == self.raw

    def __hash__(self) -> int:
        return hash(("xls", self.raw))


def xls(tag: str) -> XlsTag:
    """Create the ``Annotated`` marker for a column.

    Args:
        tag: ``"<heading>[,<options-json>]"``.

    Returns:
        Marker to place after the field type in ``Annotated``.
    """
    return XlsTag(tag)


def parse_style(tag: str, options: str) -> CellStyle:
    """Parse the options component of a tag.

    Args:
        tag: The full tag, for error reporting.
        options: Text after the first separator.

    Returns:
        CellStyle with the requested number format.

    Raises:
        AnnotationFormatError: If options is not exactly ``{"number_format": <int>}``.
    """
    try:
        parsed = narrow_json_to_dict(load_json_str(options))
    except (InvalidJsonError, JSONTypeError) as exc:
        raise AnnotationFormatError(tag, "options must be a JSON object") from exc

    if set(parsed) != {NUMBER_FORMAT_KEY}:
        raise AnnotationFormatError(tag, f"options must contain only {NUMBER_FORMAT_KEY!r}")

    try:
        number_format = narrow_json_to_int(parsed[NUMBER_FORMAT_KEY])
    except JSONTypeError as exc:
        raise AnnotationFormatError(tag, f"{NUMBER_FORMAT_KEY!r} must be an integer") from exc

    return CellStyle(number_format=number_format)


def parse_tag(tag: str) -> ColumnAnnotation:
    """Split a tag into its heading and optional style.

    Args:
        tag: ``"<heading>[,<options-json>]"``.

    Returns:
        ColumnAnnotation; style is None when the tag has no options component.

    Raises:
        AnnotationFormatError: If the options component is malformed.
    """
    heading, separator, options = tag.partition(TAG_SEPARATOR)
    if not separator:
        return ColumnAnnotation(heading=heading, style=None)
    return ColumnAnnotation(heading=heading, style=parse_style(tag, options))


__all__ = [
    "NUMBER_FORMAT_KEY",
    "TAG_SEPARATOR",
    "XlsTag",
    "parse_style",
    "parse_tag",
    "xls",
]
