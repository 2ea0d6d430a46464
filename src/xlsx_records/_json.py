"""JSON helpers used by tag parsing and structured logging."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from json import JSONDecodeError
from typing import Protocol

JSONValue = dict[str, "JSONValue"] | list["JSONValue"] | str | int | float | bool | None

_JSONInputValue = str | int | float | bool | None | Mapping[str, object] | Sequence[object]


class InvalidJsonError(ValueError):
    """Raised when JSON parsing fails."""


class JSONTypeError(TypeError):
    """Raised when JSON value has unexpected type during narrowing."""


class _JsonLoads(Protocol):
    def __call__(self, s: str) -> JSONValue: ...


class _JsonDumps(Protocol):
    def __call__(
        self,
        obj: _JSONInputValue,
        *,
        separators: tuple[str, str] | None = ...,
        indent: int | None = ...,
    ) -> str: ...


def dump_json_str(value: _JSONInputValue, *, compact: bool = True) -> str:
    """Serialize a JSON-compatible value to a JSON string.

    Args:
        value: JSON-serializable value
        compact: If True (default), produce compact JSON without extra whitespace.
    """
    module = __import__("json")
    dumps: _JsonDumps = module.dumps
    if compact:
        return dumps(value, separators=(",", ":"), indent=None)
    return dumps(value, separators=None, indent=None)


def load_json_str(raw: str) -> JSONValue:
    module = __import__("json")
    loads: _JsonLoads = module.loads
    try:
        value = loads(raw)
    except JSONDecodeError as exc:
        raise InvalidJsonError("Invalid JSON payload") from exc
    if isinstance(value, (dict, list, str, int, float, bool)) or value is None:
        return value
    raise InvalidJsonError("Invalid JSON payload")


def narrow_json_to_dict(value: JSONValue) -> dict[str, JSONValue]:
    """Narrow JSONValue to dict.

    Raises JSONTypeError if value is not a dict.
    """
    if not isinstance(value, dict):
        raise JSONTypeError(f"Expected JSON object, got {type(value).__name__}")
    return value


def narrow_json_to_int(value: JSONValue) -> int:
    """Narrow JSONValue to int.

    Raises JSONTypeError if value is not an int (excludes bool).
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise JSONTypeError(f"Expected JSON integer, got {type(value).__name__}")
    return value


__all__ = [
    "InvalidJsonError",
    "JSONTypeError",
    "JSONValue",
    "dump_json_str",
    "load_json_str",
    "narrow_json_to_dict",
    "narrow_json_to_int",
]
