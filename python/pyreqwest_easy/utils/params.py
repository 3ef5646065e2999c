"""qs-compatible query string serialization."""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, assert_never
from urllib.parse import quote

from pyreqwest_easy.types import UNDEFINED, ArrayFormat, QueryParams


def stringify_params(params: QueryParams, array_format: ArrayFormat = "indices") -> str:
    """Serialize query params the way the `qs` package does with RFC 3986 encoding.

    Nested mappings use bracket keys (`a[b]=c`). Sequences follow `array_format`:
    - brackets: `a[]=1&a[]=2`
    - indices: `a[0]=1&a[1]=2`
    - repeat: `a=1&a=2`
    - comma: `a=1,2`

    `UNDEFINED` values are skipped, `None` serializes as an empty value.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        _collect(pairs, str(key), value, array_format)
    return "&".join(f"{_encode(key)}={_encode(value)}" for key, value in pairs)


def _collect(pairs: list[tuple[str, str]], prefix: str, value: Any, array_format: ArrayFormat) -> None:
    if value is UNDEFINED:
        return

    if isinstance(value, Mapping):
        for key, item in value.items():
            _collect(pairs, f"{prefix}[{key}]", item, array_format)
        return

    if isinstance(value, list | tuple):
        if array_format == "comma":
            items = [_scalar(item) for item in value if item is not UNDEFINED]
            if items:
                pairs.append((prefix, ",".join(items)))
            return
        for index, item in enumerate(value):
            _collect(pairs, _array_key(prefix, index, array_format), item, array_format)
        return

    pairs.append((prefix, _scalar(value)))


def _array_key(prefix: str, index: int, array_format: ArrayFormat) -> str:
    if array_format == "indices":
        return f"{prefix}[{index}]"
    elif array_format == "brackets":
        return f"{prefix}[]"
    elif array_format == "repeat":
        return prefix
    elif array_format == "comma":
        raise AssertionError("comma arrays are joined, not expanded")
    else:
        assert_never(array_format)


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime | date):
        return value.isoformat()
    return str(value)


def _encode(text: str) -> str:
    return quote(text, safe="")
