"""Request payload normalization."""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

from pyreqwest_easy.types import UNDEFINED

_T = TypeVar("_T")


class NormalizeOptions(BaseModel):
    """Payload normalization flags. A `None` field is unset and inherits from the layer below it."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    trim: bool | None = None
    """Strip leading and trailing whitespace from strings."""
    drop_undefined: bool | None = None
    """Remove mapping entries and sequence items whose value is `UNDEFINED`."""
    empty_string_to_null: bool | None = None
    """Convert empty strings to `None`. Applied after trimming."""

    def merged(self, override: "NormalizeOptions | None") -> "NormalizeOptions":
        """Shallow merge, fields set on `override` win field by field."""
        if override is None:
            return self
        return self.model_copy(update=override.model_dump(exclude_none=True))


STANDALONE_DEFAULTS = NormalizeOptions(trim=True, drop_undefined=False, empty_string_to_null=False)
INTERCEPTOR_DEFAULTS = NormalizeOptions(trim=False, drop_undefined=False, empty_string_to_null=False)


def normalize_payload(
    payload: _T,
    options: NormalizeOptions | None = None,
    *,
    defaults: NormalizeOptions = STANDALONE_DEFAULTS,
) -> _T:
    """Normalize a request payload tree of plain dicts, lists and tuples.

    Trims strings by default when called directly. Other objects (dataclasses, datetimes, bytes, streams...)
    are returned untouched. The input is never mutated.

    Args:
        payload: Body or query to normalize
        options: Flags, unset fields fall back to `defaults`
        defaults: Base flags. The request interceptor passes `INTERCEPTOR_DEFAULTS`, which do not trim.
    """
    return _normalize(payload, defaults.merged(options))


def _is_container(value: Any) -> bool:
    return type(value) in (dict, list, tuple)


def _normalize(value: Any, opts: NormalizeOptions) -> Any:
    if isinstance(value, str):
        text = value.strip() if opts.trim else value
        if opts.empty_string_to_null and text == "":
            return None
        return text

    if not _is_container(value):
        return value

    if isinstance(value, dict):
        out: dict[Any, Any] = {}
        for key, item in value.items():
            normalized = _normalize(item, opts)
            if opts.drop_undefined and normalized is UNDEFINED:
                continue
            out[key] = normalized
        return out

    items = [_normalize(item, opts) for item in value]
    if opts.drop_undefined:
        items = [item for item in items if item is not UNDEFINED]
    return type(value)(items)


def strip_undefined(value: Any) -> Any:
    """Prepare a payload for JSON encoding: `UNDEFINED` mapping entries are dropped, sequence items become `None`."""
    if isinstance(value, Mapping):
        return {key: strip_undefined(item) for key, item in value.items() if item is not UNDEFINED}
    if isinstance(value, list | tuple):
        return [None if item is UNDEFINED else strip_undefined(item) for item in value]
    return value
