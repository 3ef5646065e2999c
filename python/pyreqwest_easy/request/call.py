import re
from collections.abc import Callable
from dataclasses import dataclass, field, fields, replace
from datetime import timedelta
from typing import Any, Self

from pyreqwest_easy.types import (
    ArrayFormat,
    ErrorMessageMode,
    Language,
    QueryParams,
    ResponseReturn,
    ResponseType,
)
from pyreqwest_easy.utils.normalize import NormalizeOptions

_ABSOLUTE_URL = re.compile(r"^([a-z][a-z\d+\-.]*:)?//", re.IGNORECASE)


def is_absolute_url(url: str) -> bool:
    """Whether the URL starts with a scheme (or is protocol relative)."""
    return _ABSOLUTE_URL.match(url) is not None


@dataclass(frozen=True)
class CallOptions:
    """Per-call overrides read by the interceptors. `None` means "use the client or interceptor default"."""

    response_return: ResponseReturn | None = None
    """Granularity of the unwrapped result: the raw envelope, the body, or the body's data field."""
    response_type: ResponseType | None = None
    """How the transport decodes the response body. `bytes` marks a download."""
    error_message_mode: ErrorMessageMode | None = None
    """Presentation hint for the error message handler."""
    error_message_language: Language | None = None
    """Language override for error messages of this call."""
    normalize_payload: NormalizeOptions | None = None
    """Payload normalization flags, merged over the interceptor defaults."""
    array_format: ArrayFormat | None = None
    """Query string array format, overrides the params serializer default."""

    def merged(self, override: "CallOptions | None") -> "CallOptions":
        """Field by field merge where set fields of `override` win."""
        if override is None:
            return self
        updates = {f.name: value for f in fields(override) if (value := getattr(override, f.name)) is not None}
        return replace(self, **updates)


@dataclass
class Call:
    """Outbound request descriptor.

    `replayed` is owned by the authenticate interceptor. It marks a call that was already resubmitted after a token
    refresh so that a second authentication failure escalates instead of refreshing again. Never set it yourself.
    """

    method: str = "GET"
    url: str = ""
    """URL as given by the caller, relative to `base_url` unless absolute."""
    base_url: str | None = None
    """Prefix applied to a relative `url` when the call is sent. Filled from the client defaults."""
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    query: QueryParams | None = None
    timeout: timedelta | None = None
    options: CallOptions = field(default_factory=CallOptions)
    params_serializer: Callable[[QueryParams], str] | None = field(default=None, repr=False, compare=False)
    replayed: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        self.method = self.method.upper()

    @property
    def full_url(self) -> str:
        """`url` joined to `base_url`. Absolute URLs are used as is."""
        if not self.base_url or is_absolute_url(self.url):
            return self.url
        if not self.url:
            return self.base_url
        return f"{self.base_url.rstrip('/')}/{self.url.lstrip('/')}"

    def mark_replayed(self) -> Self:
        """Copy of this call carrying the replay marker."""
        return replace(self, headers=dict(self.headers), replayed=True)
