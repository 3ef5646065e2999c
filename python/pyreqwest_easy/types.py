"""Common types and interfaces used in the library."""

from collections.abc import Mapping
from typing import Any, Final, Literal

QueryParams = Mapping[str, Any]

ResponseReturn = Literal["raw", "body", "data"]
ResponseType = Literal["json", "text", "bytes"]
ErrorMessageMode = Literal["message", "modal", "none"]
ArrayFormat = Literal["brackets", "indices", "repeat", "comma"]
Language = Literal["zh", "en"]


class _Undefined:
    """Marker for an absent value. `None` is a present null value."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "_Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final = _Undefined()
