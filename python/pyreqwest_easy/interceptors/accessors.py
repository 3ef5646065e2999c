"""String-or-callable configuration resolved into tagged unions."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldName:
    name: str

    def read(self, body: Any) -> Any:
        if isinstance(body, Mapping):
            return body.get(self.name)
        return None


@dataclass(frozen=True)
class Extractor:
    func: Callable[[Any], Any]

    def read(self, body: Any) -> Any:
        return self.func(body)


@dataclass(frozen=True)
class SuccessEquals:
    value: Any

    def check(self, code: Any) -> bool:
        # 1 and True must not compare equal
        return isinstance(code, bool) == isinstance(self.value, bool) and bool(code == self.value)


@dataclass(frozen=True)
class SuccessPredicate:
    func: Callable[[Any], bool]

    def check(self, code: Any) -> bool:
        return bool(self.func(code))


FieldAccessor = FieldName | Extractor
SuccessCheck = SuccessEquals | SuccessPredicate


def as_accessor(value: "str | Callable[[Any], Any] | FieldAccessor") -> FieldAccessor:
    if isinstance(value, FieldName | Extractor):
        return value
    if isinstance(value, str):
        return FieldName(value)
    if callable(value):
        return Extractor(value)
    raise TypeError(f"Expected a field name or a callable, got {type(value).__name__}")


def as_success_check(value: "Any | Callable[[Any], bool] | SuccessCheck") -> SuccessCheck:
    if isinstance(value, SuccessEquals | SuccessPredicate):
        return value
    if callable(value):
        return SuccessPredicate(value)
    return SuccessEquals(value)
