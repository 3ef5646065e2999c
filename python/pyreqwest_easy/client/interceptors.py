import inspect
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pyreqwest_easy.client.types import RejectedHandler

_F = TypeVar("_F", bound=Callable[..., Any])


@dataclass(frozen=True)
class Interceptor(Generic[_F]):
    fulfilled: _F | None = None
    rejected: RejectedHandler | None = None


class InterceptorManager(Generic[_F]):
    """Ordered registry of interceptors. Ids stay stable after ejection."""

    def __init__(self) -> None:
        self._handlers: list[Interceptor[_F] | None] = []

    def use(self, fulfilled: _F | None = None, rejected: RejectedHandler | None = None) -> int:
        """Register an interceptor and return its id."""
        self._handlers.append(Interceptor(fulfilled, rejected))
        return len(self._handlers) - 1

    def eject(self, interceptor_id: int) -> None:
        """Remove a previously registered interceptor. Unknown ids are ignored."""
        if 0 <= interceptor_id < len(self._handlers):
            self._handlers[interceptor_id] = None

    def clear(self) -> None:
        self._handlers.clear()

    def __iter__(self) -> Iterator[Interceptor[_F]]:
        return (handler for handler in self._handlers if handler is not None)

    def __len__(self) -> int:
        return sum(1 for _ in self)


async def run_chain(
    interceptors: Iterable[Interceptor[Any]],
    value: Any = None,
    error: Exception | None = None,
) -> Any:
    """Thread a value (or a failure) through interceptors like a chain of `promise.then(fulfilled, rejected)`.

    While fulfilled, each interceptor's `fulfilled` handler sees the current value. While rejected, the next
    `rejected` handler sees the failure and recovers the chain by returning. A handler raising switches the
    chain to rejected. A final failure is raised.
    """
    for interceptor in interceptors:
        try:
            if error is None:
                if interceptor.fulfilled is not None:
                    value = await _resolve(interceptor.fulfilled(value))
            elif interceptor.rejected is not None:
                value = await _resolve(interceptor.rejected(error))
                error = None
        except Exception as exc:
            error = exc

    if error is not None:
        raise error
    return value


async def _resolve(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result
