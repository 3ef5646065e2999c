"""Exception classes."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pyreqwest_easy.request import Call
    from pyreqwest_easy.response import Envelope

ERR_TIMEOUT = "ETIMEDOUT"
ERR_NETWORK = "ERR_NETWORK"
ERR_BAD_RESPONSE = "ERR_BAD_RESPONSE"

REFRESH_CANCELLED_MESSAGE = "request canceled due to refresh token failure"


class EasyRequestError(Exception):
    """Base class for all pyreqwest-easy errors."""


class ConfigurationError(EasyRequestError):
    """Invalid interceptor or client configuration."""


class RequestFailure(EasyRequestError):
    """A call that did not complete with a 2xx response.

    Carries the originating call, the HTTP status (when a response was received), a transport error code
    and the completed envelope (when a response was received).
    """

    def __init__(
        self,
        call: "Call | None",
        *,
        status: int | None = None,
        code: str | None = None,
        message: str = "",
        envelope: "Envelope | None" = None,
    ) -> None:
        super().__init__(message or f"Request failed with status code {status}")
        self.call = call
        self.status = status
        self.code = code
        self.envelope = envelope

    @property
    def message(self) -> str:
        return str(self)

    @property
    def body(self) -> Any:
        """Response body of the failed call, if a response was received."""
        return None if self.envelope is None else self.envelope.body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status!r}, code={self.code!r}, message={self.message!r})"


class BusinessFailure(EasyRequestError):
    """A 2xx response whose body reports an unsuccessful result code."""

    def __init__(self, envelope: "Envelope") -> None:
        super().__init__(f"Request reported an unsuccessful result (status {envelope.status})")
        self.envelope = envelope

    @property
    def call(self) -> "Call":
        return self.envelope.call

    @property
    def status(self) -> int:
        return self.envelope.status

    @property
    def body(self) -> Any:
        return self.envelope.body


class RequestCancelledError(EasyRequestError):
    """The call was cancelled and should not be reported to the user."""

    def __init__(self, message: str = "canceled", *, call: "Call | None" = None) -> None:
        super().__init__(message)
        self.call = call


class RefreshCancelledError(RequestCancelledError):
    """The call was cancelled because the token refresh it depended on failed."""

    def __init__(self, *, call: "Call | None" = None) -> None:
        super().__init__(REFRESH_CANCELLED_MESSAGE, call=call)


def is_cancel(error: BaseException) -> bool:
    """Whether the error is a cancellation rather than a failure."""
    return isinstance(error, RequestCancelledError)
