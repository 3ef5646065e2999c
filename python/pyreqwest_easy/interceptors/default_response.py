"""Response envelope unwrapping."""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict

from pyreqwest_easy.client import RequestClient
from pyreqwest_easy.exceptions import BusinessFailure
from pyreqwest_easy.interceptors.accessors import FieldAccessor, SuccessCheck, as_accessor, as_success_check
from pyreqwest_easy.response import Envelope


class DefaultResponseOptions(BaseModel):
    """Describes the backend's response envelope.

    For a backend answering `{"resultCode": "SUCCESS", "data": {...}, "errorCodeDes": "..."}` use
    `code_field="resultCode"`, `data_field="data"`, `success_code="SUCCESS"`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    code_field: str | Callable[[Any], Any] = "code"
    """Body field holding the result code, or a callable reading it from the body."""
    data_field: str | Callable[[Any], Any] = "data"
    """Body field holding the payload, or a callable extracting it from the body."""
    success_code: int | str | Callable[[Any], bool] = 0
    """Result code value meaning success, or a predicate over the result code."""
    throw_when_fail: bool = True
    """Raise `BusinessFailure` when the result code is not successful."""


class ResponseUnwrapper:
    """Decides success per the configured envelope and returns the requested part of the response."""

    def __init__(self, options: DefaultResponseOptions | None = None) -> None:
        options = options or DefaultResponseOptions()
        self._code: FieldAccessor = as_accessor(options.code_field)
        self._data: FieldAccessor = as_accessor(options.data_field)
        self._success: SuccessCheck = as_success_check(options.success_code)
        self._throw_when_fail = options.throw_when_fail

    def __call__(self, envelope: Envelope) -> Any:
        response_return = envelope.call.options.response_return
        if response_return == "raw":
            return envelope

        body = envelope.body
        # 204 No Content, HEAD and other empty responses
        if body is None:
            return body

        if not self._success.check(self._code.read(body)) and self._throw_when_fail:
            raise BusinessFailure(envelope)

        if response_return == "body":
            return body
        return self._data.read(body)


def create_default_response_interceptor(client: RequestClient, options: DefaultResponseOptions | None = None) -> int:
    """Register the response unwrapper on the client.

    The result returned to the caller depends on the call's `response_return` option:
    - raw: the `Envelope` itself, without the success check
    - body: the decoded response body
    - data (or unset): the payload read with `data_field`

    Returns:
        Interceptor id, usable with `client.interceptors.response.eject`.
    """
    return client.interceptors.response.use(ResponseUnwrapper(options))
