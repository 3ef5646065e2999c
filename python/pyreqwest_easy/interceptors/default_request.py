"""Default request interceptor: download timeouts and payload normalization."""

from collections.abc import Callable
from datetime import timedelta

from pydantic import BaseModel, ConfigDict

from pyreqwest_easy.client import RequestClient
from pyreqwest_easy.request import Call
from pyreqwest_easy.utils.normalize import INTERCEPTOR_DEFAULTS, NormalizeOptions, normalize_payload

DOWNLOAD_TIMEOUT_FACTOR = 10

ExtendTimeout = Callable[[timedelta, Call], timedelta]


class DefaultRequestOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    extend_timeout_when_download: bool | ExtendTimeout = True
    """Extend the timeout of downloads (`response_type="bytes"`) that do not set their own timeout.

    `True` multiplies the client timeout by 10, a callable receives the client timeout and the call and returns the
    new timeout.
    """
    normalize_payload: NormalizeOptions | None = None
    """Normalization applied to body and query of every call, merged under the call's own `normalize_payload`."""


class DefaultRequestInterceptor:
    def __init__(self, client: RequestClient, options: DefaultRequestOptions | None = None) -> None:
        options = options or DefaultRequestOptions()
        self._client = client
        self._extend_timeout = options.extend_timeout_when_download
        self._normalize = options.normalize_payload

    def __call__(self, call: Call) -> Call:
        self._apply_download_timeout(call)
        self._apply_normalization(call)
        return call

    def _apply_download_timeout(self, call: Call) -> None:
        if not self._extend_timeout or call.options.response_type != "bytes":
            return
        base_timeout = self._client.timeout
        # Equal to the client default means the call did not pick its own timeout
        if call.timeout != base_timeout:
            return
        if callable(self._extend_timeout):
            call.timeout = self._extend_timeout(base_timeout, call)
        else:
            call.timeout = base_timeout * DOWNLOAD_TIMEOUT_FACTOR

    def _apply_normalization(self, call: Call) -> None:
        per_call = call.options.normalize_payload
        if self._normalize is None and per_call is None:
            return
        options = self._normalize.merged(per_call) if self._normalize is not None else per_call
        # Trimming is opt-in on this path, unlike a direct normalize_payload() call
        if call.body is not None:
            call.body = normalize_payload(call.body, options, defaults=INTERCEPTOR_DEFAULTS)
        if call.query is not None:
            call.query = normalize_payload(call.query, options, defaults=INTERCEPTOR_DEFAULTS)


def create_default_request_interceptor(client: RequestClient, options: DefaultRequestOptions | None = None) -> int:
    """Register the default request interceptor on the client.

    Returns:
        Interceptor id, usable with `client.interceptors.request.eject`.
    """
    return client.interceptors.request.use(DefaultRequestInterceptor(client, options))
