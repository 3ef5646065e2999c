"""Assembles a RequestClient with the standard interceptor stack."""

from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from pyreqwest_easy.client import DEFAULT_TIMEOUT, RequestClient
from pyreqwest_easy.interceptors import (
    AuthenticateOptions,
    DefaultRequestOptions,
    DefaultResponseOptions,
    ErrorMessageOptions,
    ParamsSerializerOptions,
    create_authenticate_interceptor,
    create_default_request_interceptor,
    create_default_response_interceptor,
    create_error_message_interceptor,
    create_params_serializer_interceptor,
)
from pyreqwest_easy.request import Call, CallOptions
from pyreqwest_easy.response import Envelope
from pyreqwest_easy.transport import PyreqwestTransport

DEFAULT_HEADERS = {"Content-Type": "application/json;charset=utf-8"}
DEFAULT_CALL_OPTIONS = CallOptions(response_return="body", error_message_mode="message")


class RequestClientConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    base_url: str | None = None
    """Prefix for relative call URLs."""
    timeout: timedelta = DEFAULT_TIMEOUT
    """Timeout for calls that do not set their own."""
    headers: dict[str, str] = Field(default_factory=dict)
    """Default headers. Override the default JSON content type."""
    defaults: CallOptions | None = None
    """Default call options, merged over `response_return="body"` and `error_message_mode="message"`."""
    default_request: bool | DefaultRequestOptions = False
    """Register the default request interceptor. `True` uses default options."""
    default_response: Literal[False] | DefaultResponseOptions = False
    """Options of the response unwrapper. Not registered when `False`."""
    authenticate: Callable[[RequestClient], AuthenticateOptions] | None = None
    """Factory building the authenticate options. Receives the client so refresh handlers can use it."""
    error_message: ErrorMessageOptions | None = None
    """Register the error presenter."""
    params_serializer: bool | ParamsSerializerOptions = False
    """Register the query string serializer. `True` uses default options."""
    setup: Callable[[RequestClient], Any] | None = None
    """Called last with the assembled client, e.g. to register an interceptor adding the auth token."""
    transport: Callable[[Call], Awaitable[Envelope]] | None = None
    """Transport to send calls with. A `PyreqwestTransport` is created when omitted."""


def create_request_client(config: RequestClientConfig | None = None) -> RequestClient:
    """Create a client with the interceptors enabled by the config.

    Interceptors are registered in order: params serializer, default request, default response, authenticate,
    error message, then `setup` runs. Request interceptors run in reverse registration order, so an interceptor
    registered by `setup` sees calls before the built-in ones. Response interceptors run in registration order, so
    a failure reaches the authenticate coordinator before the error presenter.

    Raises:
        ConfigurationError: The authenticate options enable refreshing without a `refresh_token` handler.
    """
    config = config or RequestClientConfig()

    client = RequestClient(
        config.transport or PyreqwestTransport(),
        base_url=config.base_url,
        timeout=config.timeout,
        headers=_merge_headers(DEFAULT_HEADERS, config.headers),
        defaults=DEFAULT_CALL_OPTIONS.merged(config.defaults),
    )

    if config.params_serializer is not False:
        create_params_serializer_interceptor(client, _options(config.params_serializer))
    if config.default_request is not False:
        create_default_request_interceptor(client, _options(config.default_request))
    if config.default_response is not False:
        create_default_response_interceptor(client, config.default_response)
    if config.authenticate is not None:
        create_authenticate_interceptor(client, config.authenticate(client))
    if config.error_message is not None:
        create_error_message_interceptor(client, config.error_message)
    if config.setup is not None:
        config.setup(client)

    return client


def _merge_headers(defaults: dict[str, str], headers: dict[str, str]) -> dict[str, str]:
    overridden = {name.lower() for name in headers}
    return {**{k: v for k, v in defaults.items() if k.lower() not in overridden}, **headers}


def _options(value: Any) -> Any:
    return None if value is True else value
