"""User-facing error messages for failed calls."""

import asyncio
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict

from pyreqwest_easy.client import RequestClient
from pyreqwest_easy.exceptions import ERR_NETWORK, ERR_TIMEOUT, RequestFailure, is_cancel
from pyreqwest_easy.locale import get_global_language, get_http_status_messages, get_messages, resolve_language
from pyreqwest_easy.observability import get_logger
from pyreqwest_easy.types import Language

logger = get_logger(__name__)

HandleErrorMessage = Callable[[Exception, str], Any]
"""Presentation callback receiving the failure and the resolved message (possibly empty).

The callback decides how to show it, typically by reading `failure.call.options.error_message_mode`.
"""

_TIMEOUT_CODES = frozenset({ERR_TIMEOUT, "ECONNABORTED"})


class ErrorMessageOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    handler: HandleErrorMessage
    """Presentation callback, may be async."""
    default_language: Language | None = None
    """Language used when neither the call nor the global setting picks one."""


def resolve_error_message(failure: Exception, language: Language) -> str:
    """Message for a failure, or an empty string when the failure is not a transport or HTTP failure."""
    if not isinstance(failure, RequestFailure):
        return ""

    messages = get_messages(language)
    message = ""
    if failure.status is not None:
        message = get_http_status_messages(language).get(failure.status, "")
    if not message and (failure.code in _TIMEOUT_CODES or "timeout" in failure.message.lower()):
        message = messages["request_timeout"]
    if not message and (failure.code == ERR_NETWORK or "Network Error" in failure.message):
        message = messages["network_error"]
    return message or messages["network_error"]


class ErrorPresenter:
    """Classifies failures and hands the resolved message to the presentation callback."""

    def __init__(self, options: ErrorMessageOptions) -> None:
        self._handler = options.handler
        self._default_language = options.default_language

    def resolve_language(self, failure: Exception) -> Language:
        call = getattr(failure, "call", None)
        call_language = call.options.error_message_language if call is not None else None
        return resolve_language(call_language, get_global_language(), self._default_language)

    async def __call__(self, failure: Exception) -> Any:
        if is_cancel(failure):
            raise failure

        message = resolve_error_message(failure, self.resolve_language(failure))
        logger.debug("error_presented", error=repr(failure), error_message=message)
        result = self._handler(failure, message)
        if asyncio.iscoroutine(result):
            await result
        raise failure


def create_error_message_interceptor(client: RequestClient, options: ErrorMessageOptions | HandleErrorMessage) -> int:
    """Register the error presenter on the client.

    Cancelled calls (including calls cancelled by a failed token refresh) are never presented.

    Returns:
        Interceptor id, usable with `client.interceptors.response.eject`.
    """
    if not isinstance(options, ErrorMessageOptions):
        options = ErrorMessageOptions(handler=options)
    return client.interceptors.response.use(rejected=ErrorPresenter(options))
