"""Interceptor handler types."""

from collections.abc import Awaitable, Callable
from typing import Any

from pyreqwest_easy.request import Call

RequestHandler = Callable[[Call], Call | Awaitable[Call]]
"""Receives the outgoing call and returns the call to send (usually the same object)."""

ResponseHandler = Callable[[Any], Any]
"""Receives the current result (initially an `Envelope`) and returns the next one, possibly awaitable."""

RejectedHandler = Callable[[Exception], Any]
"""Receives the current failure. Returning a value recovers the chain, raising keeps it rejected."""
