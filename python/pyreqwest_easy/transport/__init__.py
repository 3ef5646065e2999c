"""Transports that put calls on the wire."""

from pyreqwest_easy.transport.errors import network_failure, raise_for_status, timeout_failure
from pyreqwest_easy.transport.reqwest import PyreqwestTransport, build_url
from pyreqwest_easy.transport.types import Transport

__all__ = [
    "PyreqwestTransport",
    "Transport",
    "build_url",
    "network_failure",
    "raise_for_status",
    "timeout_failure",
]
