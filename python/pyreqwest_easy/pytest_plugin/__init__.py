"""pyreqwest-easy pytest plugin for transport mocking."""

from pyreqwest_easy.pytest_plugin.mock import Mock, Reply, TransportMocker, transport_mocker

__all__ = [  # noqa: RUF022
    "transport_mocker",
    "Mock",
    "Reply",
    "TransportMocker",
]
