from collections.abc import Generator

import pytest
import structlog

from pyreqwest_easy.client import RequestClient
from pyreqwest_easy.locale import set_global_language
from pyreqwest_easy.pytest_plugin import TransportMocker


@pytest.fixture(autouse=True)
def reset_global_language() -> Generator[None]:
    set_global_language(None)
    yield
    set_global_language(None)


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None]:
    yield
    structlog.reset_defaults()


@pytest.fixture
def client(transport_mocker: TransportMocker) -> RequestClient:
    return RequestClient(transport_mocker, base_url="http://api.example.com")
