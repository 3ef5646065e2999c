from datetime import timedelta

import pytest

from pyreqwest_easy.client import RequestClient
from pyreqwest_easy.interceptors import (
    DefaultRequestInterceptor,
    DefaultRequestOptions,
    create_default_request_interceptor,
)
from pyreqwest_easy.pytest_plugin import TransportMocker
from pyreqwest_easy.request import Call, CallOptions
from pyreqwest_easy.types import UNDEFINED
from pyreqwest_easy.utils import NormalizeOptions


@pytest.fixture
def client(transport_mocker: TransportMocker) -> RequestClient:
    return RequestClient(transport_mocker, base_url="http://api.example.com", timeout=timedelta(seconds=5))


def download(timeout: timedelta | None) -> Call:
    return Call(url="/file", timeout=timeout, options=CallOptions(response_type="bytes"))


def test_download_timeout_extended(client: RequestClient):
    interceptor = DefaultRequestInterceptor(client)
    call = interceptor(client.prepare(download(None)))
    assert call.timeout == timedelta(seconds=50)


def test_download_timeout_custom_extension(client: RequestClient):
    seen: list[tuple[timedelta, str]] = []

    def extend(base: timedelta, call: Call) -> timedelta:
        seen.append((base, call.full_url))
        return base + timedelta(minutes=1)

    interceptor = DefaultRequestInterceptor(client, DefaultRequestOptions(extend_timeout_when_download=extend))
    call = interceptor(client.prepare(download(None)))

    assert call.timeout == timedelta(seconds=65)
    assert seen == [(timedelta(seconds=5), "http://api.example.com/file")]


def test_download_timeout_kept_when_set_on_call(client: RequestClient):
    interceptor = DefaultRequestInterceptor(client)
    call = interceptor(client.prepare(download(timedelta(seconds=7))))
    assert call.timeout == timedelta(seconds=7)


def test_download_timeout_extension_disabled(client: RequestClient):
    interceptor = DefaultRequestInterceptor(client, DefaultRequestOptions(extend_timeout_when_download=False))
    call = interceptor(client.prepare(download(None)))
    assert call.timeout == timedelta(seconds=5)


def test_non_download_timeout_unchanged(client: RequestClient):
    interceptor = DefaultRequestInterceptor(client)
    call = interceptor(client.prepare(Call(url="/json")))
    assert call.timeout == timedelta(seconds=5)


def test_payload_untouched_without_normalize_options(client: RequestClient):
    interceptor = DefaultRequestInterceptor(client)
    body = {"name": "  alice  ", "nick": UNDEFINED}
    call = interceptor(Call(method="POST", url="/users", body=body))
    assert call.body is body


def test_interceptor_path_does_not_trim_by_default(client: RequestClient):
    interceptor = DefaultRequestInterceptor(client, DefaultRequestOptions(normalize_payload=NormalizeOptions()))
    call = interceptor(Call(method="POST", url="/users", body={"name": "  alice  "}))
    assert call.body == {"name": "  alice  "}


def test_per_call_options_merged_over_global(client: RequestClient):
    options = DefaultRequestOptions(normalize_payload=NormalizeOptions(trim=True, drop_undefined=True))
    interceptor = DefaultRequestInterceptor(client, options)
    call = Call(
        method="POST",
        url="/users",
        body={"name": " alice ", "nick": UNDEFINED, "bio": "  "},
        query={"q": " term ", "page": UNDEFINED},
        options=CallOptions(normalize_payload=NormalizeOptions(trim=False, empty_string_to_null=True)),
    )

    call = interceptor(call)

    assert call.body == {"name": " alice ", "bio": "  "}
    assert call.query == {"q": " term "}


def test_per_call_options_without_global(client: RequestClient):
    interceptor = DefaultRequestInterceptor(client)
    call = Call(
        method="POST",
        url="/users",
        body={"name": "  ", "tags": [" a ", UNDEFINED]},
        options=CallOptions(normalize_payload=NormalizeOptions(trim=True, empty_string_to_null=True)),
    )

    call = interceptor(call)

    assert call.body == {"name": None, "tags": ["a", UNDEFINED]}


async def test_default_request_in_client(transport_mocker: TransportMocker, client: RequestClient):
    create_default_request_interceptor(
        client, DefaultRequestOptions(normalize_payload=NormalizeOptions(trim=True, drop_undefined=True))
    )
    mock = transport_mocker.post("/users").reply(201)
    transport_mocker.get("/export").reply(200, b"csv")

    await client.post("/users", body={"name": " alice ", "nick": UNDEFINED})
    await client.get("/export", options=CallOptions(response_type="bytes"))

    assert mock.get_calls()[0].body == {"name": "alice"}
    assert transport_mocker.get_calls()[1].timeout == timedelta(seconds=50)
