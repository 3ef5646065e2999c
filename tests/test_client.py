from datetime import timedelta
from typing import Any

import pytest
from dirty_equals import IsInstance

from pyreqwest_easy.client import DEFAULT_TIMEOUT, InterceptorManager, RequestClient, run_chain
from pyreqwest_easy.client.interceptors import Interceptor
from pyreqwest_easy.exceptions import RequestFailure
from pyreqwest_easy.pytest_plugin import TransportMocker
from pyreqwest_easy.request import Call, CallOptions
from pyreqwest_easy.response import Envelope


async def test_request_interceptors_run_in_reverse_order(transport_mocker: TransportMocker, client: RequestClient):
    order: list[str] = []

    def tag(name: str):
        def handler(call: Call) -> Call:
            order.append(name)
            return call

        return handler

    client.interceptors.request.use(tag("first"))
    client.interceptors.request.use(tag("second"))
    transport_mocker.get("/x").reply(200)

    await client.get("/x")

    assert order == ["second", "first"]


async def test_response_interceptors_run_in_order(transport_mocker: TransportMocker, client: RequestClient):
    client.interceptors.response.use(lambda envelope: envelope.body["value"])
    client.interceptors.response.use(lambda value: value * 2)
    transport_mocker.get("/x").reply(200, {"value": 21})

    assert await client.get("/x") == 42


async def test_async_handlers(transport_mocker: TransportMocker, client: RequestClient):
    async def add_header(call: Call) -> Call:
        call.headers["X-Trace"] = "abc"
        return call

    async def unwrap(envelope: Envelope) -> Any:
        return envelope.body

    client.interceptors.request.use(add_header)
    client.interceptors.response.use(unwrap)
    mock = transport_mocker.get("/x").match_header("x-trace", "abc").reply(200, {"ok": True})

    assert await client.get("/x") == {"ok": True}
    mock.assert_called()


async def test_rejected_handler_recovers(transport_mocker: TransportMocker, client: RequestClient):
    seen: list[Any] = []
    client.interceptors.response.use(rejected=lambda failure: {"fallback": failure.status})
    client.interceptors.response.use(lambda value: seen.append(value) or value)
    transport_mocker.get("/x").reply(503)

    assert await client.get("/x") == {"fallback": 503}
    assert seen == [{"fallback": 503}]


async def test_fulfilled_handler_raising_switches_to_rejected(
    transport_mocker: TransportMocker, client: RequestClient
):
    def explode(envelope: Envelope) -> Any:
        raise ValueError("bad payload")

    handled: list[Exception] = []

    def record(failure: Exception) -> Any:
        handled.append(failure)
        raise failure

    client.interceptors.response.use(explode)
    client.interceptors.response.use(rejected=record)
    transport_mocker.get("/x").reply(200)

    with pytest.raises(ValueError, match="bad payload"):
        await client.get("/x")
    assert handled == [IsInstance(ValueError)]


async def test_request_interceptor_failure_reaches_response_chain(
    transport_mocker: TransportMocker, client: RequestClient
):
    def reject(call: Call) -> Call:
        raise PermissionError("blocked")

    client.interceptors.request.use(reject)
    client.interceptors.response.use(rejected=lambda failure: f"recovered {failure}")
    mock = transport_mocker.get("/x").reply(200)

    assert await client.get("/x") == "recovered blocked"
    mock.assert_called(count=0)


async def test_ejected_interceptor_skipped(transport_mocker: TransportMocker, client: RequestClient):
    first = client.interceptors.response.use(lambda envelope: envelope.body["value"])
    second = client.interceptors.response.use(lambda value: ("second", value))
    transport_mocker.get("/x").reply(200, {"value": 1})

    assert await client.get("/x") == ("second", 1)

    client.interceptors.response.eject(first)
    assert await client.get("/x") == ("second", IsInstance(Envelope))

    client.interceptors.response.eject(second)
    assert await client.get("/x") == IsInstance(Envelope)


async def test_prepare_applies_defaults(transport_mocker: TransportMocker):
    client = RequestClient(
        transport_mocker,
        base_url="http://api.example.com/v1/",
        timeout=timedelta(seconds=3),
        headers={"Content-Type": "application/json", "X-App": "demo"},
        defaults=CallOptions(response_return="body", error_message_language="en"),
    )
    call = Call(
        method="post",
        url="/users",
        headers={"content-type": "text/plain"},
        options=CallOptions(response_return="data"),
    )

    prepared = client.prepare(call)

    assert prepared.method == "POST"
    assert prepared.url == "/users"
    assert prepared.full_url == "http://api.example.com/v1/users"
    assert prepared.headers == {"X-App": "demo", "content-type": "text/plain"}
    assert prepared.timeout == timedelta(seconds=3)
    assert prepared.options == CallOptions(response_return="data", error_message_language="en")
    assert call.url == "/users"


def test_prepare_keeps_absolute_urls_and_call_timeout(transport_mocker: TransportMocker):
    client = RequestClient(transport_mocker, base_url="http://api.example.com")
    call = Call(url="https://other.example.com/x", timeout=timedelta(seconds=1))

    prepared = client.prepare(call)

    assert prepared.full_url == "https://other.example.com/x"
    assert prepared.timeout == timedelta(seconds=1)
    assert client.prepare(Call()).full_url == "http://api.example.com"
    assert RequestClient(transport_mocker).timeout == DEFAULT_TIMEOUT


@pytest.mark.parametrize("base_url", ["/api", "/api/", "http://api.example.com/v1"])
def test_prepare_is_idempotent(transport_mocker: TransportMocker, base_url: str):
    client = RequestClient(transport_mocker, base_url=base_url)

    once = client.prepare(Call(url="/me"))
    twice = client.prepare(once)

    assert twice.full_url == once.full_url == f"{base_url.rstrip('/')}/me"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("/login?next=https://app.example.com/home", "http://api.example.com/login?next=https://app.example.com/home"),
        ("redirect?to=http://x.example.com", "http://api.example.com/redirect?to=http://x.example.com"),
        ("https://other.example.com/x", "https://other.example.com/x"),
        ("HTTP://other.example.com/x", "HTTP://other.example.com/x"),
        ("//cdn.example.com/a.js", "//cdn.example.com/a.js"),
    ],
)
async def test_base_url_applied_unless_url_is_absolute(
    transport_mocker: TransportMocker, client: RequestClient, url: str, expected: str
):
    transport_mocker.mock().reply(200)

    await client.get(url)

    assert transport_mocker.get_calls()[0].full_url == expected


@pytest.mark.parametrize("method", ["get", "post", "put", "patch", "delete"])
async def test_verbs(transport_mocker: TransportMocker, client: RequestClient, method: str):
    mock = transport_mocker.mock(method.upper(), "/resource").reply(200, {"method": method})

    envelope = await getattr(client, method)("/resource", body=None, query={"a": 1})

    assert envelope.body == {"method": method}
    assert mock.get_calls()[0].query == {"a": 1}


async def test_failure_raised_to_caller(transport_mocker: TransportMocker, client: RequestClient):
    transport_mocker.get("/x").reply(500, {"detail": "boom"})

    with pytest.raises(RequestFailure) as exc_info:
        await client.get("/x")

    assert exc_info.value.status == 500
    assert exc_info.value.body == {"detail": "boom"}
    assert str(exc_info.value) == "Request failed with status code 500"


async def test_aclose_closes_transport():
    closed: list[bool] = []

    class ClosingTransport:
        async def __call__(self, call: Call) -> Envelope:
            return Envelope(call=call, status=200, headers={})

        async def aclose(self) -> None:
            closed.append(True)

    async with RequestClient(ClosingTransport()) as client:
        await client.get("http://api.example.com/")

    assert closed == [True]


def test_interceptor_manager():
    manager: InterceptorManager[Any] = InterceptorManager()
    first = manager.use(len)
    second = manager.use(rejected=repr)

    assert [first, second] == [0, 1]
    assert list(manager) == [Interceptor(len), Interceptor(None, repr)]

    manager.eject(first)
    manager.eject(99)
    assert list(manager) == [Interceptor(None, repr)]
    assert manager.use(str) == 2

    manager.clear()
    assert len(manager) == 0


async def test_run_chain_raises_final_error():
    error = KeyError("x")
    with pytest.raises(KeyError):
        await run_chain([Interceptor(fulfilled=lambda v: v)], error=error)

    assert await run_chain([], value=1) == 1
