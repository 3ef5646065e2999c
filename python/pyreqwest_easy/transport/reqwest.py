from typing import Any

import orjson
from pyreqwest.client import Client, ClientBuilder
from pyreqwest.exceptions import ConnectError, ConnectTimeoutError, PoolTimeoutError, ReadTimeoutError
from pyreqwest.request import RequestBuilder
from pyreqwest.response import Response

from pyreqwest_easy.request import Call
from pyreqwest_easy.response import Envelope
from pyreqwest_easy.transport.errors import network_failure, raise_for_status, timeout_failure
from pyreqwest_easy.types import ResponseType
from pyreqwest_easy.utils.normalize import strip_undefined
from pyreqwest_easy.utils.params import stringify_params

JSON_CONTENT_TYPE = "application/json"


class PyreqwestTransport:
    """Transport sending calls through a pyreqwest client."""

    def __init__(self, client: Client | None = None) -> None:
        """Initialize the transport.

        Args:
            client: pyreqwest client to send with. A default client is built (and owned) when omitted.
        """
        self._owns_client = client is None
        self._client = client if client is not None else ClientBuilder().error_for_status(False).build()

    @property
    def client(self) -> Client:
        return self._client

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.close()

    async def __call__(self, call: Call) -> Envelope:
        builder = self._client.request(call.method, build_url(call))
        headers = dict(call.headers)
        builder = self._with_body(builder, call.body, headers)
        if headers:
            builder = builder.headers(headers)
        if call.timeout is not None:
            builder = builder.timeout(call.timeout)

        try:
            response = await builder.build().send()
            body = await self._read_body(response, call.options.response_type)
        except (ConnectTimeoutError, ReadTimeoutError, PoolTimeoutError) as exc:
            raise timeout_failure(call) from exc
        except ConnectError as exc:
            raise network_failure(call) from exc

        envelope = Envelope(
            call=call,
            status=response.status,
            headers={name.lower(): value for name, value in response.headers.items()},
            body=body,
        )
        return raise_for_status(envelope)

    def _with_body(self, builder: RequestBuilder, body: Any, headers: dict[str, str]) -> RequestBuilder:
        if body is None:
            return builder
        if isinstance(body, bytes | bytearray | memoryview):
            return builder.body_bytes(bytes(body))
        if isinstance(body, str):
            return builder.body_text(body)
        if not any(name.lower() == "content-type" for name in headers):
            headers["Content-Type"] = JSON_CONTENT_TYPE
        return builder.body_bytes(orjson.dumps(strip_undefined(body)))

    async def _read_body(self, response: Response, response_type: ResponseType | None) -> Any:
        if response_type == "bytes":
            content = (await response.bytes()).to_bytes()
            return content or None

        text = await response.text()
        if not text:
            return None
        if response_type == "text":
            return text
        if response_type == "json" or JSON_CONTENT_TYPE in (response.headers.get("content-type") or ""):
            try:
                return orjson.loads(text)
            except orjson.JSONDecodeError:
                return text
        return text


def build_url(call: Call) -> str:
    """Full call URL with its query serialized by the call's params serializer (or bracket arrays by default)."""
    url = call.full_url
    if not call.query:
        return url
    if call.params_serializer is not None:
        query_string = call.params_serializer(call.query)
    else:
        query_string = stringify_params(call.query, "brackets")
    if not query_string:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query_string}"
