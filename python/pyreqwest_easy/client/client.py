from collections.abc import Mapping
from dataclasses import replace
from datetime import timedelta
from typing import Any, Self

from pyreqwest_easy.client.interceptors import InterceptorManager, run_chain
from pyreqwest_easy.client.types import RequestHandler, ResponseHandler
from pyreqwest_easy.request import Call, CallOptions
from pyreqwest_easy.transport.types import Transport
from pyreqwest_easy.types import QueryParams

DEFAULT_TIMEOUT = timedelta(seconds=30)


class Interceptors:
    def __init__(self) -> None:
        self.request: InterceptorManager[RequestHandler] = InterceptorManager()
        self.response: InterceptorManager[ResponseHandler] = InterceptorManager()


class RequestClient:
    """HTTP client running every call through request and response interceptors.

    Request interceptors run in reverse registration order, response interceptors in registration order.
    `send` is also the replay path: a call resubmitted by an interceptor goes through exactly the same pipeline.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        base_url: str | None = None,
        timeout: timedelta = DEFAULT_TIMEOUT,
        headers: Mapping[str, str] | None = None,
        defaults: CallOptions | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            transport: Transport sending prepared calls
            base_url: Prefix for relative call URLs
            timeout: Timeout for calls that do not set their own
            headers: Default headers, overridden by call headers of the same name
            defaults: Default per-call options, overridden field by field by call options
        """
        self.transport = transport
        self.base_url = base_url
        self.timeout = timeout
        self.headers: dict[str, str] = dict(headers or {})
        self.defaults = defaults or CallOptions()
        self.interceptors = Interceptors()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if (aclose := getattr(self.transport, "aclose", None)) is not None:
            await aclose()

    async def send(self, call: Call) -> Any:
        """Send a call through the interceptor pipeline and return the final result."""
        request_handlers = list(self.interceptors.request)
        response_handlers = list(self.interceptors.response)

        value: Any = None
        error: Exception | None = None
        try:
            prepared = await run_chain(reversed(request_handlers), self.prepare(call))
            value = await self.transport(prepared)
        except Exception as exc:
            error = exc

        return await run_chain(response_handlers, value, error)

    def prepare(self, call: Call) -> Call:
        """Apply client defaults to a copy of the call. Preparing an already prepared call changes nothing."""
        overridden = {name.lower() for name in call.headers}
        headers = {name: value for name, value in self.headers.items() if name.lower() not in overridden}
        headers.update(call.headers)
        return replace(
            call,
            base_url=call.base_url if call.base_url is not None else self.base_url,
            headers=headers,
            timeout=call.timeout if call.timeout is not None else self.timeout,
            options=self.defaults.merged(call.options),
        )

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        query: QueryParams | None = None,
        timeout: timedelta | None = None,
        options: CallOptions | None = None,
    ) -> Any:
        call = Call(
            method=method,
            url=url,
            headers=dict(headers or {}),
            body=body,
            query=query,
            timeout=timeout,
            options=options or CallOptions(),
        )
        return await self.send(call)

    async def get(self, url: str, **kwargs: Any) -> Any:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> Any:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> Any:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> Any:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", url, **kwargs)
