"""Token refresh coordination for calls failing authentication."""

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, model_validator

from pyreqwest_easy.client import RequestClient
from pyreqwest_easy.exceptions import ConfigurationError, RefreshCancelledError
from pyreqwest_easy.observability import get_logger
from pyreqwest_easy.request import Call

logger = get_logger(__name__)

ReAuthenticate = Callable[[Exception], Awaitable[None]]
RefreshToken = Callable[[Exception], Awaitable[Any]]
IsAuthFailure = Callable[[Exception], bool]


class AuthenticateOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    re_authenticate: ReAuthenticate
    """Forces a new login, e.g. by redirecting to the login page. Called on terminal authentication failures."""
    refresh_enabled: bool = False
    """Refresh the token and replay the failed calls before giving up."""
    refresh_token: RefreshToken | None = None
    """Refreshes the stored credentials. Its result is ignored, raising means the refresh failed."""
    is_auth_failure: IsAuthFailure | None = None
    """Classifies a failure as an authentication failure. Defaults to HTTP status 401."""

    @model_validator(mode="after")
    def _check_refresh_token(self) -> Self:
        if self.refresh_enabled and not callable(self.refresh_token):
            raise ConfigurationError("refresh_enabled=True requires a refresh_token handler")
        return self


def is_unauthorized(failure: Exception) -> bool:
    return getattr(failure, "status", None) == 401


@dataclass
class PendingTask:
    """A call blocked while a refresh is in progress, with its continuation."""

    call: Call
    future: asyncio.Future[asyncio.Task[Any]]


class AuthenticateCoordinator:
    """Refreshes the token once for any number of concurrently failing calls and replays them.

    States are idle and refreshing. The first authentication failure while idle starts a refresh. Failures arriving
    while refreshing are queued and settle when the refresh does: on success every queued call is replayed in
    arrival order, then the call that started the refresh. On failure every queued call and the starting call are
    cancelled with `RefreshCancelledError` and `re_authenticate` runs once.

    A replayed call that fails authentication again escalates to `re_authenticate` instead of refreshing again.
    """

    def __init__(self, client: RequestClient, options: AuthenticateOptions) -> None:
        if options.refresh_enabled and not callable(options.refresh_token):
            raise ConfigurationError("refresh_enabled=True requires a refresh_token handler")
        self._client = client
        self._re_authenticate = options.re_authenticate
        self._refresh_token = options.refresh_token if options.refresh_enabled else None
        self._is_auth_failure = options.is_auth_failure or is_unauthorized

        self._refreshing = False
        self._pending: deque[PendingTask] = deque()

    @property
    def refreshing(self) -> bool:
        return self._refreshing

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def __call__(self, failure: Exception) -> Any:
        if not self._is_auth_failure(failure):
            raise failure

        call: Call | None = getattr(failure, "call", None)
        if call is None:
            raise failure

        refresh_token = self._refresh_token
        if refresh_token is None:
            await self._escalate(failure, reason="refresh_disabled")
            raise failure

        # Backend rejected the refreshed credentials too, refreshing again would loop forever
        if call.replayed:
            await self._escalate(failure, reason="replay_rejected")
            raise failure

        if self._refreshing:
            return await self._wait_for_refresh(call)

        # Must be set before the first await so near-simultaneous failures queue instead of refreshing again
        self._refreshing = True
        try:
            replay = await self._refresh(failure, call, refresh_token)
        finally:
            self._refreshing = False
            self._cancel_pending()

        return await replay

    async def _wait_for_refresh(self, call: Call) -> Any:
        future: asyncio.Future[asyncio.Task[Any]] = asyncio.get_running_loop().create_future()
        self._pending.append(PendingTask(call, future))
        replay = await future
        return await replay

    async def _refresh(self, failure: Exception, call: Call, refresh_token: RefreshToken) -> "asyncio.Task[Any]":
        logger.info("refresh_started", method=call.method, url=call.full_url)
        try:
            await refresh_token(failure)
        except Exception as exc:
            cancelled = self._cancel_pending()
            logger.error("refresh_failed", error=repr(exc), cancelled=cancelled, exc_info=exc)
            await self._escalate(failure, reason="refresh_failed")
            raise RefreshCancelledError(call=call) from exc

        replayed = 0
        while self._pending:
            task = self._pending.popleft()
            if not task.future.done():
                task.future.set_result(self._replay(task.call))
                replayed += 1
        logger.info("refresh_succeeded", replayed=replayed)
        return self._replay(call)

    def _replay(self, call: Call) -> "asyncio.Task[Any]":
        return asyncio.ensure_future(self._client.send(call.mark_replayed()))

    def _cancel_pending(self) -> int:
        cancelled = 0
        while self._pending:
            task = self._pending.popleft()
            if not task.future.done():
                task.future.set_exception(RefreshCancelledError(call=task.call))
                cancelled += 1
        return cancelled

    async def _escalate(self, failure: Exception, *, reason: str) -> None:
        logger.warning("reauthenticate", reason=reason, error=repr(failure))
        await self._re_authenticate(failure)


def create_authenticate_interceptor(client: RequestClient, options: AuthenticateOptions) -> int:
    """Register the authenticate coordinator on the client.

    Raises:
        ConfigurationError: `refresh_enabled` is set without a `refresh_token` handler.

    Returns:
        Interceptor id, usable with `client.interceptors.response.eject`.
    """
    return client.interceptors.response.use(rejected=AuthenticateCoordinator(client, options))
