"""Module providing a mock transport for testing pyreqwest-easy clients."""

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from re import Pattern
from typing import Any, Self
from urllib.parse import urlsplit

import pytest

from pyreqwest_easy.pytest_plugin.types import CustomHandler, CustomMatcher, Matcher, MethodMatcher, PathMatcher
from pyreqwest_easy.request import Call
from pyreqwest_easy.response import Envelope
from pyreqwest_easy.transport.errors import network_failure, raise_for_status, timeout_failure


@dataclass(frozen=True)
class Reply:
    """Canned response of a mock rule."""

    status: int = 200
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)


class _NetworkError:
    pass


class _Timeout:
    pass


_Outcome = Reply | _NetworkError | _Timeout | CustomHandler


def _matches(matcher: Matcher, value: Any) -> bool:
    if isinstance(matcher, Pattern):
        return isinstance(value, str) and matcher.fullmatch(value) is not None
    return bool(matcher == value)


class Mock:
    """Class representing a single mock rule."""

    def __init__(self, method: MethodMatcher | None = None, path: PathMatcher | None = None) -> None:
        """Do not use directly. Instead, use TransportMocker.mock()."""
        self._method_matcher = method.upper() if isinstance(method, str) else method
        self._path_matcher = path
        self._header_matchers: dict[str, Matcher] = {}
        self._body_matcher: Matcher | None = None
        self._custom_matcher: CustomMatcher | None = None

        self._once: deque[_Outcome] = deque()
        self._outcome: _Outcome = Reply()
        self._matched_calls: list[Call] = []

    def assert_called(
        self,
        *,
        count: int | None = None,
        min_count: int | None = None,
        max_count: int | None = None,
    ) -> None:
        """Assert that this mock was called the expected number of times. By default, exactly once."""
        if count is None and min_count is None and max_count is None:
            count = 1

        actual_count = len(self._matched_calls)
        if count is not None:
            passes = actual_count == count
            expected = f"exactly {count}"
        else:
            passes = (min_count is None or actual_count >= min_count) and (
                max_count is None or actual_count <= max_count
            )
            bounds = []
            if min_count is not None:
                bounds.append(f"at least {min_count}")
            if max_count is not None:
                bounds.append(f"at most {max_count}")
            expected = " and ".join(bounds)

        if not passes:
            msg = f"Mock {self!r} was not called as expected. Expected {expected} call(s), but got {actual_count}."
            raise AssertionError(msg)

    def get_calls(self) -> list[Call]:
        """Get all captured calls by this mock."""
        return [*self._matched_calls]

    def get_call_count(self) -> int:
        """Get the total number of calls to this mock."""
        return len(self._matched_calls)

    def reset_calls(self) -> None:
        """Reset all captured calls for this mock."""
        self._matched_calls.clear()

    def match_header(self, name: str, value: Matcher) -> Self:
        """Set a matcher to match a specific request header (case-insensitive name)."""
        self._header_matchers[name.lower()] = value
        return self

    def match_body(self, matcher: Matcher) -> Self:
        """Set a matcher to match the call body as passed to the transport."""
        self._body_matcher = matcher
        return self

    def match_call(self, matcher: CustomMatcher) -> Self:
        """Set a custom matcher to match calls."""
        self._custom_matcher = matcher
        return self

    def reply(self, status: int = 200, body: Any = None, headers: Mapping[str, str] | None = None) -> Self:
        """Set the response sent for every matched call once the queued replies are used up."""
        self._outcome = Reply(status, body, dict(headers or {}))
        return self

    def reply_once(self, status: int = 200, body: Any = None, headers: Mapping[str, str] | None = None) -> Self:
        """Queue a response sent for a single matched call."""
        self._once.append(Reply(status, body, dict(headers or {})))
        return self

    def network_error_once(self) -> Self:
        """Queue a connection failure for a single matched call."""
        self._once.append(_NetworkError())
        return self

    def timeout_once(self) -> Self:
        """Queue a timeout for a single matched call."""
        self._once.append(_Timeout())
        return self

    def with_handler(self, handler: CustomHandler) -> Self:
        """Produce responses with a custom async handler, used once the queued replies are used up."""
        self._outcome = handler
        return self

    def _matches(self, call: Call) -> bool:
        if self._method_matcher is not None and not _matches(self._method_matcher, call.method):
            return False
        if self._path_matcher is not None and not _matches(self._path_matcher, urlsplit(call.full_url).path):
            return False
        headers = {name.lower(): value for name, value in call.headers.items()}
        for name, matcher in self._header_matchers.items():
            if name not in headers or not _matches(matcher, headers[name]):
                return False
        if self._body_matcher is not None and not _matches(self._body_matcher, call.body):
            return False
        return self._custom_matcher is None or bool(self._custom_matcher(call))

    async def _handle(self, call: Call) -> Envelope | None:
        if not self._matches(call):
            return None
        self._matched_calls.append(call)

        outcome = self._once.popleft() if self._once else self._outcome
        if isinstance(outcome, _NetworkError):
            raise network_failure(call)
        if isinstance(outcome, _Timeout):
            raise timeout_failure(call)
        if not isinstance(outcome, Reply):
            outcome = await outcome(call)
            assert isinstance(outcome, Reply), "Custom handler must return a Reply"

        envelope = Envelope(
            call=call,
            status=outcome.status,
            headers={name.lower(): value for name, value in outcome.headers.items()},
            body=outcome.body,
        )
        return raise_for_status(envelope)

    def __repr__(self) -> str:
        return f"Mock(method={self._method_matcher!r}, path={self._path_matcher!r})"


class TransportMocker:
    """Transport answering calls from mock rules. Pass it as the client transport."""

    def __init__(self) -> None:
        """Initialize the TransportMocker."""
        self._mocks: list[Mock] = []
        self._unmatched_calls: list[Call] = []
        self._strict = False

    async def __call__(self, call: Call) -> Envelope:
        for mock in self._mocks:
            if (envelope := await mock._handle(call)) is not None:
                return envelope

        # No rule matched
        self._unmatched_calls.append(call)
        if self._strict:
            msg = f"No mock rule matched call: {call.method} {call.full_url}"
            raise AssertionError(msg)
        return raise_for_status(Envelope(call=call, status=404, headers={}))

    def mock(self, method: MethodMatcher | None = None, path: PathMatcher | None = None) -> Mock:
        """Add a mock rule for calls matching the given criteria. Rules are tried in the order they were added."""
        mock = Mock(method, path)
        self._mocks.append(mock)
        return mock

    def get(self, path: PathMatcher | None = None) -> Mock:
        """Mock GET calls to the given path."""
        return self.mock("GET", path)

    def post(self, path: PathMatcher | None = None) -> Mock:
        """Mock POST calls to the given path."""
        return self.mock("POST", path)

    def put(self, path: PathMatcher | None = None) -> Mock:
        """Mock PUT calls to the given path."""
        return self.mock("PUT", path)

    def patch(self, path: PathMatcher | None = None) -> Mock:
        """Mock PATCH calls to the given path."""
        return self.mock("PATCH", path)

    def delete(self, path: PathMatcher | None = None) -> Mock:
        """Mock DELETE calls to the given path."""
        return self.mock("DELETE", path)

    def strict(self, enabled: bool = True) -> Self:
        """Enable strict mode - unmatched calls fail the test instead of getting a 404 response."""
        self._strict = enabled
        return self

    def get_calls(self) -> list[Call]:
        """Get all captured calls in all mocks."""
        return [call for mock in self._mocks for call in mock.get_calls()]

    def get_unmatched_calls(self) -> list[Call]:
        """Get calls no mock rule matched."""
        return [*self._unmatched_calls]

    def get_call_count(self) -> int:
        """Get the total number of calls in all mocks."""
        return sum(mock.get_call_count() for mock in self._mocks)

    def clear(self) -> None:
        """Remove all mocks."""
        self._mocks.clear()

    def reset_calls(self) -> None:
        """Reset all captured calls in all mocks."""
        self._unmatched_calls.clear()
        for mock in self._mocks:
            mock.reset_calls()


@pytest.fixture
def transport_mocker() -> TransportMocker:
    """Fixture that provides a TransportMocker to use as the transport of clients under test."""
    return TransportMocker()
