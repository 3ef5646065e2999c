"""Types used in the pytest plugin."""

from collections.abc import Awaitable, Callable
from re import Pattern
from typing import Any

from pyreqwest_easy.request import Call

Matcher = str | Pattern[str] | Any
"""Exact string, compiled regex (full match), or any object compared with `==` (e.g. dirty-equals matchers)."""
MethodMatcher = Matcher
PathMatcher = Matcher
CustomMatcher = Callable[[Call], bool]
CustomHandler = Callable[[Call], Awaitable[Any]]
"""Async handler producing the reply of a call. Returning a `Reply` sends it, raising fails the call."""
