from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pyreqwest_easy.request import Call


@dataclass(frozen=True)
class Envelope:
    """A completed exchange: the call that produced it, status, lower-cased headers and the decoded body.

    `body` is `None` when the response had no content.
    """

    call: Call
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300
