"""Transport types and interfaces."""

from typing import Protocol

from pyreqwest_easy.request import Call
from pyreqwest_easy.response import Envelope


class Transport(Protocol):
    """Sends a prepared call and returns the completed exchange."""

    async def __call__(self, call: Call) -> Envelope:
        """Send the call over the wire.

        Args:
            call: Fully prepared call (base URL applied, interceptors run)

        Returns:
            Envelope of a 2xx exchange.

        Raises:
            RequestFailure: For non-2xx statuses (with the envelope attached), timeouts and connection errors.
        """
        ...
