"""Response envelope."""

from pyreqwest_easy.response.envelope import Envelope

__all__ = [
    "Envelope",
]
