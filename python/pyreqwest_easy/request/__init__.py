"""Request descriptors."""

from pyreqwest_easy.request.call import Call, CallOptions

__all__ = [
    "Call",
    "CallOptions",
]
