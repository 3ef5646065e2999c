"""Stateless helpers."""

from pyreqwest_easy.utils.normalize import NormalizeOptions, normalize_payload, strip_undefined
from pyreqwest_easy.utils.params import stringify_params

__all__ = [
    "NormalizeOptions",
    "normalize_payload",
    "stringify_params",
    "strip_undefined",
]
