"""Client and interceptor runtime."""

from pyreqwest_easy.client.client import DEFAULT_TIMEOUT, Interceptors, RequestClient
from pyreqwest_easy.client.interceptors import Interceptor, InterceptorManager, run_chain

__all__ = [
    "DEFAULT_TIMEOUT",
    "Interceptor",
    "InterceptorManager",
    "Interceptors",
    "RequestClient",
    "run_chain",
]
