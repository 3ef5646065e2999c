"""Localized error message catalog and the process-wide language setting.

The process-wide language is plain module state: set it at startup or at any time with `set_global_language`,
it is read when a failure is classified. Last write wins. Resolution order used by the error message
interceptor is per-call override, then the global language, then the interceptor default, then `DEFAULT_LANGUAGE`.
"""

from collections.abc import Mapping
from typing import Final, Literal, get_args

from pyreqwest_easy.types import Language

MessageKey = Literal[
    "request_timeout",
    "network_error",
    "bad_request",
    "unauthorized",
    "forbidden",
    "not_found",
    "internal_server_error",
]

DEFAULT_LANGUAGE: Final[Language] = "zh"
SUPPORTED_LANGUAGES: Final[tuple[Language, ...]] = get_args(Language)

HTTP_MESSAGES: Final[Mapping[Language, Mapping[MessageKey, str]]] = {
    "zh": {
        "request_timeout": "请求超时，请稍后再试。",
        "network_error": "网络异常，请检查您的网络连接后重试。",
        "bad_request": "请求错误。请检查您的输入并重试。",
        "unauthorized": "登录认证过期，请重新登录后继续。",
        "forbidden": "禁止访问, 您没有权限访问此资源。",
        "not_found": "未找到, 请求的资源不存在。",
        "internal_server_error": "内部服务器错误，请稍后再试。",
    },
    "en": {
        "request_timeout": "Request timeout, please try again later.",
        "network_error": "Network error, please check your network connection and try again.",
        "bad_request": "Bad request. Please check your input and try again.",
        "unauthorized": "Authentication expired, please log in again to continue.",
        "forbidden": "Access forbidden, you do not have permission to access this resource.",
        "not_found": "Not found, the requested resource does not exist.",
        "internal_server_error": "Internal server error, please try again later.",
    },
}

_STATUS_KEYS: Final[Mapping[int, MessageKey]] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    408: "request_timeout",
}

_global_language: Language | None = None


def set_global_language(language: Language | None) -> None:
    """Set the process-wide message language. `None` clears it."""
    global _global_language
    if language is not None and language not in SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language {language!r}, expected one of {SUPPORTED_LANGUAGES}")
    _global_language = language


def get_global_language() -> Language | None:
    """Get the process-wide message language, `None` when unset."""
    return _global_language


def get_messages(language: Language = DEFAULT_LANGUAGE) -> Mapping[MessageKey, str]:
    return HTTP_MESSAGES[language]


def get_http_status_messages(language: Language = DEFAULT_LANGUAGE) -> dict[int, str]:
    """Status code to message mapping for the given language."""
    messages = HTTP_MESSAGES[language]
    return {status: messages[key] for status, key in _STATUS_KEYS.items()}


def resolve_language(*candidates: Language | None) -> Language:
    """First non-empty candidate, falling back to `DEFAULT_LANGUAGE`."""
    for candidate in candidates:
        if candidate:
            return candidate
    return DEFAULT_LANGUAGE
