"""Request and response interceptors."""

from pyreqwest_easy.interceptors.accessors import Extractor, FieldName, SuccessEquals, SuccessPredicate
from pyreqwest_easy.interceptors.authenticate import (
    AuthenticateCoordinator,
    AuthenticateOptions,
    create_authenticate_interceptor,
)
from pyreqwest_easy.interceptors.default_request import (
    DefaultRequestInterceptor,
    DefaultRequestOptions,
    create_default_request_interceptor,
)
from pyreqwest_easy.interceptors.default_response import (
    DefaultResponseOptions,
    ResponseUnwrapper,
    create_default_response_interceptor,
)
from pyreqwest_easy.interceptors.error_message import (
    ErrorMessageOptions,
    ErrorPresenter,
    HandleErrorMessage,
    create_error_message_interceptor,
    resolve_error_message,
)
from pyreqwest_easy.interceptors.params_serializer import (
    ParamsSerializerOptions,
    create_params_serializer_interceptor,
)

__all__ = [
    "AuthenticateCoordinator",
    "AuthenticateOptions",
    "DefaultRequestInterceptor",
    "DefaultRequestOptions",
    "DefaultResponseOptions",
    "ErrorMessageOptions",
    "ErrorPresenter",
    "Extractor",
    "FieldName",
    "HandleErrorMessage",
    "ParamsSerializerOptions",
    "ResponseUnwrapper",
    "SuccessEquals",
    "SuccessPredicate",
    "create_authenticate_interceptor",
    "create_default_request_interceptor",
    "create_default_response_interceptor",
    "create_error_message_interceptor",
    "create_params_serializer_interceptor",
    "resolve_error_message",
]
