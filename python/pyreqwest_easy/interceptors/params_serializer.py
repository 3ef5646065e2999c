"""Query string serialization interceptor."""

from functools import partial

from pydantic import BaseModel, ConfigDict

from pyreqwest_easy.client import RequestClient
from pyreqwest_easy.request import Call
from pyreqwest_easy.types import ArrayFormat
from pyreqwest_easy.utils.params import stringify_params


class ParamsSerializerOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    array_format: ArrayFormat | None = None
    """Default array format. Calls override it with their `array_format` option. `indices` when unset."""


def create_params_serializer_interceptor(client: RequestClient, options: ParamsSerializerOptions | None = None) -> int:
    """Serialize query params of every call with `stringify_params`.

    Returns:
        Interceptor id, usable with `client.interceptors.request.eject`.
    """
    default_format = (options or ParamsSerializerOptions()).array_format

    def serialize_params(call: Call) -> Call:
        array_format = call.options.array_format or default_format or "indices"
        call.params_serializer = partial(stringify_params, array_format=array_format)
        return call

    return client.interceptors.request.use(serialize_params)
