from pyreqwest_easy.exceptions import ERR_BAD_RESPONSE, ERR_NETWORK, ERR_TIMEOUT, RequestFailure
from pyreqwest_easy.request import Call
from pyreqwest_easy.response import Envelope


def timeout_failure(call: Call) -> RequestFailure:
    if call.timeout is None:
        message = "timeout exceeded"
    else:
        message = f"timeout of {int(call.timeout.total_seconds() * 1000)}ms exceeded"
    return RequestFailure(call, code=ERR_TIMEOUT, message=message)


def network_failure(call: Call) -> RequestFailure:
    return RequestFailure(call, code=ERR_NETWORK, message="Network Error")


def raise_for_status(envelope: Envelope) -> Envelope:
    """Return the envelope of a 2xx response, raise `RequestFailure` carrying it otherwise."""
    if not envelope.ok:
        raise RequestFailure(envelope.call, status=envelope.status, code=ERR_BAD_RESPONSE, envelope=envelope)
    return envelope
