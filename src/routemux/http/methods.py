"""The fixed set of HTTP methods a route can be registered for."""

from enum import StrEnum

from routemux.errors import ConfigurationError


class Method(StrEnum):
    CONNECT = "CONNECT"
    DELETE = "DELETE"
    GET = "GET"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"
    POST = "POST"
    PUT = "PUT"
    TRACE = "TRACE"


def parse_method(method: str) -> Method:
    """Normalise *method* to a ``Method``.

    Raises ``ConfigurationError`` for anything outside the fixed set.
    """
    try:
        return Method(method.upper())
    except ValueError:
        allowed = ", ".join(m.value for m in Method)
        msg = f"Unsupported HTTP method {method!r}. Expected one of: {allowed}"
        raise ConfigurationError(msg) from None
