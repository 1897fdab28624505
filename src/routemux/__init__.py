"""routemux — an HTTP request router for ASGI.

Maps method + path to a handler, extracting named path parameters into
the request's query parameters, and normalises outgoing headers.

Basic usage::

    from routemux import RouteMux

    mux = RouteMux()

    def show_user(w, r):
        w.write(f"user {r.query['id']}".encode())

    mux.get("/user/:id([0-9]+)", show_user)

``mux`` is an ASGI application; serve it with any ASGI server.
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "Method",
    "MuxConfig",
    "PatternError",
    "Request",
    "ResponseWriter",
    "Route",
    "RouteMux",
    "RoutemuxError",
    "serve_file",
    "serve_formatted",
    "serve_json",
    "serve_xml",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import routemux`` fast while providing a clean top-level API.
    """
    if name == "RouteMux":
        from routemux.app import RouteMux

        return RouteMux

    if name == "MuxConfig":
        from routemux.config import MuxConfig

        return MuxConfig

    if name == "Method":
        from routemux.http.methods import Method

        return Method

    if name == "Request":
        from routemux.http.request import Request

        return Request

    if name == "ResponseWriter":
        from routemux.http.response import ResponseWriter

        return ResponseWriter

    if name == "Route":
        from routemux.routing.route import Route

        return Route

    if name == "serve_file":
        from routemux.static import serve_file

        return serve_file

    if name in ("serve_formatted", "serve_json", "serve_xml"):
        from routemux import serialize as _serialize

        return getattr(_serialize, name)

    if name in ("ConfigurationError", "PatternError", "RoutemuxError"):
        from routemux import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
