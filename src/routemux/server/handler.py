"""ASGI handler — dispatches one HTTP request through the route table.

The only component that touches raw ASGI directly. Per request:

1. wrap the response sink in a ``ResponseWrapper``
2. scan the route table; on the first match, append the path parameters
   to the request's query parameters and run the handler; a handler that
   raises is logged and answered with 500, replacing any partial output
3. OPTIONS requests additionally get a ``Public`` header listing the
   methods available for the path
4. if nothing was written, reply 404
5. emit the access-log line
6. send the response through ASGI ``send()``
"""

import logging

from routemux._internal.asgi import Receive, Scope, Send
from routemux._internal.invoke import invoke
from routemux.config import MuxConfig
from routemux.http.methods import Method
from routemux.http.request import Request
from routemux.http.response import ASGIResponseWriter, ResponseWrapper, http_error, not_found
from routemux.routing.router import Router
from routemux.server.access_log import log_access

logger = logging.getLogger("routemux.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    config: MuxConfig,
    access_logger: logging.Logger,
    log_enabled: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    sink = ASGIResponseWriter(send, head=request.method == Method.HEAD)
    writer = ResponseWrapper(sink, allow_origin=config.access_control_origin)

    match = router.match(request.method, request.path)
    if match is not None:
        # path parameters share the query lookup surface; existing
        # same-named query values are kept
        for name, value in match.path_params:
            request.query.add(name, value)
        try:
            await invoke(match.route.handler, writer, request)
        except Exception:
            logger.exception(
                "Handler for %s %s (route %r) raised",
                request.method,
                request.path,
                match.route.template,
            )
            # nothing has been sent yet: replace any partial output
            sink.reset()
            writer = ResponseWrapper(sink, allow_origin=config.access_control_origin)
            http_error(writer, "Internal Server Error", 500)

    if request.method == Method.OPTIONS:
        allowed = router.allowed_methods(request.path)
        writer.headers.set("Public", ", ".join(allowed))
        writer.write_header(200)

    if not writer.started:
        not_found(writer)

    if log_enabled:
        log_access(access_logger, request, writer)

    await sink.flush()
