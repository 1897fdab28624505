"""RouteMux — the route registration API and ASGI entry point.

Mutable during setup (route registration). Read-only while serving.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from routemux._internal.asgi import Receive, Scope, Send
from routemux._internal.types import Handler
from routemux.config import MuxConfig
from routemux.http.methods import Method, parse_method
from routemux.http.request import Request
from routemux.http.response import ResponseWriter
from routemux.routing.pattern import compile_template
from routemux.routing.route import Route
from routemux.routing.router import Router
from routemux.server.handler import handle_request
from routemux.static import serve_directory

logger = logging.getLogger("routemux.server")


class RouteMux:
    """An HTTP request router.

    Routes are matched in registration order; the first match wins::

        mux = RouteMux()

        @mux.route("/user/:id([0-9]+)")
        def show_user(w, r):
            w.write(r.query["id"].encode())

        mux.static("/files/", "/srv/public")

    ``RouteMux`` instances are ASGI 3.0 applications; hand one to any ASGI
    server.

    Thread safety:
        Register every route before the first request is served. The route
        table is not locked; lookups assume it no longer changes.
    """

    __slots__ = ("_router", "config", "logger", "logging")

    def __init__(
        self,
        config: MuxConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config: MuxConfig = config or MuxConfig()
        self.logging: bool = self.config.access_log
        self.logger: logging.Logger = logger or logging.getLogger(self.config.logger_name)
        self._router = Router()

    @property
    def routes(self) -> tuple[Route, ...]:
        """Registered routes, in match-priority order."""
        return self._router.routes

    # -- Route registration --

    def add_route(self, method: str, template: str, handler: Handler) -> Route:
        """Compile *template* and append a route for it.

        Raises ``PatternError`` if the template does not compile, and
        ``ConfigurationError`` for an unknown method. Nothing is appended
        in either case.
        """
        route = Route(
            method=parse_method(method),
            pattern=compile_template(template),
            handler=handler,
        )
        self._router.add(route)
        logger.debug("Registered %s %s", route.method, template)
        return route

    def get(self, template: str, handler: Handler) -> Route:
        """Add a route for GET requests."""
        return self.add_route(Method.GET, template, handler)

    def put(self, template: str, handler: Handler) -> Route:
        """Add a route for PUT requests."""
        return self.add_route(Method.PUT, template, handler)

    def delete(self, template: str, handler: Handler) -> Route:
        """Add a route for DELETE requests."""
        return self.add_route(Method.DELETE, template, handler)

    del_ = delete

    def patch(self, template: str, handler: Handler) -> Route:
        """Add a route for PATCH requests (RFC 5789)."""
        return self.add_route(Method.PATCH, template, handler)

    def post(self, template: str, handler: Handler) -> Route:
        """Add a route for POST requests."""
        return self.add_route(Method.POST, template, handler)

    def route(self, template: str, *, method: str = Method.GET) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator."""

        def decorator(func: Handler) -> Handler:
            self.add_route(method, template, func)
            return func

        return decorator

    def static(self, prefix: str, directory: str | Path) -> Route:
        """Serve files under *directory* for GET requests below *prefix*.

        The part of the path after *prefix* is cleaned before it is joined
        to *directory*, so ``/files/../../etc/passwd`` cannot leave it.
        """
        index = self.config.static_index

        async def serve_static(writer: ResponseWriter, request: Request) -> None:
            relative = request.path.removeprefix(prefix)
            await serve_directory(writer, request, directory, relative, index=index)

        # catch-all suffix: everything after the prefix
        return self.add_route(Method.GET, prefix + "(?:.+)", serve_static)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            config=self.config,
            access_logger=self.logger,
            log_enabled=self.logging,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge the ASGI lifespan protocol; there is nothing to set up."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                logger.info("Serving %d route(s)", len(self._router))
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
