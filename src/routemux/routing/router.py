"""Ordered route table with first-match-wins lookup.

Routes are scanned in registration order; the first route whose method
equals the request method and whose pattern matches the whole path wins.
Registration order is the priority order, and that is part of the
contract.

Thread safety:
    Routes are added during setup, before the first request is served.
    Lookups take no lock and assume the table no longer changes.
"""

from routemux.http.methods import Method
from routemux.routing.route import Route, RouteMatch


class Router:
    """Ordered list of routes.

    Usage::

        router = Router()
        router.add(Route(Method.GET, compile_template("/users/:id"), handler))
        match = router.match("GET", "/users/42")
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: list[Route] = []

    def add(self, route: Route) -> None:
        """Append *route*. Earlier routes take priority."""
        self._routes.append(route)

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes, in registration order."""
        return tuple(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route registered for *method* that matches *path*.

        There is no implicit HEAD -> GET fallback.
        """
        for route in self._routes:
            if route.method != method:
                continue
            values = route.match(path)
            if values is None:
                continue
            return RouteMatch(route=route, values=values)
        return None

    def allowed_methods(self, path: str) -> list[str]:
        """Methods available for *path*, sorted, for an OPTIONS reply.

        Every route matching the path contributes its method regardless of
        the request method. GET also contributes HEAD. OPTIONS is always
        included.
        """
        methods: set[str] = {Method.OPTIONS.value}
        for route in self._routes:
            if route.match(path) is None:
                continue
            methods.add(route.method.value)
            if route.method is Method.GET:
                methods.add(Method.HEAD.value)
        return sorted(methods)
