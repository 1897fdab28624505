"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from routemux._internal.types import Handler
from routemux.http.methods import Method
from routemux.routing.pattern import CompiledPattern


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route. Immutable once constructed.

    Owned by the ``Router`` it was added to, for the router's lifetime.
    """

    method: Method
    pattern: CompiledPattern
    handler: Handler

    @property
    def template(self) -> str:
        return self.pattern.template

    @property
    def params(self) -> tuple[str, ...]:
        return self.pattern.params

    def match(self, path: str) -> tuple[str, ...] | None:
        return self.pattern.match(path)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``values`` are the captured strings in capture order.
    """

    route: Route
    values: tuple[str, ...]

    @property
    def path_params(self) -> list[tuple[str, str]]:
        """(name, value) pairs in capture order. Names may repeat."""
        return list(zip(self.route.params, self.values, strict=True))
