"""Route table — ordered, append-only during setup, read-only after."""

import logging
from collections.abc import Iterator, Sequence

from switchyard._internal.types import Handler
from switchyard.errors import ConfigurationError
from switchyard.routing.matcher import is_catch_all, match, parse_pattern
from switchyard.routing.route import ANY_METHOD, Route, RouteMatch

logger = logging.getLogger("switchyard.routing")


class RouteTable:
    """Registered routes in insertion order.

    Usage::

        table = RouteTable()
        table.add("GET", "/users/:id", (show_user,))
        table.freeze()
        found = table.match("GET", "/users/42")
    """

    __slots__ = ("_frozen", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._frozen = False

    def add(self, method: str, pattern: str, handlers: Sequence[Handler]) -> Route:
        """Append a route. Must be called before freeze()."""
        if self._frozen:
            msg = "Cannot add routes after the router has started serving requests."
            raise RuntimeError(msg)
        if not handlers:
            msg = f"Route {method} {pattern!r} needs at least one handler."
            raise ConfigurationError(msg)
        for handler in handlers:
            if not callable(handler):
                msg = f"Handler {handler!r} for {method} {pattern!r} is not callable."
                raise ConfigurationError(msg)

        method = method.upper()
        route = Route(
            method=method,
            pattern=pattern,
            handlers=tuple(handlers),
            segments=parse_pattern(pattern),
            catch_all=is_catch_all(pattern),
        )
        self._routes.append(route)
        logger.debug(
            "Registered %s %s (%d handler(s))",
            "ANY" if method == ANY_METHOD else method,
            pattern,
            len(route.handlers),
        )
        return route

    def freeze(self) -> None:
        """Freeze the table. No more routes can be added."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes, in registration order."""
        return tuple(self._routes)

    def match(self, method: str, url: str) -> RouteMatch | None:
        """Match *method* and *url* against the table (first match wins)."""
        return match(self._routes, method, url)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)
