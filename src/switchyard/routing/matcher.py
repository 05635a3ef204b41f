"""Path matcher — pure first-match selection over an ordered route list.

Patterns are ``/``-delimited. A segment starting with ``:`` binds a
named parameter to exactly one path segment; the pattern ``*`` on its
own is the catch-all. There is no other wildcard syntax.
"""

from collections.abc import Iterable

from switchyard.errors import ConfigurationError
from switchyard.http.query import QueryParams, split_url
from switchyard.routing.route import CATCH_ALL, PathSegment, Route, RouteMatch

PARAM_PREFIX = ":"


def split_path(path: str) -> list[str]:
    """Split a path into its non-empty segments."""
    return [part for part in path.split("/") if part]


def is_catch_all(pattern: str) -> bool:
    """True for the bare path wildcard (``*`` or ``/*``)."""
    return split_path(pattern) == [CATCH_ALL]


def parse_pattern(pattern: str) -> tuple[PathSegment, ...]:
    """Parse a route pattern into segments.

    Examples::

        "/users"          -> (PathSegment("users"),)
        "/users/:id"      -> (PathSegment("users"), PathSegment(":id", True, "id"))
        "/"               -> ()

    Raises ``ConfigurationError`` for a ``*`` segment inside a longer
    pattern, since only the bare ``*`` pattern is a wildcard.
    """
    parts = split_path(pattern)
    if CATCH_ALL in parts and len(parts) > 1:
        msg = (
            f"Invalid route pattern {pattern!r}: '*' is only valid as the whole "
            "pattern. Use ':name' segments to capture single path segments."
        )
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    for part in parts:
        if part.startswith(PARAM_PREFIX):
            segments.append(
                PathSegment(value=part, is_param=True, param_name=part[len(PARAM_PREFIX) :])
            )
        else:
            segments.append(PathSegment(value=part))
    return tuple(segments)


def _bind(route: Route, parts: list[str]) -> dict[str, str] | None:
    """Reconcile a route's segments with path parts.

    Returns the bound parameters, or ``None`` if any literal differs.
    """
    if len(route.segments) != len(parts):
        return None
    params: dict[str, str] = {}
    for segment, part in zip(route.segments, parts, strict=True):
        if segment.is_param:
            params[segment.param_name or ""] = part
        elif segment.value != part:
            return None
    return params


def match(routes: Iterable[Route], method: str, url: str) -> RouteMatch | None:
    """Select the first route that matches *method* and *url*.

    Exact-length routes are tried in registration order. If none
    reconciles, the first catch-all route accepting *method* is used.
    The query string is parsed whenever a route matches.
    """
    path, query_string = split_url(url)
    parts = split_path(path)
    candidates = [route for route in routes if route.accepts(method)]

    for route in candidates:
        if route.catch_all:
            continue
        params = _bind(route, parts)
        if params is not None:
            return RouteMatch(route=route, params=params, query=QueryParams(query_string))

    for route in candidates:
        if route.catch_all:
            return RouteMatch(route=route, params={}, query=QueryParams(query_string))

    return None
