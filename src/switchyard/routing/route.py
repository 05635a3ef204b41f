"""PathSegment, Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from switchyard._internal.types import Handler
from switchyard.http.query import QueryParams

# Route method that matches any request method
ANY_METHOD = "*"

# Route pattern that matches any request path
CATCH_ALL = "*"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Literal: ``/users``  (is_param=False)
    Param:   ``/:id``    (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created by the router's registration methods and owned by the
    route table. ``segments`` is the pattern parsed once at registration.
    """

    method: str
    pattern: str
    handlers: tuple[Handler, ...]
    segments: tuple[PathSegment, ...] = ()
    catch_all: bool = False

    def accepts(self, method: str) -> bool:
        """True if this route serves *method* (or any method)."""
        return self.method == ANY_METHOD or self.method == method


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: dict[str, str]
    query: QueryParams
