"""Switchyard exception hierarchy.

Shared across the route table, matcher, pipeline, and handlers so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when a route or router setting is invalid.

    Typically raised at registration time, before any request is served.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchyardError):
    """An error that maps directly to an HTTP status code.

    Raised by the pipeline or by handlers. The pipeline boundary catches
    these and turns them into a response with the same status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request method and path."""

    def __init__(self, detail: str = "Route not found") -> None:
        super().__init__(status=404, detail=detail)


class NoResponse(HTTPError):  # noqa: N818
    """500 — every handler in the chain returned ``None``."""

    def __init__(self, detail: str = "No handler produced a response") -> None:
        super().__init__(status=500, detail=detail)
