"""Handler context and the request-scoped context variable.

Every handler in a chain receives the same ``Context``::

    async def show_user(ctx: Context):
        user_id = ctx.params["id"]
        return {"id": user_id, "page": ctx.query.get("page")}

``state`` is a per-request dict: a global handler can stash a value
there (an authenticated user, a database session) for the route
handlers that run after it.

Thread safety:
    ``ContextVar`` is task-local under asyncio. No locks needed.
"""

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from switchyard.http.query import QueryParams
from switchyard.http.request import Request


@dataclass(frozen=True, slots=True)
class Context:
    """The value passed to each handler in the chain."""

    req: Request
    env: Any = None
    state: dict[str, Any] = field(default_factory=dict)

    @property
    def params(self) -> dict[str, str]:
        """Path parameters bound by the matched route."""
        return self.req.params

    @property
    def query(self) -> QueryParams:
        """Query string parameters of the request URL."""
        return self.req.query

    @property
    def extensions(self) -> Mapping[str, Any]:
        """Caller-supplied extras passed to ``Router.handle``."""
        return self.req.extensions


context_var: ContextVar[Context] = ContextVar("switchyard_context")
"""The context of the chain currently running. Set by the pipeline."""


def get_context() -> Context:
    """Return the current handler context.

    Raises ``LookupError`` if called outside a handler chain.
    """
    return context_var.get()
