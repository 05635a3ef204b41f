"""Switchyard router.

Mutable during setup (route registration, global handlers, CORS and
debug settings). Frozen when the first request is handled.
"""

import logging
import threading
import warnings
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from typing import Any, Self

import anyio

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.types import Handler
from switchyard.config import RouterConfig
from switchyard.cors import CORSConfig, CORSPolicy
from switchyard.errors import ConfigurationError
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.routing.route import ANY_METHOD, Route
from switchyard.routing.table import RouteTable
from switchyard.server.pipeline import dispatch
from switchyard.server.sender import send_response

logger = logging.getLogger("switchyard.router")


class Router:
    """An in-process HTTP router.

    Register routes with one call per method; every call returns the
    router so registrations chain::

        router = Router().cors().debug()
        router.use(authenticate)
        router.get("/users/:id", load_user, show_user)
        router.any("*", not_found_page)

        response = await router.handle(Request.build("GET", "/users/42"))

    Handlers take a single ``Context`` and return a response value to
    finish the request, or ``None`` to hand over to the next handler.

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one caller freezes the table, even when
        several threads handle their first request concurrently.
        After that the table and config are only read.
    """

    __slots__ = (
        "_cors",
        "_freeze_lock",
        "_frozen",
        "_global_handlers",
        "_global_chain",
        "_table",
        "config",
    )

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self._table: RouteTable = RouteTable()
        self._global_handlers: list[Handler] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._cors: CORSPolicy | None = None
        self._global_chain: tuple[Handler, ...] = ()

    # -- Global handlers --

    def use(self, *handlers: Handler) -> Self:
        """Register handlers that run before every matched route's own."""
        self._check_not_frozen()
        for handler in handlers:
            if not callable(handler):
                msg = f"Global handler {handler!r} is not callable."
                raise ConfigurationError(msg)
            self._global_handlers.append(handler)
        return self

    # -- Route registration --

    def get(self, pattern: str, *handlers: Handler) -> Self:
        """Register a GET route."""
        return self._register("GET", pattern, handlers)

    def post(self, pattern: str, *handlers: Handler) -> Self:
        """Register a POST route."""
        return self._register("POST", pattern, handlers)

    def put(self, pattern: str, *handlers: Handler) -> Self:
        """Register a PUT route."""
        return self._register("PUT", pattern, handlers)

    def patch(self, pattern: str, *handlers: Handler) -> Self:
        """Register a PATCH route."""
        return self._register("PATCH", pattern, handlers)

    def delete(self, pattern: str, *handlers: Handler) -> Self:
        """Register a DELETE route."""
        return self._register("DELETE", pattern, handlers)

    def head(self, pattern: str, *handlers: Handler) -> Self:
        """Register a HEAD route."""
        return self._register("HEAD", pattern, handlers)

    def options(self, pattern: str, *handlers: Handler) -> Self:
        """Register an OPTIONS route.

        Unreachable while CORS is enabled: preflights are answered first.
        """
        return self._register("OPTIONS", pattern, handlers)

    def connect(self, pattern: str, *handlers: Handler) -> Self:
        """Register a CONNECT route."""
        return self._register("CONNECT", pattern, handlers)

    def trace(self, pattern: str, *handlers: Handler) -> Self:
        """Register a TRACE route."""
        return self._register("TRACE", pattern, handlers)

    def any(self, pattern: str, *handlers: Handler) -> Self:
        """Register a route that matches every request method."""
        return self._register(ANY_METHOD, pattern, handlers)

    def all(self, pattern: str, *handlers: Handler) -> Self:
        """Deprecated alias of :meth:`any`."""
        warnings.warn(
            "Router.all() is deprecated, use Router.any() instead.",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.any(pattern, *handlers)

    def route(
        self,
        pattern: str,
        *,
        methods: Sequence[str] = ("GET",),
    ) -> Callable[[Handler], Handler]:
        """Register a single handler via decorator.

        One route is added per method, in the order given::

            @router.route("/items/:id", methods=["GET", "HEAD"])
            def show(ctx):
                return {"id": ctx.params["id"]}
        """

        def decorator(func: Handler) -> Handler:
            for method in methods:
                self._register(method, pattern, (func,))
            return func

        return decorator

    def _register(self, method: str, pattern: str, handlers: Sequence[Handler]) -> Self:
        self._check_not_frozen()
        self._table.add(method, pattern, handlers)
        return self

    # -- Settings --

    def cors(self, config: CORSConfig | None = None, **overrides: Any) -> Self:
        """Enable CORS, optionally overriding individual fields::

            router.cors(allow_origin="https://example.com", max_age=600)
        """
        self._check_not_frozen()
        cors_config = replace(config or CORSConfig(), **overrides)
        self.config = replace(self.config, cors=cors_config)
        return self

    def debug(self, state: bool = True) -> Self:
        """Toggle debug mode (error detail in response bodies)."""
        self._check_not_frozen()
        self.config = replace(self.config, debug=state)
        return self

    @property
    def routes(self) -> tuple[Route, ...]:
        """Registered routes, in registration order."""
        return self._table.routes

    # -- Request handling --

    async def handle(
        self,
        request: Request,
        env: Any = None,
        extensions: Mapping[str, Any] | None = None,
    ) -> Response:
        """Dispatch *request* and return the final response.

        *env* is handed to every handler as ``ctx.env`` (bindings,
        settings, service handles). *extensions* are merged into
        ``request.extensions``.
        """
        self._ensure_frozen()
        return await dispatch(
            request,
            table=self._table,
            global_handlers=self._global_chain,
            cors=self._cors,
            debug=self.config.debug,
            env=env,
            extensions=extensions,
        )

    def handle_sync(
        self,
        request: Request,
        env: Any = None,
        extensions: Mapping[str, Any] | None = None,
    ) -> Response:
        """Blocking variant of :meth:`handle` for synchronous hosts.

        Runs the pipeline on a fresh event loop; must not be called from
        inside a running loop.
        """
        return anyio.run(self.handle, request, env, extensions)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Acknowledges lifespan events and dispatches HTTP scopes.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        response = await self.handle(request, extensions={"asgi_scope": scope})
        try:
            await send_response(response, send)
        except UnicodeEncodeError:
            # Header encoding fails before anything is sent
            logger.exception(
                "500 %s %s: response headers are not latin-1", request.method, request.path
            )
            await send_response(Response(status=500), send)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol, freezing the router at startup."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                self._ensure_frozen()
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        self._table.freeze()
        self._global_chain = tuple(self._global_handlers)
        if self.config.cors is not None:
            self._cors = CORSPolicy(self.config.cors)
        logger.debug(
            "Router frozen: %d route(s), %d global handler(s), cors=%s, debug=%s",
            len(self._table),
            len(self._global_handlers),
            self.config.cors_enabled,
            self.config.debug,
        )
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the router after it has started handling requests. "
                "Register routes, handlers, and settings before the first request."
            )
            raise RuntimeError(msg)
