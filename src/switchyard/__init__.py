"""Switchyard — an in-process HTTP request router.

Selects a route by method and URL shape, binds path and query
parameters, and runs an ordered chain of handlers until one of them
produces a response. Built for hosts that expose a single
``handle(request) -> response`` boundary, and usable as an ASGI app.

Basic usage::

    from switchyard import Request, Router

    router = Router().cors()

    def hello(ctx):
        return {"hello": ctx.params["name"]}

    router.get("/hello/:name", hello)

    response = await router.handle(Request.build("GET", "/hello/world"))
"""

__version__ = "0.1.0"
__all__ = [
    "CORSConfig",
    "ConfigurationError",
    "Context",
    "HTTPError",
    "NoResponse",
    "NotFound",
    "Raw",
    "Request",
    "Response",
    "Router",
    "RouterConfig",
    "SwitchyardError",
    "get_context",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from switchyard.router import Router

        return Router

    if name == "RouterConfig":
        from switchyard.config import RouterConfig

        return RouterConfig

    if name == "CORSConfig":
        from switchyard.cors import CORSConfig

        return CORSConfig

    if name == "Request":
        from switchyard.http.request import Request

        return Request

    if name in ("Response", "Raw"):
        from switchyard.http import response as _resp

        return getattr(_resp, name)

    if name in ("Context", "get_context"):
        from switchyard import context as _ctx

        return getattr(_ctx, name)

    if name in ("SwitchyardError", "ConfigurationError", "HTTPError", "NoResponse", "NotFound"):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
