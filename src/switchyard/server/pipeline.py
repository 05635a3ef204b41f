"""Dispatch pipeline — one request in, one response out.

Order of operations:

1. CORS preflight short-circuit (before any route lookup)
2. Route match (404 when nothing matches)
3. Handler chain: global handlers, then the route's own, strictly in
   order; the first non-``None`` return value ends the chain
4. Negotiation and finalization of that value
5. CORS headers merged into the result

Handlers run one after another on the calling task. An async handler
is awaited to completion before the next one starts.
"""

import logging
from collections.abc import Mapping
from contextvars import Token
from dataclasses import replace
from typing import Any

from switchyard._internal.invoke import invoke
from switchyard._internal.types import Handler
from switchyard.context import Context, context_var
from switchyard.cors import CORSPolicy
from switchyard.errors import HTTPError, NoResponse, NotFound
from switchyard.http.request import Request
from switchyard.http.response import Raw, Response
from switchyard.routing.table import RouteTable
from switchyard.server.errors import handle_http_error, handle_internal_error
from switchyard.server.negotiation import finalize, negotiate

logger = logging.getLogger("switchyard.server")


async def dispatch(
    request: Request,
    *,
    table: RouteTable,
    global_handlers: tuple[Handler, ...],
    cors: CORSPolicy | None,
    debug: bool,
    env: Any = None,
    extensions: Mapping[str, Any] | None = None,
) -> Response:
    """Process a single request through the full pipeline."""
    if extensions:
        request = replace(request, extensions={**request.extensions, **extensions})

    if cors is not None and cors.is_preflight(request):
        logger.debug("Preflight %s answered with %d", request.path, cors.config.options_success_status)
        return cors.preflight_response()

    try:
        result = await _run_chain(request, table=table, global_handlers=global_handlers, env=env)
        if isinstance(result, Raw):
            return result.response
        response = finalize(result)
    except HTTPError as exc:
        response = finalize(handle_http_error(exc, request, debug))
    except Exception as exc:
        response = finalize(handle_internal_error(exc, request, debug))

    if cors is not None:
        response = cors.apply_headers(response)
    return response


async def _run_chain(
    request: Request,
    *,
    table: RouteTable,
    global_handlers: tuple[Handler, ...],
    env: Any,
) -> Response | Raw:
    """Match the route and run its handler chain."""
    match = table.match(request.method, request.url)
    if match is None:
        raise NotFound()

    # Carry over _cache so a body read before matching isn't re-read
    request = replace(request, params=match.params, query=match.query)
    ctx = Context(req=request, env=env)

    token: Token[Context] = context_var.set(ctx)
    try:
        for handler in (*global_handlers, *match.route.handlers):
            value = await invoke(handler, ctx)
            if value is not None:
                return negotiate(value)
    finally:
        context_var.reset(token)

    raise NoResponse()
