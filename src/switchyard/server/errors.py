"""Error handling for the dispatch pipeline.

Maps HTTPError exceptions and unexpected failures to Response objects.
Error bodies stay empty unless the router is in debug mode.
"""

import logging
import traceback

from switchyard.errors import HTTPError, NoResponse
from switchyard.http.request import Request
from switchyard.http.response import Response

logger = logging.getLogger("switchyard.server")


def handle_http_error(exc: HTTPError, request: Request, debug: bool) -> Response:
    """Map an HTTPError to a Response with the same status and headers."""
    if isinstance(exc, NoResponse):
        logger.warning("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    else:
        logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    body = exc.detail if debug and exc.detail else None
    resp = Response(body=body, status=exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, request: Request, debug: bool) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    if debug:
        detail = "".join(traceback.format_exception(exc))
        return Response(body=detail, status=500)

    return Response(body=None, status=500)
