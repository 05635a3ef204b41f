"""Return-value negotiation — maps handler results to Response objects.

isinstance-based dispatch, no magic, fully predictable. Negotiation
does not finalize: a structured body stays structured until the
pipeline serializes it.
"""

import json as json_module
from typing import Any

from switchyard.http.response import NO_BODY_STATUSES, Raw, Response


def negotiate(value: Any) -> Response | Raw:
    """Convert a handler's non-``None`` return value to a Response.

    Dispatch order:

    1. ``Raw``                  -> pass through untouched
    2. ``Response``             -> pass through
    3. ``(value, int)``         -> negotiate value, override status
    4. ``(value, int, dict)``   -> negotiate value, override status + add headers
    5. anything else            -> body of a new Response
                                   (``str``/``bytes`` as text, the rest as JSON)
    """
    match value:
        case Raw() | Response():
            return value
        case tuple((body, int() as status)):
            return _as_response(body).with_status(status)
        case tuple((body, int() as status, dict() as headers)):
            return _as_response(body).with_status(status).with_headers(headers)
        case _:
            return Response(body=value)


def _as_response(value: Any) -> Response:
    """Negotiate the body half of a tuple return."""
    result = negotiate(value)
    if isinstance(result, Raw):
        msg = "Raw responses cannot be combined with a status or headers."
        raise TypeError(msg)
    return result


def finalize(response: Response) -> Response:
    """Serialize a structured body and resolve the status.

    - Structured body -> JSON string, ``application/json`` unless a
      Content-Type is already set
    - Text body       -> ``text/plain; charset=utf-8`` unless set
    - Status          -> explicit status, else 200 with a body, else 204
    - 101/204/205/304 -> body dropped, no default Content-Type
    """
    status = response.status
    if status is None:
        status = 200 if response.is_structured or response.body else 204
        response = response.with_status(status)

    if status in NO_BODY_STATUSES:
        return response.with_body(None) if response.body is not None else response

    if response.is_structured:
        response = response.with_default_header("Content-Type", "application/json")
        response = response.with_body(json_module.dumps(response.body))
    elif isinstance(response.body, str) and response.body:
        response = response.with_default_header("Content-Type", "text/plain; charset=utf-8")
    return response
