"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.

A handler's ``Response`` may still be unfinished: ``status`` can be
``None`` and ``body`` can be a structured value. The pipeline finalizes
it (JSON serialization, status defaults) before it leaves the router.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from switchyard.http.headers import get_header, has_header

# Statuses that never carry a body
NO_BODY_STATUSES: frozenset[int] = frozenset({101, 204, 205, 304})


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: Any = None
    status: int | None = None
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_body(self, body: Any) -> Response:
        """Return a new Response with a different body."""
        return replace(self, body=body)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_default_header(self, name: str, value: str) -> Response:
        """Add a header only if no header of that name is set yet."""
        if has_header(self.headers, name):
            return self
        return self.with_header(name, value)

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with the Content-Type header replaced."""
        kept = tuple(pair for pair in self.headers if pair[0].lower() != "content-type")
        return replace(self, headers=(*kept, ("Content-Type", content_type)))

    # -- Inspection --

    def header(self, name: str) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        return get_header(self.headers, name)

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value, if set."""
        return self.header("content-type")

    @property
    def is_structured(self) -> bool:
        """True if the body still needs JSON serialization."""
        return self.body is not None and not isinstance(self.body, (str, bytes))

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if self.body is None:
            return b""
        if isinstance(self.body, bytes):
            return self.body
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return json_module.dumps(self.body).encode("utf-8")

    @property
    def text(self) -> str:
        """Body as string."""
        return self.body_bytes.decode("utf-8")

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body_bytes)


@dataclass(frozen=True, slots=True)
class Raw:
    """A pass-through response.

    The wrapped ``Response`` leaves the router exactly as given: no JSON
    serialization, no status defaulting, no CORS headers::

        def proxy(ctx):
            return Raw(Response(body=b"...", status=200))
    """

    response: Response
