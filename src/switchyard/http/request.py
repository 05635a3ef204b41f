"""Immutable HTTP request.

Frozen metadata with async, read-once body access. ``params`` and
``query`` start empty and are filled in by the path matcher: the
pipeline derives a new Request with ``dataclasses.replace`` that shares
the same body cache, so the underlying stream is consumed at most once
per request no matter how many derived copies exist.
"""

from __future__ import annotations

import json as json_module
import logging
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field
from typing import Any

from switchyard._internal.asgi import Receive, Scope
from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams, split_url

logger = logging.getLogger("switchyard.http")

# Methods whose body ``payload()`` will materialize
BODY_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH"})


def _single_body(body: bytes) -> Receive:
    """Build a receive callable that yields *body* as one message."""
    sent = False

    async def receive() -> dict[str, Any]:
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return receive


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, url, headers, params, query) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.text()``,
    ``.json()`` and the forgiving ``.payload()``.

    ``extensions`` is the one open field: whatever the caller passed to
    ``Router.handle(..., extensions=...)``, e.g. platform metadata.
    """

    method: str
    url: str
    path: str
    headers: Headers
    params: dict[str, str] = field(default_factory=dict)
    query: QueryParams = field(default_factory=QueryParams)
    extensions: Mapping[str, Any] = field(default_factory=dict)

    # Private: ASGI-style receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: mutable cache for body and parsed forms of it
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def query_string(self) -> str:
        """The raw query string of ``url`` (without ``?``)."""
        return split_url(self.url)[1]

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the receive callable is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            if message.get("type") == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        if "_text" not in self._cache:
            raw = await self.body()
            self._cache["_text"] = raw.decode("utf-8")
        return self._cache["_text"]

    async def json(self) -> Any:
        """Parse the body as JSON."""
        if "_json" not in self._cache:
            raw = await self.body()
            self._cache["_json"] = json_module.loads(raw)
        return self._cache["_json"]

    async def payload(self) -> Any:
        """The body as handlers usually want it, never raising.

        Only ``POST``, ``PUT`` and ``PATCH`` carry a payload; other
        methods give ``""``. A ``Content-Type`` mentioning ``json`` selects
        JSON parsing (``{}`` when the body is not valid JSON); anything
        else is decoded as UTF-8 text (``""`` when it cannot be decoded).
        """
        if "_payload" in self._cache:
            return self._cache["_payload"]

        result: Any = ""
        if self.method in BODY_METHODS:
            if "json" in (self.content_type or ""):
                try:
                    result = await self.json()
                except ValueError:
                    logger.debug("Unparseable JSON body on %s %s", self.method, self.path)
                    result = {}
            else:
                try:
                    result = await self.text()
                except UnicodeDecodeError:
                    logger.debug("Undecodable text body on %s %s", self.method, self.path)
                    result = ""

        self._cache["_payload"] = result
        return result

    # -- Factories --

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | str = b"",
        extensions: Mapping[str, Any] | None = None,
    ) -> Request:
        """Create a Request directly, e.g. at a serverless boundary.

        *url* may be absolute (``https://example.com/users?page=2``) or
        just a path with an optional query string.
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(
            method=method.upper(),
            url=url,
            path=split_url(url)[0] or "/",
            headers=Headers.from_mapping(headers),
            extensions=extensions or {},
            _receive=_single_body(body),
        )

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable.

        The path keeps its percent-encoding (``raw_path`` when present)
        so path parameters bind the raw segment text.
        """
        headers = Headers.from_raw(scope.get("headers", ()))
        raw_path = scope.get("raw_path")
        path = raw_path.decode("latin-1") if raw_path else scope["path"]
        query_string = scope.get("query_string", b"").decode("latin-1")

        host = headers.get("host")
        if host is None and scope.get("server"):
            server_host, server_port = scope["server"]
            host = f"{server_host}:{server_port}"
        url = f"{scope.get('scheme', 'http')}://{host or 'localhost'}{path}"
        if query_string:
            url = f"{url}?{query_string}"

        return cls(
            method=scope["method"].upper(),
            url=url,
            path=path,
            headers=headers,
            _receive=receive,
        )
