"""Tests for switchyard.http.request — frozen Request with read-once body."""

import json
from dataclasses import replace

import pytest

from switchyard.http.request import Request


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "https",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [(b"host", b"example.com")],
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


def _make_receive(*bodies: bytes):
    """Create an ASGI receive callable that yields bodies, counting reads."""
    messages = []
    for i, body in enumerate(bodies):
        is_last = i == len(bodies) - 1
        messages.append({"type": "http.request", "body": body, "more_body": not is_last})
    if not messages:
        messages.append({"type": "http.request", "body": b"", "more_body": False})
    it = iter(messages)

    async def receive():
        return next(it)

    return receive


class TestBuild:
    def test_absolute_url(self) -> None:
        req = Request.build("get", "https://example.com/users/1?x=1")
        assert req.method == "GET"
        assert req.url == "https://example.com/users/1?x=1"
        assert req.path == "/users/1"
        assert req.query_string == "x=1"

    def test_relative_url(self) -> None:
        req = Request.build("GET", "/items?page=2")
        assert req.path == "/items"

    def test_double_slash_target(self) -> None:
        req = Request.build("GET", "//users/42?x=1")
        assert req.path == "//users/42"
        assert req.query_string == "x=1"

    def test_empty_path_is_root(self) -> None:
        assert Request.build("GET", "https://example.com").path == "/"

    def test_params_and_query_start_empty(self) -> None:
        req = Request.build("GET", "/a?b=c")
        assert req.params == {}
        assert len(req.query) == 0

    def test_headers_case_insensitive(self) -> None:
        req = Request.build("GET", "/", headers={"Content-Type": "application/json"})
        assert req.content_type == "application/json"
        assert req.headers["CONTENT-TYPE"] == "application/json"

    def test_frozen(self) -> None:
        req = Request.build("GET", "/")
        with pytest.raises(AttributeError):
            req.method = "POST"  # type: ignore[misc]


class TestFromASGI:
    def test_basic_fields(self) -> None:
        scope = _make_scope(method="post", path="/users", raw_path=b"/users", query_string=b"a=1")
        req = Request.from_asgi(scope, _make_receive())
        assert req.method == "POST"
        assert req.path == "/users"
        assert req.url == "https://example.com/users?a=1"

    def test_raw_path_preferred(self) -> None:
        scope = _make_scope(path="/a b", raw_path=b"/a%20b")
        req = Request.from_asgi(scope, _make_receive())
        assert req.path == "/a%20b"

    def test_host_falls_back_to_server(self) -> None:
        scope = _make_scope(headers=[], scheme="http")
        req = Request.from_asgi(scope, _make_receive())
        assert req.url == "http://localhost:8000/"


class TestBody:
    async def test_body_chunks_joined(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b"ab", b"cd"))
        assert await req.body() == b"abcd"

    async def test_body_read_once(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b"once"))
        assert await req.body() == b"once"
        # The receive iterator is exhausted; a second read must come from cache
        assert await req.body() == b"once"

    async def test_cache_shared_with_derived_request(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b"shared"))
        await req.body()
        derived = replace(req, params={"id": "1"})
        assert await derived.body() == b"shared"

    async def test_text_and_json(self) -> None:
        payload = {"name": "Ada"}
        req = Request.build("POST", "/", body=json.dumps(payload))
        assert await req.text() == json.dumps(payload)
        assert await req.json() == payload

    async def test_json_strict(self) -> None:
        req = Request.build("POST", "/", body=b"nope")
        with pytest.raises(ValueError):
            await req.json()

    async def test_no_receive_means_empty_body(self) -> None:
        req = Request(method="GET", url="/", path="/", headers=Request.build("GET", "/").headers)
        assert await req.body() == b""


class TestPayload:
    async def test_json_content_type(self) -> None:
        req = Request.build(
            "POST", "/", headers={"Content-Type": "application/json"}, body=b'{"a": 1}'
        )
        assert await req.payload() == {"a": 1}

    async def test_json_substring_sniffing(self) -> None:
        req = Request.build(
            "PATCH", "/", headers={"Content-Type": "application/merge-patch+json"}, body=b"[1]"
        )
        assert await req.payload() == [1]

    async def test_invalid_json_becomes_empty_object(self) -> None:
        req = Request.build(
            "PUT", "/", headers={"Content-Type": "application/json"}, body=b"{broken"
        )
        assert await req.payload() == {}

    async def test_text_default(self) -> None:
        req = Request.build("POST", "/", body=b"hello")
        assert await req.payload() == "hello"

    async def test_undecodable_text_becomes_empty_string(self) -> None:
        req = Request.build("POST", "/", body=b"\xff\xfe\xfa")
        assert await req.payload() == ""

    async def test_methods_without_body(self) -> None:
        for method in ("GET", "HEAD", "DELETE", "OPTIONS"):
            req = Request.build(method, "/", body=b"ignored")
            assert await req.payload() == ""

    async def test_payload_cached(self) -> None:
        req = Request.build("POST", "/", headers={"content-type": "application/json"}, body=b"{}")
        first = await req.payload()
        assert await req.payload() is first
