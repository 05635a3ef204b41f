"""CORS policy: preflight short-circuit and response header merging.

Unlike a middleware, the policy runs outside the handler chain: the
pipeline answers ``OPTIONS`` preflights before any route lookup, and
decorates every other response on the way out.
"""

from dataclasses import dataclass

from switchyard.http.request import Request
from switchyard.http.response import Response


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS configuration.

    Every field defaults to a permissive value. Override what you need::

        CORSConfig(
            allow_origin="https://example.com",
            allow_methods="GET, POST",
            allow_credentials=True,
            vary="Origin",
        )
    """

    allow_origin: str = "*"
    allow_methods: str = "*"
    allow_headers: str = "*"
    max_age: int = 86400  # 24 hours
    options_success_status: int = 204
    allow_credentials: bool = False
    vary: str | None = None


class CORSPolicy:
    """Applies a ``CORSConfig`` to requests and responses.

    Handles:
    - Preflight ``OPTIONS`` requests (empty body, configured status)
    - All other responses (CORS headers merged, handler values kept)
    - Credential support (``Access-Control-Allow-Credentials``)
    - Optional ``Vary`` header
    """

    __slots__ = ("_headers", "config")

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()
        self._headers = self._build_headers()

    def _build_headers(self) -> tuple[tuple[str, str], ...]:
        cfg = self.config
        pairs = [
            ("Access-Control-Allow-Origin", cfg.allow_origin),
            ("Access-Control-Allow-Methods", cfg.allow_methods),
            ("Access-Control-Allow-Headers", cfg.allow_headers),
            ("Access-Control-Max-Age", str(cfg.max_age) if cfg.max_age else ""),
        ]
        if cfg.allow_credentials:
            pairs.append(("Access-Control-Allow-Credentials", "true"))
        if cfg.vary:
            pairs.append(("Vary", cfg.vary))
        # Empty values mean "don't send"
        return tuple((name, value) for name, value in pairs if value)

    def headers(self) -> tuple[tuple[str, str], ...]:
        """The CORS header pairs this policy emits."""
        return self._headers

    def is_preflight(self, request: Request) -> bool:
        """True if *request* should be answered by ``preflight_response``."""
        return request.method == "OPTIONS"

    def apply_headers(self, response: Response) -> Response:
        """Merge CORS headers into *response* without overwriting."""
        for name, value in self._headers:
            response = response.with_default_header(name, value)
        return response

    def preflight_response(self) -> Response:
        """Build the short-circuit answer to a preflight request."""
        return Response(
            body=None,
            status=self.config.options_success_status,
            headers=self._headers,
        )
