"""Per-client rate limiting for the MCP HTTP endpoints."""

from __future__ import annotations

import time
from collections import deque

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

# JSON-RPC server error code reported with 429 responses
RATE_LIMITED_CODE = -32000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window request limit keyed by client address.

    Every query tool call fans out to the variant store, so the limit is
    applied before the MCP session sees the request. Rejected requests get
    HTTP 429, a Retry-After header, and a JSON-RPC error body an MCP client
    can surface.

    Args:
        app: The ASGI application.
        requests_per_minute: Maximum requests allowed per window per client.
        window_seconds: Length of the sliding window.
        trust_forwarded: Key clients by the first X-Forwarded-For hop. Only
            enable behind a proxy that sets the header.
    """

    def __init__(
        self,
        app,  # noqa: ANN001
        requests_per_minute: int = 60,
        window_seconds: float = 60.0,
        trust_forwarded: bool = False,
    ):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.window_seconds = window_seconds
        self.trust_forwarded = trust_forwarded
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = time.monotonic()

    def client_key(self, request: Request) -> str:
        if self.trust_forwarded:
            forwarded = request.headers.get("x-forwarded-for", "")
            first_hop = forwarded.split(",")[0].strip()
            if first_hop:
                return first_hop
        return request.client.host if request.client else "unknown"

    def _expire(self, hits: deque[float], now: float) -> None:
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        """Drop clients with no hit left in the window, at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        for key in list(self._hits):
            hits = self._hits[key]
            self._expire(hits, now)
            if not hits:
                del self._hits[key]

    def _retry_after(self, hits: deque[float], now: float) -> int:
        return max(int(self.window_seconds - (now - hits[0])) + 1, 1)

    async def dispatch(self, request: Request, call_next):  # noqa: ANN001, ANN201
        key = self.client_key(request)
        now = time.monotonic()

        self._sweep(now)

        hits = self._hits.get(key)
        if hits is not None:
            self._expire(hits, now)
            if len(hits) >= self.requests_per_minute:
                return self._reject(self._retry_after(hits, now))

        self._hits.setdefault(key, deque()).append(now)
        return await call_next(request)

    def _reject(self, retry_after: int) -> Response:
        body = {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": RATE_LIMITED_CODE, "message": "Rate limit exceeded"},
        }
        return JSONResponse(body, status_code=429, headers={"Retry-After": str(retry_after)})
