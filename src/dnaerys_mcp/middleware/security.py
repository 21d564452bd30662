"""Response hardening headers for the MCP HTTP endpoints."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# The endpoints serve JSON and event streams only, never documents
API_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Set API hardening headers on every response.

    Headers a route already set are left alone. ``extra_headers`` adds to or
    overrides the defaults in ``API_HEADERS``.
    """

    def __init__(self, app, extra_headers: dict[str, str] | None = None):  # noqa: ANN001
        super().__init__(app)
        self.headers = {**API_HEADERS, **(extra_headers or {})}

    async def dispatch(self, request: Request, call_next):  # noqa: ANN001, ANN201
        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers.setdefault(name, value)
        return response
