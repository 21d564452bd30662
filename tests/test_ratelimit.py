"""Unit tests for rate limiting middleware."""

import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from dnaerys_mcp.middleware.ratelimit import RATE_LIMITED_CODE, RateLimitMiddleware


def _make_app(requests_per_minute: int = 5, **kwargs) -> Starlette:
    """Create a test Starlette app with rate limiting."""

    async def mcp_endpoint(request: Request) -> PlainTextResponse:
        return PlainTextResponse("ok")

    app = Starlette(routes=[Route("/mcp", mcp_endpoint, methods=["GET", "POST"])])
    app.add_middleware(RateLimitMiddleware, requests_per_minute=requests_per_minute, **kwargs)
    return app


class TestRateLimitMiddleware:
    """Tests for RateLimitMiddleware."""

    @pytest.mark.unit
    def test_allows_requests_under_limit(self):
        client = TestClient(_make_app(requests_per_minute=5))
        for _ in range(5):
            assert client.post("/mcp").status_code == 200

    @pytest.mark.unit
    def test_blocks_requests_over_limit(self):
        client = TestClient(_make_app(requests_per_minute=3))
        for _ in range(3):
            assert client.post("/mcp").status_code == 200

        resp = client.post("/mcp")
        assert resp.status_code == 429
        assert "Retry-After" in resp.headers

    @pytest.mark.unit
    def test_rejection_is_json_rpc_error(self):
        client = TestClient(_make_app(requests_per_minute=1))
        client.post("/mcp")

        body = client.post("/mcp").json()
        assert body["jsonrpc"] == "2.0"
        assert body["id"] is None
        assert body["error"]["code"] == RATE_LIMITED_CODE

    @pytest.mark.unit
    def test_retry_after_within_window(self):
        client = TestClient(_make_app(requests_per_minute=1))
        client.post("/mcp")

        retry_after = int(client.post("/mcp").headers["Retry-After"])
        assert 0 < retry_after <= 61

    @pytest.mark.unit
    def test_window_expiry_frees_slots(self):
        client = TestClient(_make_app(requests_per_minute=1, window_seconds=0.0))
        assert client.post("/mcp").status_code == 200
        assert client.post("/mcp").status_code == 200

    @pytest.mark.unit
    def test_forwarded_header_ignored_by_default(self):
        client = TestClient(_make_app(requests_per_minute=1))
        assert client.post("/mcp", headers={"X-Forwarded-For": "1.2.3.4"}).status_code == 200
        # Same socket peer, spoofed header does not buy a new budget
        assert client.post("/mcp", headers={"X-Forwarded-For": "5.6.7.8"}).status_code == 429

    @pytest.mark.unit
    def test_forwarded_clients_tracked_separately_when_trusted(self):
        client = TestClient(_make_app(requests_per_minute=2, trust_forwarded=True))

        for _ in range(2):
            resp = client.post("/mcp", headers={"X-Forwarded-For": "1.2.3.4"})
            assert resp.status_code == 200
        assert client.post("/mcp", headers={"X-Forwarded-For": "1.2.3.4"}).status_code == 429
        assert client.post("/mcp", headers={"X-Forwarded-For": "5.6.7.8"}).status_code == 200

    @pytest.mark.unit
    def test_first_forwarded_hop_is_the_client(self):
        client = TestClient(_make_app(requests_per_minute=1, trust_forwarded=True))

        resp = client.post("/mcp", headers={"X-Forwarded-For": "1.2.3.4, 10.0.0.1"})
        assert resp.status_code == 200
        resp = client.post("/mcp", headers={"X-Forwarded-For": "1.2.3.4, 10.0.0.2"})
        assert resp.status_code == 429


def _make_limiter(requests_per_minute: int = 5, **kwargs) -> RateLimitMiddleware:
    """Wrap a bare endpoint so the limiter's client table can be inspected."""

    async def mcp_endpoint(request: Request) -> PlainTextResponse:
        return PlainTextResponse("ok")

    app = Starlette(routes=[Route("/mcp", mcp_endpoint, methods=["GET", "POST"])])
    return RateLimitMiddleware(app, requests_per_minute=requests_per_minute, **kwargs)


class TestClientTracking:
    """Tests for eviction of idle clients."""

    @pytest.mark.unit
    def test_many_forwarded_clients_stay_bounded(self):
        limiter = _make_limiter(window_seconds=0.0, trust_forwarded=True)
        client = TestClient(limiter)

        for i in range(500):
            resp = client.post("/mcp", headers={"X-Forwarded-For": f"10.0.{i // 256}.{i % 256}"})
            assert resp.status_code == 200

        assert len(limiter._hits) <= 1

    @pytest.mark.unit
    def test_idle_client_is_evicted(self):
        limiter = _make_limiter(window_seconds=0.0, trust_forwarded=True)
        client = TestClient(limiter)

        client.post("/mcp", headers={"X-Forwarded-For": "1.2.3.4"})
        assert "1.2.3.4" in limiter._hits
        client.post("/mcp", headers={"X-Forwarded-For": "5.6.7.8"})
        assert "1.2.3.4" not in limiter._hits

    @pytest.mark.unit
    def test_active_clients_kept_within_window(self):
        limiter = _make_limiter(trust_forwarded=True)
        client = TestClient(limiter)

        for address in ("1.2.3.4", "5.6.7.8"):
            client.post("/mcp", headers={"X-Forwarded-For": address})

        assert set(limiter._hits) == {"1.2.3.4", "5.6.7.8"}
