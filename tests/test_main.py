"""Unit tests for the dnaerys_mcp entry point."""

import pytest
from starlette.applications import Starlette
from starlette.middleware.trustedhost import TrustedHostMiddleware

from dnaerys_mcp.__main__ import _add_http_middleware, main
from dnaerys_mcp.config import DnaerysConfig
from dnaerys_mcp.middleware import RateLimitMiddleware, SecurityHeadersMiddleware


def _middleware_classes(app: Starlette) -> list[type]:
    return [m.cls for m in app.user_middleware]


class TestHttpMiddleware:
    @pytest.mark.unit
    def test_default_stack(self):
        app = Starlette()
        _add_http_middleware(app, DnaerysConfig(rate_limit=10))
        # user_middleware lists the outermost layer first
        assert _middleware_classes(app) == [SecurityHeadersMiddleware, RateLimitMiddleware]

    @pytest.mark.unit
    def test_trusted_hosts_outermost(self):
        app = Starlette()
        _add_http_middleware(app, DnaerysConfig(trusted_hosts=["mcp.example.org"]))
        assert _middleware_classes(app)[0] is TrustedHostMiddleware

    @pytest.mark.unit
    def test_rate_limit_settings_passed(self):
        app = Starlette()
        _add_http_middleware(app, DnaerysConfig(rate_limit=7, trust_forwarded=True))
        rate_limit = app.user_middleware[-1]
        assert rate_limit.kwargs == {"requests_per_minute": 7, "trust_forwarded": True}


class TestMain:
    @pytest.mark.unit
    def test_invalid_config_exits(self, monkeypatch, capsys):
        monkeypatch.setenv("DNAERYS_TRANSPORT", "websocket")
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "Invalid configuration" in capsys.readouterr().err
