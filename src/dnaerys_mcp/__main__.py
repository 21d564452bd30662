"""Entry point for running dnaerys-mcp as a module: python -m dnaerys_mcp."""

import atexit
import logging
import sys
from typing import Literal

from .config import DnaerysConfig
from .core.tools import close_store_client
from .server import create_server

Transport = Literal["stdio", "sse", "streamable-http"]

logger = logging.getLogger("dnaerys_mcp")


def _add_http_middleware(app, config: DnaerysConfig):  # noqa: ANN001, ANN201
    """Add security middleware to a Starlette app for HTTP transports."""
    from starlette.middleware.trustedhost import TrustedHostMiddleware

    from .middleware.ratelimit import RateLimitMiddleware
    from .middleware.security import SecurityHeadersMiddleware

    # add_middleware wraps, so the last one added runs first:
    # trusted host check, then security headers, then rate limiting
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=config.rate_limit,
        trust_forwarded=config.trust_forwarded,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    if config.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=config.trusted_hosts)


def _configure_logging(level: str) -> None:
    # stdout carries the stdio transport, so logs go to stderr
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Run the dnaerys-mcp server."""
    try:
        config = DnaerysConfig.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)

    _configure_logging(config.log_level)
    atexit.register(close_store_client)

    transport: Transport = config.transport  # type: ignore[assignment]
    server = create_server(config)
    logger.info("Serving over %s, variant store at %s", transport, config.store_url)

    if transport == "stdio":
        server.run(transport="stdio")
    else:
        # For HTTP transports, get the Starlette app and add middleware
        import anyio
        import uvicorn

        app = server.sse_app() if transport == "sse" else server.streamable_http_app()

        _add_http_middleware(app, config)

        async def _serve() -> None:
            uvi_config = uvicorn.Config(
                app,
                host=config.host,
                port=config.port,
                log_level=config.log_level.lower(),
            )
            await uvicorn.Server(uvi_config).serve()

        anyio.run(_serve)


if __name__ == "__main__":
    main()
