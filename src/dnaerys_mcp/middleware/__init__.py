"""HTTP transport middleware modules."""

from .ratelimit import RateLimitMiddleware
from .security import SecurityHeadersMiddleware

__all__ = [
    "RateLimitMiddleware",
    "SecurityHeadersMiddleware",
]
