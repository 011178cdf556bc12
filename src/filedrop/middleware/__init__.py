"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    RateLimitMiddleware -- Fixed-window per-client request limiting
    StaticFiles -- Serve the client bundle with caching disabled
"""

from filedrop.middleware.protocol import Middleware, Next
from filedrop.middleware.rate_limit import (
    Admission,
    FixedWindowLimiter,
    RateLimitMiddleware,
)
from filedrop.middleware.static import StaticFiles

__all__ = [
    "Admission",
    "FixedWindowLimiter",
    "Middleware",
    "Next",
    "RateLimitMiddleware",
    "StaticFiles",
]
