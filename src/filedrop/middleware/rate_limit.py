"""Fixed-window rate limiting middleware.

Every request is counted against the address of the client that sent it.
Behind reverse proxies that address comes from ``X-Forwarded-For``,
walking exactly ``trusted_hops`` proxies (see ``filedrop.http.proxy``).

State lives in memory and is lost on restart. With several worker
processes each one counts separately.
"""

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from filedrop.http.proxy import client_address
from filedrop.http.request import Request
from filedrop.http.response import Response
from filedrop.middleware.protocol import Next

logger = logging.getLogger("filedrop.rate_limit")

WINDOW_SECONDS = 5 * 60
MAX_REQUESTS = 1000
TOO_MANY_REQUESTS = (
    "Too many requests from this IP Address, please try again after 5 minutes."
)


@dataclass(frozen=True, slots=True)
class Admission:
    """Outcome of counting one request against its client's window."""

    allowed: bool
    limit: int
    remaining: int
    reset_after: float  # seconds until the window resets


class FixedWindowLimiter:
    """Per-identity request counter over fixed windows.

    Each identity gets its own window, starting at its first request.
    Once ``limit`` requests have been admitted in a window, further
    requests are denied until the window elapses; the first request
    after that starts a fresh window.

    No framework types involved: ``admit()`` takes an identity string and
    a timestamp, so it can be driven directly from tests.
    """

    __slots__ = ("_last_prune", "_lock", "_state", "limit", "window_seconds")

    def __init__(self, limit: int = MAX_REQUESTS, window_seconds: float = WINDOW_SECONDS) -> None:
        if limit < 1:
            msg = f"limit must be positive, got {limit}"
            raise ValueError(msg)
        if window_seconds <= 0:
            msg = f"window_seconds must be positive, got {window_seconds}"
            raise ValueError(msg)
        self.limit = limit
        self.window_seconds = window_seconds
        self._lock = threading.Lock()
        # identity -> (count, window_start)
        self._state: dict[str, tuple[int, float]] = {}
        self._last_prune = 0.0

    def __len__(self) -> int:
        return len(self._state)

    def admit(self, identity: str, now: float) -> Admission:
        """Count a request from *identity* at time *now* and decide on it."""
        with self._lock:
            self._prune(now)

            count, window_start = self._state.get(identity, (0, now))
            if now - window_start >= self.window_seconds:
                count, window_start = 0, now

            count += 1
            self._state[identity] = (count, window_start)

        reset_after = max(0.0, window_start + self.window_seconds - now)
        return Admission(
            allowed=count <= self.limit,
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset_after=reset_after,
        )

    def reset(self, identity: str | None = None) -> None:
        """Forget one identity's window, or every window."""
        with self._lock:
            if identity is None:
                self._state.clear()
            else:
                self._state.pop(identity, None)

    def _prune(self, now: float) -> None:
        # Caller holds the lock. Sweeps at most once per window.
        if now - self._last_prune < self.window_seconds:
            return
        self._last_prune = now
        expired = [
            key
            for key, (_, start) in self._state.items()
            if now - start >= self.window_seconds
        ]
        for key in expired:
            del self._state[key]


class RateLimitMiddleware:
    """Reject clients that exceed their request budget with HTTP 429.

    Emits the standard ``RateLimit-*`` headers on every response it lets
    through or rejects; the legacy ``X-RateLimit-*`` headers are never
    sent.

    Usage::

        pipeline = build_pipeline(router, (RateLimitMiddleware(trusted_hops=1), static))
    """

    __slots__ = ("_clock", "_limiter", "trusted_hops")

    def __init__(
        self,
        trusted_hops: int,
        *,
        limiter: FixedWindowLimiter | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if trusted_hops < 0:
            msg = f"trusted_hops must not be negative, got {trusted_hops}"
            raise ValueError(msg)
        self.trusted_hops = trusted_hops
        self._limiter = limiter or FixedWindowLimiter()
        self._clock = clock

    @property
    def limiter(self) -> FixedWindowLimiter:
        return self._limiter

    def identify(self, request: Request) -> str:
        """Client address for *request*, honouring the trusted hop count."""
        return client_address(request.remote_addr, request.forwarded_for, self.trusted_hops)

    async def __call__(self, request: Request, next: Next) -> Response:
        identity = self.identify(request)
        admission = self._limiter.admit(identity, self._clock())

        if not admission.allowed:
            logger.debug("429 %s %s from %s", request.method, request.path, identity)
            response = Response(
                body=TOO_MANY_REQUESTS,
                status=429,
                content_type="text/plain; charset=utf-8",
            ).with_header("Retry-After", str(math.ceil(admission.reset_after)))
            return _with_rate_limit_headers(response, admission, self._limiter.window_seconds)

        response = await next(request)
        return _with_rate_limit_headers(response, admission, self._limiter.window_seconds)


def _with_rate_limit_headers(
    response: Response,
    admission: Admission,
    window_seconds: float,
) -> Response:
    return response.with_headers(
        {
            "RateLimit-Policy": f"{admission.limit};w={math.ceil(window_seconds)}",
            "RateLimit-Limit": str(admission.limit),
            "RateLimit-Remaining": str(admission.remaining),
            "RateLimit-Reset": str(math.ceil(admission.reset_after)),
        }
    )
