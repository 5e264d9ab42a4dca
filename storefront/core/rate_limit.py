# storefront/core/rate_limit.py
import logging
import math
import threading
import time
from typing import Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.core.errors import error_body

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

# prune expired windows once this many clients are tracked
MAX_TRACKED_CLIENTS = 10_000


class FixedWindowCounter:
    """
    Per-key request counter over fixed time windows.

    hit(key) returns (allowed, remaining, reset_in_seconds).
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: dict[str, tuple[float, int]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> tuple[bool, int, float]:
        now = self.clock()
        with self._lock:
            if len(self._windows) > MAX_TRACKED_CLIENTS:
                self._prune(now)

            started, count = self._windows.get(key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0

            count += 1
            self._windows[key] = (started, count)

        reset_in = max(0.0, started + self.window_seconds - now)
        allowed = count <= self.max_requests
        remaining = max(0, self.max_requests - count)
        return allowed, remaining, reset_in

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _prune(self, now: float) -> None:
        expired = [
            key
            for key, (started, _) in self._windows.items()
            if now - started >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Reject clients that exceed `max_requests` per window with 429.

    Clients are keyed by their address as seen by the server.
    """

    def __init__(self, app, counter: FixedWindowCounter):
        super().__init__(app)
        self.counter = counter

    async def dispatch(self, request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        allowed, remaining, reset_in = self.counter.hit(client)

        if not allowed:
            logger.warning("Rate limit exceeded for %s on %s", client, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content=error_body(RATE_LIMIT_MESSAGE),
                headers={"Retry-After": str(math.ceil(reset_in))},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.counter.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
