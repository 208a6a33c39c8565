"""
RoomBooking Backend — Rate Limiting Middleware
===============================================

What:  Per-IP sliding-window rate limit (RATE_LIMIT_REQUESTS per
       RATE_LIMIT_WINDOW seconds).
How:   Keeps a deque of request timestamps per client IP in process memory.
       Timestamps older than the window are dropped on each request; a full
       deque answers 429 with Retry-After set to when the oldest entry ages out.

Scope:
    Single process only. Each uvicorn worker keeps its own counters.
    /health and the API docs are never limited. RequestIDMiddleware runs
    outside this one, so a 429 still carries requestId and X-Request-ID.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from roombooking.config import settings
from roombooking.exceptions import RateLimitExceededError
from roombooking.schemas.common import error_body

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding window rate limiter keyed by client IP."""

    EXCLUDED_PATHS = frozenset({"/health", "/apidoc", "/apidoc-json", "/redoc"})

    # Sweep idle clients every this many admitted requests
    SWEEP_EVERY = 1000

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(app, **kwargs)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._admitted = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        window_start = now - self.window_seconds

        hits = self._hits[client_ip]
        while hits and hits[0] <= window_start:
            hits.popleft()

        if len(hits) >= self.max_requests:
            retry_after = int(hits[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip, len(hits), self.window_seconds,
            )
            return self._reject(RateLimitExceededError(retry_after=retry_after))

        hits.append(now)
        self._admitted += 1
        if self._admitted % self.SWEEP_EVERY == 0:
            self._sweep(window_start)

        return await call_next(request)

    @staticmethod
    def _reject(exc: RateLimitExceededError) -> JSONResponse:
        # Answered here, before routing, so app exception handlers never see it
        return JSONResponse(
            status_code=429,
            content=error_body("rate_limit_exceeded", exc.message, exc.context),
            headers={"Retry-After": str(exc.retry_after)},
        )

    def _sweep(self, window_start: float) -> None:
        idle = [ip for ip, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for ip in idle:
            del self._hits[ip]
        if idle:
            logger.debug("Dropped rate-limit state for %d idle client(s)", len(idle))
