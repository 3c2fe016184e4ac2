# =============================================================================
# app/middleware.py - Rate Limiting and Request Tracing
# =============================================================================
# HTTP middleware wrapped around every request:
# - RateLimitMiddleware: Per-client token bucket, answers 429 when empty
# - RequestTracingMiddleware: Request IDs and one access log line per request
#
# CORS is handled by Starlette's CORSMiddleware (configured in main.py).
# =============================================================================

import logging
import math
import time
import uuid
from typing import Callable

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


# =============================================================================
# Rate Limiting
# =============================================================================

class TokenBucketLimiter:
    """
    In-memory token buckets keyed by client.

    Each client starts with `burst_size` tokens. A request spends one token;
    tokens refill continuously at `per_second`.

    Example:
        limiter = TokenBucketLimiter(per_second=2, burst_size=8)
        wait = limiter.check("127.0.0.1")  # 0.0 when allowed
    """

    # Idle buckets are pruned once every this many checks
    PRUNE_EVERY = 1000

    def __init__(
        self,
        per_second: float,
        burst_size: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.per_second = per_second
        self.burst_size = burst_size
        self._clock = clock
        # client key -> (tokens, last refill time)
        self._buckets: dict[str, tuple[float, float]] = {}
        self._checks = 0

    def check(self, key: str) -> float:
        """
        Spend a token for `key`.

        Returns:
            0.0 if the request is allowed, otherwise the seconds until
            the next token is available
        """
        now = self._clock()
        tokens, last = self._buckets.get(key, (float(self.burst_size), now))
        tokens = min(float(self.burst_size), tokens + (now - last) * self.per_second)

        self._checks += 1
        if self._checks % self.PRUNE_EVERY == 0:
            self._prune(now)

        if tokens >= 1.0:
            self._buckets[key] = (tokens - 1.0, now)
            return 0.0

        self._buckets[key] = (tokens, now)
        return (1.0 - tokens) / self.per_second

    def _prune(self, now: float) -> None:
        """Forget clients whose bucket would already be full again."""
        refill_seconds = self.burst_size / self.per_second
        stale = [key for key, (_, last) in self._buckets.items() if now - last > refill_seconds]
        for key in stale:
            del self._buckets[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests from clients that ran out of tokens with a 429."""

    def __init__(self, app, per_second: float, burst_size: int, clock: Callable[[], float] = time.monotonic):
        super().__init__(app)
        self.limiter = TokenBucketLimiter(per_second, burst_size, clock)

    async def dispatch(self, request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        wait = self.limiter.check(client)
        if wait > 0:
            retry_after = max(1, math.ceil(wait))
            logger.warning(f"Rate limited {client} on {request.url.path}, retry in {retry_after}s")
            return PlainTextResponse(
                f"Too Many Requests! Wait for {retry_after}s",
                status_code=429,
                headers={"retry-after": str(retry_after), "x-ratelimit-after": str(retry_after)},
            )
        return await call_next(request)


# =============================================================================
# Tracing
# =============================================================================

class RequestTracingMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an ID and log method, path, status and duration.

    An incoming X-Request-ID is reused; otherwise one is generated. The ID
    is echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000.0
            logger.exception(
                f"{request.method} {request.url.path} failed after {duration_ms:.1f}ms [{request_id}]"
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000.0
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"in {duration_ms:.1f}ms [{request_id}]"
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
