"""Per-client rate limiting middleware for Starlette using throttled-py."""

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from throttled import RateLimiterType, Throttled, rate_limiter, store

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60.0


def extract_client_ip(request: Request) -> str:
    """Extract the client IP, preferring the first X-Forwarded-For entry.

    throttled-py does not parse X-Forwarded-For, so the original client is
    resolved here when running behind a reverse proxy.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()
        if client_ip:
            return client_ip

    if request.client and request.client.host:
        return request.client.host

    logger.warning("Could not determine client IP, using 'unknown'")
    return "unknown"


def retry_after_seconds(result: Any) -> float:
    """Read the retry delay from a throttled-py result, defaulting to a minute."""
    state = getattr(result, "state", None)
    retry_after = getattr(state, "retry_after", None)
    if retry_after is None:
        retry_after = getattr(result, "retry_after", None)
    try:
        return float(retry_after) if retry_after is not None else DEFAULT_RETRY_AFTER_SECONDS
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER_SECONDS


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Limits HTTP requests per client IP with a token bucket.

    WebSocket traffic is not affected; paths in ``exempt_paths`` (health
    checks) are never limited.
    """

    def __init__(
        self,
        app: Callable,
        requests_per_minute: int = 100,
        exempt_paths: Iterable[str] = ("/healthz",),
    ) -> None:
        """Initialize rate limiting middleware.

        Args:
            app: The ASGI application to wrap.
            requests_per_minute: Maximum number of requests allowed per IP per minute.
            exempt_paths: Request paths that bypass the limit.
        """
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.exempt_paths = frozenset(exempt_paths)
        self.quota = rate_limiter.per_min(requests_per_minute, burst=requests_per_minute)
        self.rate_limiter_store = store.MemoryStore()
        logger.info(f"Rate limiting enabled: {requests_per_minute} requests per minute per IP")

    def is_limited(self, client_ip: str) -> tuple[bool, float]:
        """Consume one token for the client.

        Returns:
            Whether the request must be rejected, and the retry delay in seconds.
        """
        throttle = Throttled(
            key=client_ip,
            using=RateLimiterType.TOKEN_BUCKET.value,
            quota=self.quota,
            store=self.rate_limiter_store,
        )
        result = throttle.limit()
        if result.limited:
            return True, retry_after_seconds(result)
        return False, 0.0

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Reject the request with 429 when the client exhausted its quota."""
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        client_ip = extract_client_ip(request)
        limited, retry_after = self.is_limited(client_ip)
        if limited:
            logger.warning(f"Rate limit exceeded for IP {client_ip}, retry after {retry_after}s")
            return Response(
                content="Rate limit exceeded. Please try again later.",
                status_code=429,
                headers={"Retry-After": str(int(retry_after))},
            )

        response: Response = await call_next(request)
        return response
