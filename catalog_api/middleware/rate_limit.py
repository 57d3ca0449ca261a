"""
Product Catalog API: Rate Limiting Middleware
==============================================

What:  Per-client sliding window limiter for selected path prefixes.
Why:   Write-heavy admin surfaces (categories by default) are protected from
       abuse without slowing down the rest of the API.
How:   Keeps, per client IP, the timestamps of requests inside the window.

Algorithm: Sliding Window Log
    1. Drop timestamps older than `rate_limit_window` seconds
    2. If the remaining count >= `rate_limit_requests`, reject with 429
    3. Otherwise record the request and let it through

Response headers (IETF RateLimit header fields, draft 6):
    RateLimit-Limit:      max requests per window
    RateLimit-Remaining:  requests left in the current window
    RateLimit-Reset:      seconds until the oldest counted request expires
    Retry-After:          on 429 only

State is in-process, so limits are per worker. Settings are read on every
request, which lets tests lower the limit on a live app.
"""

import logging
import math
import time
from collections import defaultdict, deque
from typing import Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from catalog_api.config import settings

logger = logging.getLogger(__name__)


def _is_limited_path(path: str) -> bool:
    for prefix in settings.rate_limit_paths_list:
        prefix = prefix.rstrip("/")
        if path == prefix or path.startswith(prefix + "/"):
            return True
    return False


class RateLimitMiddleware(BaseHTTPMiddleware):

    # Sweep idle clients after this many tracked requests
    CLEANUP_EVERY = 1000

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._requests: Dict[str, Deque[float]] = defaultdict(deque)
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not _is_limited_path(request.url.path):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        limit = settings.rate_limit_requests
        window = settings.rate_limit_window
        now = time.time()

        timestamps = self._requests[client_ip]
        while timestamps and timestamps[0] <= now - window:
            timestamps.popleft()

        if len(timestamps) >= limit:
            retry_after = max(1, math.ceil(timestamps[0] + window - now))
            logger.warning(
                "Rate limit exceeded for %s on %s: %d requests in %ds window",
                client_ip,
                request.url.path,
                len(timestamps),
                window,
            )
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests, please try again later."},
                headers={
                    **self._headers(limit, 0, retry_after),
                    "Retry-After": str(retry_after),
                },
            )

        timestamps.append(now)
        remaining = limit - len(timestamps)
        reset = max(1, math.ceil(timestamps[0] + window - now))

        self._seen += 1
        if self._seen % self.CLEANUP_EVERY == 0:
            self._cleanup_inactive_clients(now - window)

        response = await call_next(request)
        response.headers.update(self._headers(limit, remaining, reset))
        return response

    @staticmethod
    def _headers(limit: int, remaining: int, reset: int) -> Dict[str, str]:
        return {
            "RateLimit-Limit": str(limit),
            "RateLimit-Remaining": str(remaining),
            "RateLimit-Reset": str(reset),
        }

    def _cleanup_inactive_clients(self, window_start: float) -> None:
        inactive = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive:
            del self._requests[ip]
        if inactive:
            logger.debug("Cleaned up %d inactive rate-limit entries", len(inactive))
