"""
Product Catalog API: Request Logging Middleware
================================================

What:  One access-log line per request: method, path, status, duration,
       request id, client address and (when authenticated) the user id.
Why:   Replaces uvicorn's access log, which has no request id or user.

Log level follows the status class:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Never logged: request bodies (passwords) and the Authorization header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from catalog_api.middleware.request_id import request_id_var

logger = logging.getLogger("catalog.access")

QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        client_ip = request.client.host if request.client else "unknown"
        identity = getattr(request.state, "user", None)
        user_id = identity.id if identity is not None else "-"
        rid = request_id_var.get("")

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s user=%s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            user_id,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "user_id": user_id,
            },
        )
        return response
