"""
LocalPros Backend — Request Logging Middleware
================================================

What:  One access log line per HTTP request.
How:   Times the downstream call and logs method, path, status, duration,
       request id and client IP on the `localpros.access` logger, at a
       level chosen by status class (5xx ERROR, 4xx WARNING, else INFO).
Who:   Runs after RequestIDMiddleware and RateLimitMiddleware.

Request bodies, uploaded files and Authorization headers are never logged.
/health is skipped: probes would drown the useful lines.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from localpros.middleware.rate_limit import client_ip
from localpros.middleware.request_id import request_id_var

logger = logging.getLogger("localpros.access")

SKIPPED_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIPPED_PATHS:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        rid = request_id_var.get("")
        ip = client_ip(request)
        status = response.status_code
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": ip,
            },
        )
        return response
