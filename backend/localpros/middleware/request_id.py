"""
LocalPros Backend — Request ID Middleware
===========================================

What:  Assigns a correlation id to every request and echoes it back.
How:   Reuses the client's X-Request-ID header when present, otherwise
       generates an 8-character id; stores it in a ContextVar (for loggers
       and exception handlers) and in request.state (for route handlers).
Who:   Outermost application middleware.

The mobile app shows the id in error toasts, so support can match a user's
report to the server log line.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_CLIENT_ID_LENGTH = 64

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER, "").strip()[:MAX_CLIENT_ID_LENGTH]
        if not rid:
            rid = new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
