"""Per-request structured logging.

Binds a request id into structlog's context so every log line emitted while
handling the request carries it, then logs one summary line on completion.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from smartagri.metrics import request_duration

log = structlog.get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            log.exception(
                "request_failed",
                method=request.method,
                path=request.url.path,
            )
            raise

        elapsed = time.monotonic() - start
        route = request.scope.get("route")
        path_template = getattr(route, "path", request.url.path)
        request_duration.labels(method=request.method, path=path_template).observe(elapsed)

        response.headers["X-Request-ID"] = request_id
        log.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(elapsed * 1000, 1),
        )
        return response
