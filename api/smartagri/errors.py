"""Response envelope and exception handlers.

Every response body has the shape ``{"success": bool, "data": ..., "message":
..., "error": ...}``. Routers build successful envelopes with :func:`envelope`
and raise ``HTTPException`` for client errors; the handlers below turn
exceptions into failed envelopes.
"""

from typing import Any, Optional

import structlog
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from smartagri.config import settings

log = structlog.get_logger(__name__)


class SourceUnavailableError(Exception):
    """Raised when an external data source cannot produce a usable reading."""
    pass


def envelope(data: Any = None, message: Optional[str] = None, **extra: Any) -> dict:
    body: dict[str, Any] = {"success": True, "data": data}
    if message is not None:
        body["message"] = message
    body.update(extra)
    return body


def _failure(status_code: int, message: str, error: Any = None) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        return _failure(404, "API endpoint not found")
    return _failure(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _failure(400, "Invalid request parameters", exc.errors())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "unhandled_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    detail = None if settings.is_production else str(exc)
    return _failure(500, "Internal server error", detail)
