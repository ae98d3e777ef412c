"""Error envelope shared by every API error response.

Domain code raises ``DealDeskError`` subclasses instead of ``HTTPException``;
the handlers below turn those, plain HTTP errors and unexpected exceptions
into the same ``{error, message, detail, request_id}`` body.
"""
from typing import Any

import sentry_sdk
import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()


class ErrorResponse(BaseModel):
    error: str
    message: str
    detail: Any = None
    request_id: str = "unknown"


class DealDeskError(Exception):
    """A request that cannot be served, with the status it should map to."""

    error: str = "bad_request"

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _request_id(request: Request) -> str:
    return request.headers.get("x-request-id", "unknown")


def _error_json(
    status_code: int,
    body: ErrorResponse,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def domain_exception_handler(request: Request, exc: DealDeskError) -> JSONResponse:
    logger.info(
        "request_rejected",
        error=exc.error,
        status_code=exc.status_code,
        message=exc.message,
        path=request.url.path,
    )
    return _error_json(
        exc.status_code,
        ErrorResponse(
            error=exc.error,
            message=exc.message,
            # Plain-string detail, same as HTTPException responses
            detail=exc.message,
            request_id=_request_id(request),
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        error = exc.detail.get("error", f"http_{exc.status_code}")
        message = exc.detail.get("message", str(exc.detail))
        detail: Any = exc.detail.get("detail")
    else:
        error = f"http_{exc.status_code}"
        message = str(exc.detail)
        detail = exc.detail

    return _error_json(
        exc.status_code,
        ErrorResponse(error=error, message=message, detail=detail, request_id=_request_id(request)),
        headers=dict(exc.headers or {}),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        request_id=request_id,
    )
    sentry_sdk.capture_exception(exc)

    return _error_json(
        500,
        ErrorResponse(
            error="internal_server_error",
            message="An unexpected error occurred. Please try again later.",
            request_id=request_id,
        ),
    )
