"""
Error envelope and exception handlers.

Every failing request answers with the same JSON shape:
``{statusCode, message, errors?, timestamp, traceId}`` where ``traceId`` is
the request's correlation id.
"""

from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from wms.application.result import ErrorType, Result
from wms.domain.exceptions import (AuthenticationException,
                                   DuplicateResourceException,
                                   EntityStateException,
                                   PermissionDeniedError,
                                   ResourceNotFoundException,
                                   RoleInUseException,
                                   SystemRoleModificationError,
                                   TenantContextException,
                                   ValidationException, WmsException)
from wms.presentation.api.v1.schemas.common import ErrorResponse
from wms.presentation.middleware.correlation import CORRELATION_HEADER
from wms.shared.context import get_correlation_id
from wms.shared.telemetry.logging import get_logger
from wms.shared.utils import utc_now

logger = get_logger(__name__)

ERROR_TYPE_STATUS: dict[ErrorType, int] = {
    ErrorType.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorType.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    ErrorType.DOMAIN: status.HTTP_400_BAD_REQUEST,
    ErrorType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorType.FORBIDDEN: status.HTTP_403_FORBIDDEN,
}

# Checked in order, so subclasses must precede their bases
EXCEPTION_STATUS: list[tuple[type[WmsException], int]] = [
    (AuthenticationException, status.HTTP_401_UNAUTHORIZED),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ResourceNotFoundException, status.HTTP_404_NOT_FOUND),
    (TenantContextException, status.HTTP_400_BAD_REQUEST),
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (DuplicateResourceException, status.HTTP_400_BAD_REQUEST),
    (SystemRoleModificationError, status.HTTP_400_BAD_REQUEST),
    (RoleInUseException, status.HTTP_400_BAD_REQUEST),
    (EntityStateException, status.HTTP_400_BAD_REQUEST),
]


def error_body(
    status_code: int,
    message: str,
    errors: dict[str, list[str]] | list[str] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    """JSON-ready error envelope"""
    envelope = ErrorResponse(
        status_code=status_code,
        message=message,
        errors=errors,
        timestamp=utc_now(),
        trace_id=trace_id or get_correlation_id() or None,
    )
    return envelope.model_dump(mode="json", by_alias=True, exclude_none=True)


def error_response(
    status_code: int,
    message: str,
    errors: dict[str, list[str]] | list[str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_body(status_code, message, errors),
        headers=headers,
    )


def failure_response(result: Result[Any]) -> JSONResponse:
    """Translate a failed service Result into the error envelope"""
    error_type = result.error_type or ErrorType.VALIDATION
    status_code = ERROR_TYPE_STATUS[error_type]
    headers = {"WWW-Authenticate": "Bearer"} if error_type is ErrorType.AUTHENTICATION else None
    return error_response(status_code, result.error or "Request failed", result.errors, headers)


def status_for_exception(exc: WmsException) -> int:
    for exc_type, status_code in EXCEPTION_STATUS:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def wms_exception_handler(request: Request, exc: WmsException) -> JSONResponse:
    status_code = status_for_exception(exc)
    errors: dict[str, list[str]] | None = None
    if isinstance(exc, ValidationException) and exc.field:
        errors = {exc.field: [exc.message]}
    logger.info("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return error_response(status_code, exc.message, errors)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Pydantic request errors as a field -> messages map"""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "request"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return error_response(
        status.HTTP_400_BAD_REQUEST, "One or more validation errors occurred", errors
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(
        exc.status_code,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(
        "Rate limit exceeded on %s from %s",
        request.url.path,
        request.client.host if request.client else "unknown",
    )
    return error_response(
        status.HTTP_429_TOO_MANY_REQUESTS, f"Rate limit exceeded: {exc.detail}"
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside the correlation middleware, whose contextvar is already reset
    trace_id = getattr(request.state, "correlation_id", None) or request.headers.get(
        CORRELATION_HEADER
    )
    logger.exception(
        "Unhandled error on %s %s (trace_id: %s)", request.method, request.url.path, trace_id
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred",
            trace_id=trace_id,
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WmsException, wms_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
