"""Security headers and request size limits"""
from collections.abc import Callable

from fastapi import Response, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from wms.presentation.api.errors import error_body
from wms.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

DOCS_PATHS = frozenset({"/docs", "/redoc", "/openapi.json"})

BASE_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), geolocation=(), microphone=(), payment=(), usb=()",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Cache-Control": "no-store",
}

# The API only serves JSON
API_CSP = "default-src 'none'; frame-ancestors 'none'; base-uri 'none';"

# Swagger UI and ReDoc load their assets from a CDN
DOCS_CSP = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https:; "
    "frame-ancestors 'none';"
)

HSTS = "max-age=63072000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to every response.

    HSTS is sent on https requests, or on every request when ``force_hsts``
    is set (production behind a TLS-terminating proxy).
    """

    def __init__(self, app, force_hsts: bool = False) -> None:
        super().__init__(app)
        self.force_hsts = force_hsts

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        for name, value in BASE_HEADERS.items():
            response.headers.setdefault(name, value)

        is_docs = request.url.path in DOCS_PATHS
        response.headers["Content-Security-Policy"] = DOCS_CSP if is_docs else API_CSP
        if is_docs:
            del response.headers["Cache-Control"]

        if self.force_hsts or request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = HSTS

        if "server" in response.headers:
            del response.headers["server"]

        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared Content-Length exceeds ``max_request_size``"""

    def __init__(self, app, max_request_size: int = 10 * 1024 * 1024) -> None:
        super().__init__(app)
        self.max_request_size = max_request_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        declared = request.headers.get("content-length")
        if not declared:
            return await call_next(request)

        try:
            size = int(declared)
        except ValueError:
            logger.warning("Rejected request with Content-Length %r", declared)
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content=error_body(status.HTTP_400_BAD_REQUEST, "Invalid Content-Length header"),
            )

        if size > self.max_request_size:
            logger.warning(
                "Rejected %d byte request to %s from %s (limit %d)",
                size,
                request.url.path,
                request.client.host if request.client else "unknown",
                self.max_request_size,
            )
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content=error_body(
                    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    f"Request body too large. Maximum size: {self.max_request_size} bytes",
                ),
            )

        return await call_next(request)
