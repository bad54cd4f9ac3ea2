"""Correlation ID middleware: one id per request, echoed back and used as traceId"""
import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from wms.shared.context import reset_correlation_id, set_correlation_id

CORRELATION_HEADER = "X-Correlation-ID"

# Client ids are reflected into headers and logs, so only plain tokens are kept
_VALID_CORRELATION_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_correlation_id(header_value: str | None) -> str:
    """Client supplied id when it is well formed, otherwise a fresh uuid4"""
    if header_value and _VALID_CORRELATION_ID.match(header_value):
        return header_value
    return str(uuid.uuid4())


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        correlation_id = resolve_correlation_id(request.headers.get(CORRELATION_HEADER))
        request.state.correlation_id = correlation_id

        token = set_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
