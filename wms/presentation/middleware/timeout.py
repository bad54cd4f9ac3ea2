"""Request deadline middleware"""

import asyncio
import time
from collections.abc import Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from wms.presentation.api.errors import error_body
from wms.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

PROCESS_TIME_HEADER = "X-Process-Time"


class TimeoutMiddleware(BaseHTTPMiddleware):
    """
    Cancel handlers that run past the deadline and answer 504.

    The cancelled handler's transaction is rolled back by its session
    context, so a timed out write leaves nothing behind.
    """

    def __init__(self, app, timeout: float = 30.0):
        super().__init__(app)
        self.timeout = timeout

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()

        try:
            response = await asyncio.wait_for(call_next(request), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "%s %s exceeded the %.1fs deadline", request.method, request.url.path, self.timeout
            )
            return JSONResponse(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                content=error_body(
                    status.HTTP_504_GATEWAY_TIMEOUT,
                    f"Request did not complete within {self.timeout:g} seconds",
                ),
            )

        response.headers[PROCESS_TIME_HEADER] = f"{time.perf_counter() - started:.4f}"
        return response
