"""
Request tracing for the suggestion API.

Each request is tagged with a request id (the caller's ``X-Request-ID`` or a
fresh short one) that is bound to the structlog context, so the engine's
ranking and scoring-failure events share it. The id is echoed back in the
response headers.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from core.logging import bind_context, clear_context, get_logger


logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Health checks are polled constantly; they are traced but not logged
UNLOGGED_PATHS = frozenset({"/health", "/live", "/ready"})


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Bind a request id, log the outcome with timing, echo the id."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        path = request.url.path
        bind_context(request_id=request_id, method=request.method, path=path)
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=_elapsed_ms(start),
            )
            raise
        finally:
            clear_context()

        if path not in UNLOGGED_PATHS:
            logger.info(
                "Request completed",
                request_id=request_id,
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=_elapsed_ms(start),
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
