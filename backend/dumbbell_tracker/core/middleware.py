"""Request logging for dashboard and sensor-bridge traffic."""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import structlog

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
ELAPSED_HEADER = "X-Response-Time-Ms"

# Health checks are not logged at all
SILENT_PREFIXES = ("/health",)
# The sensor bridge posts one request per rep
HIGH_VOLUME_PREFIXES = ("/api/reps",)


def _log_method(path: str):
    if path.startswith(SILENT_PREFIXES):
        return None
    if path.startswith(HIGH_VOLUME_PREFIXES):
        return logger.debug
    return logger.info


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Binds a request id to the log context and reports each request's outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        path = request.url.path
        log = _log_method(path)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=path,
            client_ip=request.client.host if request.client else None,
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "request_failed",
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                error=str(e),
            )
            raise

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        if log is not None:
            log("request_handled", status_code=response.status_code, duration_ms=elapsed_ms)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[ELAPSED_HEADER] = str(elapsed_ms)
        return response
