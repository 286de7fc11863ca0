"""
Per-request timing.

Each response carries ``X-Process-Time`` (milliseconds). Timings go to
Logfire through ``log_api_request``; requests slower than ``SLOW_REQUEST_MS``
are logged as warnings and unhandled errors are logged with a traceback.
"""

import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from tatvivah.core.logging_config import get_logger
from tatvivah.core.monitoring import log_api_request

logger = get_logger(__name__)

SLOW_REQUEST_MS = 1000


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"

        try:
            response = await call_next(request)
        except Exception:
            elapsed = _elapsed_ms(started)
            logger.error(f"API request failed: {route} after {elapsed:.2f}ms", exc_info=True)
            log_api_request(method=request.method, path=request.url.path, status_code=500, duration_ms=elapsed)
            raise

        elapsed = _elapsed_ms(started)
        response.headers["X-Process-Time"] = f"{elapsed:.3f}"
        log_api_request(
            method=request.method, path=request.url.path, status_code=response.status_code, duration_ms=elapsed
        )

        if elapsed > SLOW_REQUEST_MS:
            logger.warning(f"Slow API request: {route} took {elapsed:.2f}ms (status {response.status_code})")
        else:
            logger.debug(f"{route} -> {response.status_code} in {elapsed:.2f}ms")
        return response
