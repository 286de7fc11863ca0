"""
Exception Handlers for the FastAPI Application.

Every failure leaves the API in the same envelope:

    {"success": false, "error": {"message": ..., "statusCode": ..., "details"?: ...}}

- ``ApiError``: its own status and message
- Request validation errors: 400 with the field errors joined into one message
- Starlette ``HTTPException``: unmatched routes become "Route not found"
- Anything else: logged with an error ID and returned as 500
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tatvivah.core.errors import ApiError
from tatvivah.core.logging_config import get_logger
from tatvivah.server.core.config import settings

logger = get_logger(__name__)


def _envelope(status_code: int, message: str, details=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ApiError(status_code, message, details).to_dict())


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {error.get('msg')}" if loc else str(error.get("msg")))
    message = ", ".join(parts) or "Validation failed"
    logger.warning(f"Validation failed for {request.method} {request.url.path}: {message}")
    return _envelope(400, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _envelope(404, "Route not found")
    return _envelope(exc.status_code, str(exc.detail))


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    Logs the full error context under a unique error ID and returns a 500
    envelope. Outside production the message carries the exception text.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with the error envelope
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    message = "Internal server error" if settings.is_production else (str(exc) or "Internal server error")
    return _envelope(500, message)


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
