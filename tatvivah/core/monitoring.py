"""
Logfire tracing for the TatVivah API.

When ``LOGFIRE_ENABLED`` is on and a ``LOGFIRE_TOKEN`` is present, the app is
instrumented (FastAPI routes, SQLAlchemy queries, outgoing httpx calls) and
the helpers below emit request metrics and business events. Otherwise every
function here returns without doing anything.
"""

import logging
import os
from typing import Any, Dict, Optional

import logfire
from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


LOGFIRE_ENABLED = _flag("LOGFIRE_ENABLED", "false")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "tatvivah-api")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "1.0.0")
LOGFIRE_TRACE_SQLALCHEMY = _flag("LOGFIRE_TRACE_SQLALCHEMY", "true")
LOGFIRE_TRACE_HTTPX = _flag("LOGFIRE_TRACE_HTTPX", "true")

_logfire_active = False


def initialize_logfire(app: Optional[FastAPI] = None) -> bool:
    """
    Configure Logfire and instrument the app and its clients.

    Args:
        app: The FastAPI app to trace, if any.

    Returns:
        Whether Logfire is now active. Configuration errors are logged, not raised.
    """
    global _logfire_active

    if not LOGFIRE_ENABLED:
        logger.info("Logfire disabled (LOGFIRE_ENABLED is off)")
        return False
    if not LOGFIRE_TOKEN:
        logger.warning("LOGFIRE_ENABLED is on but LOGFIRE_TOKEN is empty; tracing stays off")
        return False

    try:
        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
        )
        instrumented = []
        if LOGFIRE_TRACE_SQLALCHEMY:
            logfire.instrument_sqlalchemy()
            instrumented.append("sqlalchemy")
        if LOGFIRE_TRACE_HTTPX:
            logfire.instrument_httpx()
            instrumented.append("httpx")
        if app is not None:
            logfire.instrument_fastapi(app=app)
            instrumented.append("fastapi")
    except Exception as e:
        logger.error(f"Logfire setup failed: {e}", exc_info=True)
        return False

    _logfire_active = True
    logger.info(
        f"Logfire active for {LOGFIRE_SERVICE_NAME} ({LOGFIRE_ENVIRONMENT}); instrumented: {', '.join(instrumented) or 'none'}"
    )
    return True


def _emit(message: str, attributes: Dict[str, Any]) -> None:
    if not _logfire_active:
        return
    try:
        logfire.info(message, **attributes)
    except Exception as e:
        logger.debug(f"Dropped Logfire event {message!r}: {e}")


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """Send the timing of one HTTP request."""
    _emit(
        "API request completed",
        {"method": method, "path": path, "status_code": status_code, "duration_ms": duration_ms},
    )


def log_business_event(event: str, context: Optional[Dict[str, Any]] = None) -> None:
    """Record a marketplace event such as ``order_placed`` with its attributes."""
    _emit(event, context or {})
