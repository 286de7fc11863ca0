"""
Logging setup for the TatVivah API.

Every module logs through ``get_logger(__name__)``. ``setup_logging`` is
called once by the app and wires:
- a console handler at the configured level
- an optional ``tatvivah.log`` file handler that keeps DEBUG records
- quieter levels for chatty libraries (SQLAlchemy, httpx, asyncio)
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

LOG_FILE_NAME = "tatvivah.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SIMPLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

DETAILED_FORMAT = "%(asctime)s %(levelname)-8s %(name)s (%(filename)s:%(lineno)d in %(funcName)s) %(message)s"

JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"location": "%(filename)s:%(lineno)d", "message": "%(message)s"}'
)

FORMATS = {"simple": SIMPLE_FORMAT, "detailed": DETAILED_FORMAT, "json": JSON_FORMAT}

MODULE_LOG_LEVELS = {
    "tatvivah": "INFO",
    "tatvivah.server.api": "INFO",
    "tatvivah.server.services": "DEBUG",
    "tatvivah.core.cache": "INFO",
    "tatvivah.notifications": "DEBUG",
    "tatvivah.payments": "DEBUG",
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def _load_defaults() -> tuple:
    """Read the logging defaults from settings, or from the environment when
    settings cannot be built yet (e.g. a missing JWT secret at import time)."""
    try:
        from tatvivah.server.core.config import settings
    except Exception:
        return (
            os.getenv("TATVIVAH_LOG_LEVEL", "INFO"),
            os.getenv("LOG_FORMAT", "detailed"),
            os.getenv("LOG_FILE_DIR", "logs"),
            os.getenv("ENABLE_FILE_LOGGING", "").lower() in ("1", "true", "yes"),
        )
    return settings.log_level, settings.log_format, settings.log_file_dir, settings.enable_file_logging


LOG_LEVEL, LOG_FORMAT, LOG_FILE_DIR, ENABLE_FILE_LOGGING = _load_defaults()


def _handlers(level: str, formatter: logging.Formatter, with_file: bool) -> List[logging.Handler]:
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    handlers: List[logging.Handler] = [console]

    if with_file:
        log_dir = Path(LOG_FILE_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        to_file = logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8")
        to_file.setLevel(logging.DEBUG)
        to_file.setFormatter(formatter)
        handlers.append(to_file)
    return handlers


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Install the application's log handlers on the root logger.

    Args:
        log_level: Console level; defaults to ``TATVIVAH_LOG_LEVEL``
        log_format: ``simple``, ``detailed`` or ``json``; unknown names fall back to detailed
        enable_file: Allow the file handler; it is only added when ``ENABLE_FILE_LOGGING`` is on too
    """
    level = (log_level or LOG_LEVEL).upper()
    format_name = log_format or LOG_FORMAT
    formatter = logging.Formatter(FORMATS.get(format_name, DETAILED_FORMAT), datefmt=DATE_FORMAT)
    with_file = bool(enable_file and ENABLE_FILE_LOGGING)

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.setLevel(logging.DEBUG)
    for handler in _handlers(level, formatter, with_file):
        root.addHandler(handler)

    for name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(module_level)

    root.info(f"Logging ready (level={level}, format={format_name}, file={with_file})")


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name``, usually the caller's ``__name__``."""
    return logging.getLogger(name)
