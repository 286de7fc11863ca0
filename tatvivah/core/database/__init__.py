"""
Database layer for TatVivah.

Structure:
- entities/: SQLModel table models organized by business domain
- repositories/: Data access layer organized by business domain
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, sessionmaker, create_all)
"""

from .base import Base, UTCDateTime, new_id, utc_now
from .session import (
    async_session_maker,
    dispose_engine,
    engine,
    get_session,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "dispose_engine",
    "engine",
    "get_session",
    "new_id",
    "UTCDateTime",
    "utc_now",
]
