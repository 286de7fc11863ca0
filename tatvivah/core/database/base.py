"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the database layer using SQLModel.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


class UTCDateTime(TypeDecorator):
    """Timestamp column stored as naive UTC and loaded back timezone-aware.

    Aware values are converted to UTC on bind; naive values are taken as UTC.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect: Any) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value: Optional[datetime], dialect: Any) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def utc_now() -> datetime:
    """Current time in UTC, timezone-aware."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())
