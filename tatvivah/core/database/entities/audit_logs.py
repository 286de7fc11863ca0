"""
Audit log entity. One row per admin action.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class AuditEntityType(str, Enum):
    USER = "USER"
    PRODUCT = "PRODUCT"
    ORDER = "ORDER"
    PAYMENT = "PAYMENT"


class AuditLog(Base, table=True):
    """Table: audit_logs"""

    __tablename__ = "audit_logs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    actor_id: str = Field(max_length=64, index=True)
    action: str = Field(max_length=64)
    entity_type: str = Field(max_length=16, index=True)
    entity_id: str = Field(max_length=64, index=True)
    meta: Optional[dict[str, Any]] = Field(default=None, sa_type=JSON, sa_column_kwargs={"name": "metadata"})
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
