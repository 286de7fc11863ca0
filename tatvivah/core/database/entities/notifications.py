"""
Notification entities.

A ``Notification`` is written as PENDING when a business event happens and is
moved to SENT by the dispatcher. Every delivery attempt is recorded as a
``NotificationEvent``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, Text
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class NotificationType(str, Enum):
    ORDER_PLACED = "ORDER_PLACED"
    ORDER_SHIPPED = "ORDER_SHIPPED"
    ORDER_DELIVERED = "ORDER_DELIVERED"
    SELLER_NEW_ORDER = "SELLER_NEW_ORDER"
    SELLER_APPROVED = "SELLER_APPROVED"
    SELLER_PRODUCT_REJECTED = "SELLER_PRODUCT_REJECTED"
    ADMIN_ALERT = "ADMIN_ALERT"


class NotificationChannel(str, Enum):
    EMAIL = "EMAIL"


class NotificationStatus(str, Enum):
    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"


class Notification(Base, table=True):
    """Table: notifications"""

    __tablename__ = "notifications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: Optional[str] = Field(default=None, max_length=64, index=True)
    role: Optional[str] = Field(default=None, max_length=16)
    type: str = Field(max_length=32, index=True)
    channel: str = Field(default=NotificationChannel.EMAIL.value, max_length=16)
    status: str = Field(default=NotificationStatus.PENDING.value, max_length=16, index=True)
    subject: Optional[str] = Field(default=None, max_length=255)
    content: str = Field(sa_type=Text)
    meta: dict[str, Any] = Field(default_factory=dict, sa_type=JSON, sa_column_kwargs={"name": "metadata"})
    sent_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)


class NotificationEvent(Base, table=True):
    """Table: notification_events"""

    __tablename__ = "notification_events"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    notification_id: str = Field(foreign_key="notifications.id", max_length=64, index=True)
    provider: str = Field(max_length=32)
    status: str = Field(max_length=16)
    provider_message_id: Optional[str] = Field(default=None, max_length=128)
    error: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
