"""
Shipment entities. Each seller ships their own items of an order separately.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Text
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class ShipmentStatus(str, Enum):
    CREATED = "CREATED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"


class Shipment(Base, table=True):
    """Table: shipments"""

    __tablename__ = "shipments"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    order_id: str = Field(foreign_key="orders.id", max_length=64, index=True)
    seller_id: str = Field(max_length=64, index=True)
    carrier: str = Field(max_length=100)
    tracking_number: str = Field(max_length=100)
    status: str = Field(default=ShipmentStatus.CREATED.value, max_length=16)
    shipped_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    delivered_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})


class ShipmentEvent(Base, table=True):
    """Table: shipment_events"""

    __tablename__ = "shipment_events"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    shipment_id: str = Field(foreign_key="shipments.id", max_length=64, index=True)
    status: str = Field(max_length=16)
    note: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
