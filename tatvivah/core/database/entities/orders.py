"""
Order entities.

Order items keep a snapshot of the seller, product, variant, and unit price at
checkout time so later catalog edits never change an existing order.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Text
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class OrderStatus(str, Enum):
    PLACED = "PLACED"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class Order(Base, table=True):
    """Table: orders"""

    __tablename__ = "orders"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", max_length=64, index=True)
    status: str = Field(default=OrderStatus.PLACED.value, max_length=16, index=True)
    total_amount: float
    shipping_fee: float = Field(default=0)

    shipping_name: Optional[str] = Field(default=None, max_length=255)
    shipping_phone: Optional[str] = Field(default=None, max_length=32)
    shipping_email: Optional[str] = Field(default=None, max_length=255)
    shipping_address_line1: Optional[str] = Field(default=None, max_length=255)
    shipping_address_line2: Optional[str] = Field(default=None, max_length=255)
    shipping_city: Optional[str] = Field(default=None, max_length=128)
    shipping_notes: Optional[str] = Field(default=None, sa_type=Text)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Order(id={self.id}, status={self.status}, total={self.total_amount})"


class OrderItem(Base, table=True):
    """Table: order_items"""

    __tablename__ = "order_items"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    order_id: str = Field(foreign_key="orders.id", max_length=64, index=True)
    seller_id: str = Field(max_length=64, index=True)
    product_id: str = Field(max_length=64)
    variant_id: str = Field(max_length=64)
    quantity: int
    price_snapshot: float
