"""
Inventory entities.

``Inventory`` holds the current stock of a variant; ``InventoryMovement`` is the
append-only ledger of reservations and releases made by orders.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class InventoryMovementType(str, Enum):
    RESERVE = "RESERVE"
    RELEASE = "RELEASE"
    DEDUCT = "DEDUCT"


class Inventory(Base, table=True):
    """Stock on hand for a variant.

    Table: inventory
    """

    __tablename__ = "inventory"
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_inventory_stock_non_negative"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    variant_id: str = Field(foreign_key="product_variants.id", max_length=64, unique=True, index=True)
    stock: int = Field(default=0)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})


class InventoryMovement(Base, table=True):
    """Stock change caused by an order.

    Table: inventory_movements
    """

    __tablename__ = "inventory_movements"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    variant_id: str = Field(max_length=64, index=True)
    order_id: str = Field(max_length=64, index=True)
    quantity: int
    type: str = Field(max_length=16)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
