"""
Cart entities. Every user owns at most one cart; a variant appears at most
once per cart.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class Cart(Base, table=True):
    """Table: carts"""

    __tablename__ = "carts"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", max_length=64, unique=True, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})


class CartItem(Base, table=True):
    """Table: cart_items"""

    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("cart_id", "variant_id", name="uq_cart_items_cart_variant"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    cart_id: str = Field(foreign_key="carts.id", max_length=64, index=True)
    product_id: str = Field(max_length=64)
    variant_id: str = Field(max_length=64, index=True)
    quantity: int
    price_snapshot: float
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
