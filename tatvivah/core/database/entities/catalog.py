"""
Catalog entities: categories, products, variants, and moderation.

A product belongs to one seller and one category and is sold through one or
more variants, each with its own SKU, price, and inventory row.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import JSON, Text
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class ModerationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Category(Base, table=True):
    """Product category.

    Table: categories
    """

    __tablename__ = "categories"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=255)
    slug: str = Field(max_length=255, unique=True, index=True)
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})


class Product(Base, table=True):
    """Seller listing.

    Table: products
    """

    __tablename__ = "products"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    seller_id: str = Field(foreign_key="users.id", max_length=64, index=True)
    category_id: str = Field(foreign_key="categories.id", max_length=64, index=True)
    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, sa_type=Text)
    images: list[str] = Field(default_factory=list, sa_type=JSON)
    is_published: bool = Field(default=False, index=True)
    deleted_by_admin: bool = Field(default=False, index=True)
    deleted_by_admin_reason: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Product(id={self.id}, title={self.title}, published={self.is_published})"


class ProductVariant(Base, table=True):
    """Purchasable SKU of a product.

    Table: product_variants
    """

    __tablename__ = "product_variants"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    product_id: str = Field(foreign_key="products.id", max_length=64, index=True)
    sku: str = Field(max_length=100, unique=True, index=True)
    price: float
    compare_at_price: Optional[float] = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})


class ProductModeration(Base, table=True):
    """Admin review state of a product.

    Table: product_moderations
    """

    __tablename__ = "product_moderations"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    product_id: str = Field(foreign_key="products.id", max_length=64, unique=True, index=True)
    status: str = Field(default=ModerationStatus.PENDING.value, max_length=16, index=True)
    reason: Optional[str] = Field(default=None, sa_type=Text)
    reviewed_by: Optional[str] = Field(default=None, max_length=64)
    reviewed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})
