"""
Product review and bestseller entities.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, Text
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class Review(Base, table=True):
    """Table: reviews"""

    __tablename__ = "reviews"
    __table_args__ = (CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    product_id: str = Field(foreign_key="products.id", max_length=64, index=True)
    user_id: str = Field(foreign_key="users.id", max_length=64, index=True)
    rating: int
    text: str = Field(sa_type=Text)
    images: list[str] = Field(default_factory=list, sa_type=JSON)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)


class Bestseller(Base, table=True):
    """Admin-curated product highlighted on the storefront.

    Table: bestsellers
    """

    __tablename__ = "bestsellers"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    product_id: str = Field(foreign_key="products.id", max_length=64, unique=True, index=True)
    position: int = Field(default=0, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})
