"""
Admin, review, and bestseller request schemas.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .common import CamelModel, ImageUrl


class ProductRejectRequest(CamelModel):
    reason: str = Field(min_length=1, max_length=500)


class ProductDeleteRequest(CamelModel):
    reason: Optional[str] = Field(default=None, max_length=500)


class BestsellerCreate(CamelModel):
    product_id: str = Field(min_length=1)
    position: Optional[int] = Field(default=None, ge=0)


class BestsellerUpdate(CamelModel):
    position: int = Field(ge=0)


class ReviewCreate(CamelModel):
    rating: int = Field(ge=1, le=5)
    text: str = Field(min_length=1, max_length=2000)
    images: List[ImageUrl] = Field(default_factory=list, max_length=3)
