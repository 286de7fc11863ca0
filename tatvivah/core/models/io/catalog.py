"""
Catalog request schemas: categories, products, variants, and stock.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .common import CamelModel, ImageUrl


class CategoryCreate(CamelModel):
    name: str = Field(min_length=2)


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=2)
    is_active: Optional[bool] = None


class ProductCreate(CamelModel):
    category_id: str = Field(min_length=1)
    title: str = Field(min_length=3, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    images: Optional[List[ImageUrl]] = Field(default=None, min_length=1, max_length=5)
    is_published: bool = False


class ProductUpdate(CamelModel):
    category_id: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = Field(default=None, min_length=3, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    images: Optional[List[ImageUrl]] = Field(default=None, min_length=1, max_length=5)
    is_published: Optional[bool] = None


class VariantCreate(CamelModel):
    sku: str = Field(min_length=1, max_length=100)
    price: float = Field(gt=0)
    compare_at_price: Optional[float] = Field(default=None, gt=0)
    initial_stock: int = Field(default=0, ge=0)


class VariantUpdate(CamelModel):
    price: Optional[float] = Field(default=None, gt=0)
    compare_at_price: Optional[float] = Field(default=None, gt=0)


class StockUpdate(CamelModel):
    stock: int = Field(ge=0)
