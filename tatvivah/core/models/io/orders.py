"""
Cart and checkout request schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field

from .common import CamelModel


class CartItemCreate(CamelModel):
    product_id: str = Field(min_length=1)
    variant_id: str = Field(min_length=1)
    quantity: int = Field(ge=1, le=100)


class CartItemUpdate(CamelModel):
    quantity: int = Field(ge=1, le=100)


class CheckoutRequest(CamelModel):
    """Optional delivery contact and address captured on the order."""

    shipping_name: Optional[str] = Field(default=None, max_length=255)
    shipping_phone: Optional[str] = Field(default=None, max_length=32)
    shipping_email: Optional[EmailStr] = None
    shipping_address_line1: Optional[str] = Field(default=None, max_length=255)
    shipping_address_line2: Optional[str] = Field(default=None, max_length=255)
    shipping_city: Optional[str] = Field(default=None, max_length=128)
    shipping_notes: Optional[str] = Field(default=None, max_length=1000)
