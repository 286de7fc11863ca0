"""
Cart repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.carts import Cart, CartItem
from .base import SQLModelRepository


class CartRepository(SQLModelRepository[Cart]):
    """Repository for user carts (one per user)."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Cart)

    async def get_by_user(self, user_id: str) -> Optional[Cart]:
        result = await self.session.execute(select(Cart).where(Cart.user_id == user_id))
        return result.scalars().first()

    async def find_or_create(self, user_id: str) -> Cart:
        cart = await self.get_by_user(user_id)
        if cart is None:
            cart = await self.create(Cart(user_id=user_id))
        return cart


class CartItemRepository(SQLModelRepository[CartItem]):
    """Repository for cart lines."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CartItem)

    async def list_by_cart(self, cart_id: str) -> List[CartItem]:
        stmt = select(CartItem).where(CartItem.cart_id == cart_id).order_by(CartItem.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_cart_and_variant(self, cart_id: str, variant_id: str) -> Optional[CartItem]:
        stmt = select(CartItem).where(CartItem.cart_id == cart_id, CartItem.variant_id == variant_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def upsert(self, cart_id: str, product_id: str, variant_id: str, quantity: int, price: float) -> CartItem:
        """Insert a line or replace the quantity and price of the existing one."""
        item = await self.get_by_cart_and_variant(cart_id, variant_id)
        if item is None:
            item = CartItem(
                cart_id=cart_id, product_id=product_id, variant_id=variant_id, quantity=quantity, price_snapshot=price
            )
        else:
            item.quantity = quantity
            item.price_snapshot = price
        return await self.update(item)

    async def clear(self, cart_id: str) -> None:
        await self.session.execute(delete(CartItem).where(CartItem.cart_id == cart_id))

    async def delete_by_product(self, product_id: str) -> None:
        await self.session.execute(delete(CartItem).where(CartItem.product_id == product_id))
