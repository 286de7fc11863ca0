"""
Cart Service.

One cart per buyer, created on first use. Each variant appears at most once
per cart; adding an existing variant replaces its quantity.
"""

from typing import Any, Dict, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.cache import CacheKeys, get_cache, invalidate_cache, set_cache
from tatvivah.core.database.entities.carts import Cart, CartItem
from tatvivah.core.database.entities.catalog import ProductVariant
from tatvivah.core.database.repositories import (
    CartItemRepository,
    CartRepository,
    InventoryRepository,
    ProductRepository,
    VariantRepository,
)
from tatvivah.core.errors import ApiError
from tatvivah.core.models.io import CartItemCreate, CartItemUpdate


def _item(item: CartItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "cartId": item.cart_id,
        "productId": item.product_id,
        "variantId": item.variant_id,
        "quantity": item.quantity,
        "priceSnapshot": item.price_snapshot,
        "createdAt": item.created_at,
    }


class CartService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.carts = CartRepository(session)
        self.items = CartItemRepository(session)
        self.products = ProductRepository(session)
        self.variants = VariantRepository(session)
        self.inventory = InventoryRepository(session)

    async def get_cart(self, user_id: str) -> Dict[str, Any]:
        cache_key = CacheKeys.cart(user_id)
        cached = await get_cache(cache_key)
        if cached:
            return cached

        cart = await self.carts.get_by_user(user_id)
        if cart is None:
            cart = await self.carts.create(Cart(user_id=user_id))
            await self.session.commit()

        items = await self.items.list_by_cart(cart.id)
        products = await self.products.get_by_ids([i.product_id for i in items])
        variants = await self.variants.get_by_ids([i.variant_id for i in items])
        inventories = await self.inventory.get_by_variants([i.variant_id for i in items])

        lines: List[Dict[str, Any]] = []
        for item in items:
            line = _item(item)
            product = products.get(item.product_id)
            variant = variants.get(item.variant_id)
            inventory = inventories.get(item.variant_id)
            line["product"] = (
                {"id": product.id, "title": product.title, "sellerId": product.seller_id} if product else None
            )
            line["variant"] = (
                {
                    "id": variant.id,
                    "sku": variant.sku,
                    "price": variant.price,
                    "inventory": {"stock": inventory.stock if inventory else 0},
                }
                if variant
                else None
            )
            lines.append(line)

        response = {"cart": {"id": cart.id, "userId": cart.user_id, "items": lines}}
        await set_cache(cache_key, response)
        return response

    async def _check_stock(self, variant: ProductVariant, quantity: int) -> None:
        inventory = await self.inventory.get_by_variant(variant.id)
        available = inventory.stock if inventory else 0
        if quantity > available:
            raise ApiError.bad_request(f"Insufficient stock. Available: {available}, Requested: {quantity}")

    async def add_item(self, user_id: str, data: CartItemCreate) -> Dict[str, Any]:
        variant = await self.variants.get_by_id(data.variant_id)
        if variant is None:
            raise ApiError.not_found("Variant not found")
        if variant.product_id != data.product_id:
            raise ApiError.bad_request("Variant does not belong to specified product")
        await self._check_stock(variant, data.quantity)

        cart = await self.carts.find_or_create(user_id)
        item = await self.items.upsert(cart.id, data.product_id, variant.id, data.quantity, variant.price)
        await self.session.commit()
        await invalidate_cache(CacheKeys.cart(user_id))
        return {"message": "Item added to cart", "item": _item(item)}

    async def _owned_item(self, user_id: str, item_id: str, action: str) -> Tuple[CartItem, Cart]:
        item = await self.items.get_by_id(item_id)
        if item is None:
            raise ApiError.not_found("Cart item not found")
        cart = await self.carts.get_by_id(item.cart_id)
        if cart is None or cart.user_id != user_id:
            raise ApiError.forbidden(f"You do not have permission to {action} this item")
        return item, cart

    async def update_item(self, user_id: str, item_id: str, data: CartItemUpdate) -> Dict[str, Any]:
        item, _ = await self._owned_item(user_id, item_id, "update")
        variant = await self.variants.get_by_id(item.variant_id)
        if variant is None:
            raise ApiError.not_found("Variant not found")
        await self._check_stock(variant, data.quantity)

        item.quantity = data.quantity
        item.price_snapshot = variant.price
        item = await self.items.update(item)
        await self.session.commit()
        await invalidate_cache(CacheKeys.cart(user_id))
        return {"message": "Cart item updated", "item": _item(item)}

    async def remove_item(self, user_id: str, item_id: str) -> Dict[str, str]:
        item, _ = await self._owned_item(user_id, item_id, "remove")
        await self.items.delete(item.id)
        await self.session.commit()
        await invalidate_cache(CacheKeys.cart(user_id))
        return {"message": "Item removed from cart"}
