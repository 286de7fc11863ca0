"""
Order Service.

Read access to orders for buyers (their own orders) and sellers (the lines
of any order that contain their products).
"""

from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.cache import CacheKeys, get_cache, set_cache
from tatvivah.core.database.entities.orders import OrderItem
from tatvivah.core.database.repositories import (
    InventoryMovementRepository,
    OrderItemRepository,
    OrderRepository,
    ProductRepository,
    VariantRepository,
)
from tatvivah.core.errors import ApiError

from . import serializers


class OrderService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.orders = OrderRepository(session)
        self.order_items = OrderItemRepository(session)
        self.products = ProductRepository(session)
        self.variants = VariantRepository(session)
        self.movements = InventoryMovementRepository(session)

    async def _enrich(self, items: List[OrderItem]) -> List[Dict[str, Any]]:
        """Order lines with the product title and variant SKU attached."""
        products = await self.products.get_by_ids([i.product_id for i in items])
        variants = await self.variants.get_by_ids([i.variant_id for i in items])
        enriched = []
        for item in items:
            data = serializers.order_item(item)
            product = products.get(item.product_id)
            variant = variants.get(item.variant_id)
            data["productTitle"] = product.title if product else None
            data["variantSku"] = variant.sku if variant else None
            enriched.append(data)
        return enriched

    async def list_buyer_orders(self, user_id: str) -> Dict[str, Any]:
        cache_key = CacheKeys.buyer_orders(user_id)
        cached = await get_cache(cache_key)
        if cached:
            return cached

        orders = await self.orders.list_by_user(user_id)
        items = await self.order_items.list_by_orders([o.id for o in orders])
        response = {
            "orders": [
                {
                    "id": o.id,
                    "status": o.status,
                    "totalAmount": o.total_amount,
                    "createdAt": o.created_at,
                    "items": await self._enrich(items.get(o.id, [])),
                }
                for o in orders
            ]
        }
        await set_cache(cache_key, response)
        return response

    async def get_buyer_order(self, user_id: str, order_id: str) -> Dict[str, Any]:
        cache_key = CacheKeys.order_detail(order_id)
        cached = await get_cache(cache_key)
        if cached and cached.get("order", {}).get("userId") == user_id:
            return cached

        order = await self.orders.get_by_id(order_id)
        if order is None or order.user_id != user_id:
            raise ApiError.not_found("Order not found")

        data = serializers.order(order)
        data["items"] = await self._enrich(await self.order_items.list_by_order(order.id))
        data["inventoryMovements"] = [serializers.movement(m) for m in await self.movements.list_by_order(order.id)]
        response = {"order": data}
        await set_cache(cache_key, response)
        return response

    async def list_seller_orders(self, seller_id: str) -> Dict[str, Any]:
        rows = await self.order_items.list_by_seller(seller_id)
        enriched = await self._enrich([item for item, _ in rows])
        for data, (_, order) in zip(enriched, rows):
            data["order"] = {"id": order.id, "status": order.status, "createdAt": order.created_at}
        return {"orders": enriched}

    async def get_seller_order(self, seller_id: str, order_id: str) -> Dict[str, Any]:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise ApiError.not_found("Order not found")
        items = await self.order_items.list_by_order_and_seller(order.id, seller_id)
        if not items:
            raise ApiError.forbidden("No items in this order belong to you")
        return {
            "orderId": order.id,
            "status": order.status,
            "createdAt": order.created_at,
            "items": await self._enrich(items),
        }
