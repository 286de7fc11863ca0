"""
Checkout Service.

Turns a buyer's cart into an order in a single transaction: validate stock,
snapshot prices, create the order, reserve inventory, and empty the cart.
Notifications go out only after the transaction commits, and their failures
never fail the checkout.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.cache import CacheKeys, invalidate_cache
from tatvivah.core.database.entities.inventory import InventoryMovementType
from tatvivah.core.database.entities.orders import Order, OrderItem, OrderStatus
from tatvivah.core.database.repositories import (
    CartItemRepository,
    CartRepository,
    InventoryMovementRepository,
    InventoryRepository,
    OrderItemRepository,
    OrderRepository,
    ProductRepository,
    VariantRepository,
)
from tatvivah.core.errors import ApiError
from tatvivah.core.logging_config import get_logger
from tatvivah.core.models.io import CheckoutRequest
from tatvivah.core.monitoring import log_business_event
from tatvivah.notifications import NotificationService, notification_service

logger = get_logger(__name__)

SHIPPING_FEE = 180.0


class CheckoutService:
    def __init__(self, session: AsyncSession, notifications: Optional[NotificationService] = None) -> None:
        self.session = session
        self.carts = CartRepository(session)
        self.cart_items = CartItemRepository(session)
        self.products = ProductRepository(session)
        self.variants = VariantRepository(session)
        self.inventory = InventoryRepository(session)
        self.movements = InventoryMovementRepository(session)
        self.orders = OrderRepository(session)
        self.order_items = OrderItemRepository(session)
        self.notifications = notifications or notification_service

    async def checkout(self, user_id: str, shipping: Optional[CheckoutRequest] = None) -> Dict[str, Any]:
        cart = await self.carts.get_by_user(user_id)
        items = await self.cart_items.list_by_cart(cart.id) if cart else []
        if cart is None or not items:
            raise ApiError.bad_request("Cart is empty")

        products = await self.products.get_by_ids([i.product_id for i in items])
        variants = await self.variants.get_by_ids([i.variant_id for i in items])
        inventories = await self.inventory.get_by_variants([i.variant_id for i in items])

        errors: List[str] = []
        lines: List[Dict[str, Any]] = []
        for item in items:
            product = products.get(item.product_id)
            variant = variants.get(item.variant_id)
            if product is None or variant is None:
                errors.append(f"Product or variant not found for item {item.id}")
                continue
            inventory = inventories.get(variant.id)
            available = inventory.stock if inventory else 0
            if item.quantity > available:
                errors.append(
                    f"Insufficient stock for {product.title}: Available {available}, Requested {item.quantity}"
                )
                continue
            lines.append(
                {
                    "product": product,
                    "variant": variant,
                    "quantity": item.quantity,
                    # Orders record the price at the moment of purchase
                    "price": variant.price,
                }
            )
        if errors:
            raise ApiError.bad_request("; ".join(errors))

        subtotal = sum(line["price"] * line["quantity"] for line in lines)
        shipping_fee = SHIPPING_FEE if lines else 0.0
        total_amount = round(subtotal + shipping_fee, 2)

        shipping_fields = shipping.model_dump(exclude_none=True) if shipping else {}
        try:
            order = await self.orders.create(
                Order(
                    user_id=user_id,
                    status=OrderStatus.PLACED.value,
                    total_amount=total_amount,
                    shipping_fee=shipping_fee,
                    **shipping_fields,
                )
            )
            for line in lines:
                await self.order_items.create(
                    OrderItem(
                        order_id=order.id,
                        seller_id=line["product"].seller_id,
                        product_id=line["product"].id,
                        variant_id=line["variant"].id,
                        quantity=line["quantity"],
                        price_snapshot=line["price"],
                    )
                )
                if not await self.inventory.decrement_stock(line["variant"].id, line["quantity"]):
                    raise ApiError.bad_request(f"Insufficient stock for {line['product'].title}")
                await self.movements.record(
                    line["variant"].id, order.id, line["quantity"], InventoryMovementType.RESERVE.value
                )
            await self.cart_items.clear(cart.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(f"Order {order.id} placed by {user_id} for {total_amount}")
        log_business_event("order_placed", {"order_id": order.id, "total_amount": total_amount})

        product_ids = {line["product"].id for line in lines}
        await invalidate_cache(
            CacheKeys.cart(user_id),
            CacheKeys.buyer_orders(user_id),
            CacheKeys.PRODUCTS_LIST,
            CacheKeys.ADMIN_ORDERS,
            *[CacheKeys.product_detail(pid) for pid in product_ids],
        )
        await self._notify(order, lines)

        return {
            "message": "Order placed successfully",
            "order": {
                "id": order.id,
                "userId": order.user_id,
                "status": order.status,
                "totalAmount": order.total_amount,
                "createdAt": order.created_at,
            },
        }

    async def _notify(self, order: Order, lines: List[Dict[str, Any]]) -> None:
        try:
            await self.notifications.notify_order_placed(order.user_id, order.id, order.total_amount)
        except Exception as e:
            logger.error(f"Failed to notify buyer about order {order.id}: {e}", exc_info=True)

        per_seller = Counter(line["product"].seller_id for line in lines)
        for seller_id, count in per_seller.items():
            try:
                await self.notifications.notify_seller_new_order(seller_id, order.id, count)
            except Exception as e:
                logger.error(f"Failed to notify seller {seller_id} about order {order.id}: {e}", exc_info=True)
