"""
Admin Service.

Back-office operations over sellers, products, orders, payments, and
notifications. Every state-changing action writes an audit log in the same
transaction as the change.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.cache import CacheKeys, get_cache, invalidate_cache, invalidate_product_caches, set_cache
from tatvivah.core.database.entities.audit_logs import AuditEntityType
from tatvivah.core.database.entities.catalog import ModerationStatus, Product
from tatvivah.core.database.entities.inventory import InventoryMovementType
from tatvivah.core.database.entities.notifications import Notification, NotificationEvent
from tatvivah.core.database.entities.orders import Order, OrderStatus
from tatvivah.core.database.entities.users import Role, User, UserStatus
from tatvivah.core.database.repositories import (
    InventoryMovementRepository,
    InventoryRepository,
    ModerationRepository,
    NotificationEventRepository,
    NotificationRepository,
    OrderItemRepository,
    OrderRepository,
    PaymentRepository,
    ProductRepository,
    SettlementRepository,
    UserRepository,
)
from tatvivah.core.errors import ApiError
from tatvivah.core.logging_config import get_logger
from tatvivah.notifications import NotificationService, notification_service

from . import serializers
from .audit import AuditService
from .bestsellers import BestsellerService

logger = get_logger(__name__)


def _seller(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "phone": user.phone,
        "role": user.role,
        "status": user.status,
        "createdAt": user.created_at,
    }


def _notification(n: Notification, events: Optional[List[NotificationEvent]] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": n.id,
        "userId": n.user_id,
        "role": n.role,
        "type": n.type,
        "channel": n.channel,
        "status": n.status,
        "subject": n.subject,
        "content": n.content,
        "metadata": n.meta,
        "sentAt": n.sent_at,
        "createdAt": n.created_at,
    }
    if events is not None:
        data["events"] = [
            {
                "id": e.id,
                "provider": e.provider,
                "status": e.status,
                "providerMessageId": e.provider_message_id,
                "error": e.error,
                "createdAt": e.created_at,
            }
            for e in events
        ]
    return data


class AdminService:
    def __init__(self, session: AsyncSession, notifications: Optional[NotificationService] = None) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.products = ProductRepository(session)
        self.moderation = ModerationRepository(session)
        self.orders = OrderRepository(session)
        self.order_items = OrderItemRepository(session)
        self.inventory = InventoryRepository(session)
        self.movements = InventoryMovementRepository(session)
        self.payments = PaymentRepository(session)
        self.settlements = SettlementRepository(session)
        self.notification_records = NotificationRepository(session)
        self.notification_events = NotificationEventRepository(session)
        self.audit = AuditService(session)
        self.bestsellers = BestsellerService(session)
        self.notifications = notifications or notification_service

    # ------------------------------------------------------------------
    # Sellers
    # ------------------------------------------------------------------

    async def list_sellers(self) -> Dict[str, Any]:
        sellers = await self.users.list_by_role(Role.SELLER.value)
        return {"sellers": [_seller(s) for s in sellers]}

    async def _get_seller(self, seller_id: str) -> User:
        seller = await self.users.get_by_id(seller_id)
        if seller is None or seller.role != Role.SELLER.value:
            raise ApiError.not_found("Seller not found")
        return seller

    async def approve_seller(self, seller_id: str, actor_id: str) -> Dict[str, Any]:
        seller = await self._get_seller(seller_id)
        if seller.status != UserStatus.PENDING.value:
            raise ApiError.bad_request("Seller is not pending approval")

        previous = seller.status
        seller.status = UserStatus.ACTIVE.value
        seller = await self.users.update(seller)
        await self.audit.log_action(
            actor_id,
            "SELLER_APPROVED",
            AuditEntityType.USER,
            seller.id,
            {"previousStatus": previous, "newStatus": UserStatus.ACTIVE.value},
        )
        await self.session.commit()

        try:
            await self.notifications.notify_seller_approved(seller.id, seller.email)
        except Exception as e:
            logger.error(f"Failed to notify seller {seller.id} about approval: {e}", exc_info=True)
        return {"message": "Seller approved successfully", "seller": _seller(seller)}

    async def suspend_seller(self, seller_id: str, actor_id: str) -> Dict[str, Any]:
        seller = await self._get_seller(seller_id)
        if seller.status == UserStatus.SUSPENDED.value:
            raise ApiError.bad_request("Seller is already suspended")

        previous = seller.status
        seller.status = UserStatus.SUSPENDED.value
        seller = await self.users.update(seller)
        await self.audit.log_action(
            actor_id,
            "SELLER_SUSPENDED",
            AuditEntityType.USER,
            seller.id,
            {"previousStatus": previous, "newStatus": UserStatus.SUSPENDED.value},
        )
        await self.session.commit()
        return {"message": "Seller suspended successfully", "seller": _seller(seller)}

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def _admin_products(self, products: List[Product]) -> Dict[str, Any]:
        moderations = await self.moderation.get_by_products([p.id for p in products])
        return {
            "products": [
                {
                    "id": p.id,
                    "title": p.title,
                    "sellerId": p.seller_id,
                    "categoryId": p.category_id,
                    "isPublished": p.is_published,
                    "deletedByAdmin": p.deleted_by_admin,
                    "createdAt": p.created_at,
                    "moderation": serializers.moderation(moderations.get(p.id)),
                }
                for p in products
            ]
        }

    async def list_pending_products(self) -> Dict[str, Any]:
        pending = await self.moderation.list_pending()
        products = await self.products.get_by_ids([m.product_id for m in pending])
        ordered = [products[m.product_id] for m in pending if m.product_id in products]
        return await self._admin_products(ordered)

    async def list_all_products(self) -> Dict[str, Any]:
        return await self._admin_products(await self.products.list())

    async def _get_product(self, product_id: str) -> Product:
        product = await self.products.get_by_id(product_id)
        if product is None:
            raise ApiError.not_found("Product not found")
        return product

    async def approve_product(self, product_id: str, actor_id: str) -> Dict[str, Any]:
        product = await self._get_product(product_id)
        moderation = await self.moderation.upsert(product.id, ModerationStatus.APPROVED.value, reviewed_by=actor_id)
        product.is_published = True
        product = await self.products.update(product)
        await self.audit.log_action(
            actor_id, "PRODUCT_APPROVED", AuditEntityType.PRODUCT, product.id, {"productTitle": product.title}
        )
        await self.session.commit()
        await invalidate_product_caches(product.id)
        return {
            "message": "Product approved and published",
            "product": {**serializers.product(product), "moderation": serializers.moderation(moderation)},
        }

    async def reject_product(self, product_id: str, reason: str, actor_id: str) -> Dict[str, Any]:
        product = await self._get_product(product_id)
        moderation = await self.moderation.upsert(
            product.id, ModerationStatus.REJECTED.value, reviewed_by=actor_id, reason=reason
        )
        product.is_published = False
        product = await self.products.update(product)
        await self.audit.log_action(
            actor_id,
            "PRODUCT_REJECTED",
            AuditEntityType.PRODUCT,
            product.id,
            {"productTitle": product.title, "reason": reason},
        )
        await self.session.commit()
        await invalidate_product_caches(product.id)

        try:
            await self.notifications.notify_product_rejected(product.seller_id, product.id, product.title, reason)
        except Exception as e:
            logger.error(f"Failed to notify seller {product.seller_id} about rejection: {e}", exc_info=True)
        return {
            "message": "Product rejected",
            "product": {**serializers.product(product), "moderation": serializers.moderation(moderation)},
        }

    async def delete_product(self, product_id: str, actor_id: str, reason: Optional[str] = None) -> Dict[str, Any]:
        product = await self._get_product(product_id)
        product.deleted_by_admin = True
        product.deleted_by_admin_reason = reason
        product.is_published = False
        product = await self.products.update(product)
        await self.bestsellers.remove_by_product_id(product.id)
        await self.audit.log_action(
            actor_id,
            "PRODUCT_DELETED",
            AuditEntityType.PRODUCT,
            product.id,
            {"productTitle": product.title, "reason": reason or "Deleted by admin"},
        )
        await self.session.commit()
        await invalidate_product_caches(product.id)
        return {"message": "Product deleted by admin", "product": serializers.product(product)}

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    async def list_orders(self) -> Dict[str, Any]:
        cached = await get_cache(CacheKeys.ADMIN_ORDERS)
        if cached:
            return cached

        orders = await self.orders.list_all()
        items = await self.order_items.list_by_orders([o.id for o in orders])
        response = {"orders": [serializers.order(o, items.get(o.id, [])) for o in orders]}
        await set_cache(CacheKeys.ADMIN_ORDERS, response)
        return response

    async def _get_order(self, order_id: str) -> Order:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise ApiError.not_found("Order not found")
        return order

    async def _release_inventory(self, order_id: str) -> None:
        """Return reserved stock for every RESERVE movement of the order."""
        for movement in await self.movements.list_by_order(order_id):
            if movement.type != InventoryMovementType.RESERVE.value:
                continue
            await self.inventory.increment_stock(movement.variant_id, movement.quantity)
            await self.movements.record(
                movement.variant_id, order_id, movement.quantity, InventoryMovementType.RELEASE.value
            )

    async def _invalidate_order(self, order: Order) -> None:
        await invalidate_cache(
            CacheKeys.ADMIN_ORDERS,
            CacheKeys.order_detail(order.id),
            CacheKeys.buyer_orders(order.user_id),
            CacheKeys.tracking(order.id),
        )

    async def cancel_order(self, order_id: str, actor_id: str) -> Dict[str, Any]:
        order = await self._get_order(order_id)
        if order.status == OrderStatus.DELIVERED.value:
            raise ApiError.bad_request("Cannot cancel a delivered order")
        if order.status == OrderStatus.CANCELLED.value:
            raise ApiError.bad_request("Order is already cancelled")

        previous = order.status
        try:
            order = await self.orders.update_status(order, OrderStatus.CANCELLED.value)
            await self._release_inventory(order.id)
            await self.audit.log_action(
                actor_id,
                "ORDER_CANCELLED",
                AuditEntityType.ORDER,
                order.id,
                {"previousStatus": previous, "newStatus": OrderStatus.CANCELLED.value},
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        product_ids = {item.product_id for item in await self.order_items.list_by_order(order.id)}
        await self._invalidate_order(order)
        await invalidate_cache(CacheKeys.PRODUCTS_LIST, *[CacheKeys.product_detail(pid) for pid in product_ids])
        return {"message": "Order cancelled successfully", "order": serializers.order(order)}

    async def force_confirm_order(self, order_id: str, actor_id: str) -> Dict[str, Any]:
        order = await self._get_order(order_id)
        if order.status == OrderStatus.CONFIRMED.value:
            raise ApiError.bad_request("Order is already confirmed")
        if order.status == OrderStatus.CANCELLED.value:
            raise ApiError.bad_request("Cannot confirm a cancelled order")
        if order.status == OrderStatus.DELIVERED.value:
            raise ApiError.bad_request("Order is already delivered")

        previous = order.status
        order = await self.orders.update_status(order, OrderStatus.CONFIRMED.value)
        await self.audit.log_action(
            actor_id,
            "ORDER_FORCE_CONFIRMED",
            AuditEntityType.ORDER,
            order.id,
            {"previousStatus": previous, "newStatus": OrderStatus.CONFIRMED.value, "bypassedPayment": True},
        )
        await self.session.commit()
        logger.warning(f"Order {order.id} force-confirmed by {actor_id} without payment")
        await self._invalidate_order(order)
        return {"message": "Order force-confirmed (payment bypassed)", "order": serializers.order(order)}

    # ------------------------------------------------------------------
    # Payments and settlements
    # ------------------------------------------------------------------

    async def list_payments(self) -> Dict[str, Any]:
        cached = await get_cache(CacheKeys.ADMIN_PAYMENTS)
        if cached:
            return cached
        payments = await self.payments.list_all()
        response = {"payments": [serializers.payment(p) for p in payments]}
        await set_cache(CacheKeys.ADMIN_PAYMENTS, response)
        return response

    async def list_settlements(self) -> Dict[str, Any]:
        settlements = await self.settlements.list_all()
        return {"settlements": [serializers.settlement(s) for s in settlements]}

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    async def list_notifications(self, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        notifications, total = await self.notification_records.find_all(page, limit)
        return {
            "data": [_notification(n) for n in notifications],
            "meta": {"total": total, "page": page, "limit": limit},
        }

    async def get_notification(self, notification_id: str) -> Dict[str, Any]:
        notification = await self.notification_records.get_by_id(notification_id)
        if notification is None:
            raise ApiError.not_found("Notification not found")
        events = await self.notification_events.list_by_notification(notification.id)
        return _notification(notification, events)
