"""
Shipment Service.

Each seller ships their own items of an order. Shipments move
CREATED -> SHIPPED -> DELIVERED, and the order follows once every seller in it
has reached the same state.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.cache import TRACKING_TTL, CacheKeys, get_cache, invalidate_cache, set_cache
from tatvivah.core.database.base import utc_now
from tatvivah.core.database.entities.audit_logs import AuditEntityType
from tatvivah.core.database.entities.orders import Order, OrderStatus
from tatvivah.core.database.entities.shipments import Shipment, ShipmentEvent, ShipmentStatus
from tatvivah.core.database.repositories import (
    OrderItemRepository,
    OrderRepository,
    ShipmentEventRepository,
    ShipmentRepository,
)
from tatvivah.core.errors import ApiError
from tatvivah.core.logging_config import get_logger
from tatvivah.core.models.io import OverrideStatus, ShipmentCreate
from tatvivah.notifications import NotificationService, notification_service

from .audit import AuditService

logger = get_logger(__name__)

_SHIPPED_OR_LATER = (ShipmentStatus.SHIPPED.value, ShipmentStatus.DELIVERED.value)


def _event(e: ShipmentEvent) -> Dict[str, Any]:
    return {"id": e.id, "shipmentId": e.shipment_id, "status": e.status, "note": e.note, "createdAt": e.created_at}


def _shipment(s: Shipment, events: Optional[List[ShipmentEvent]] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": s.id,
        "orderId": s.order_id,
        "sellerId": s.seller_id,
        "carrier": s.carrier,
        "trackingNumber": s.tracking_number,
        "status": s.status,
        "shippedAt": s.shipped_at,
        "deliveredAt": s.delivered_at,
        "createdAt": s.created_at,
    }
    if events is not None:
        data["events"] = [_event(e) for e in events]
    return data


class ShipmentService:
    def __init__(self, session: AsyncSession, notifications: Optional[NotificationService] = None) -> None:
        self.session = session
        self.shipments = ShipmentRepository(session)
        self.events = ShipmentEventRepository(session)
        self.orders = OrderRepository(session)
        self.order_items = OrderItemRepository(session)
        self.audit = AuditService(session)
        self.notifications = notifications or notification_service

    async def create_shipment(self, order_id: str, seller_id: str, data: ShipmentCreate) -> Dict[str, Any]:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise ApiError.not_found("Order not found")
        if order.status != OrderStatus.CONFIRMED.value:
            raise ApiError.bad_request(f"Cannot ship order with status {order.status}. Order must be CONFIRMED.")
        if not await self.order_items.list_by_order_and_seller(order_id, seller_id):
            raise ApiError.forbidden("You do not have any items in this order to ship")
        if await self.shipments.get_by_order_and_seller(order_id, seller_id):
            raise ApiError.bad_request("Shipment already exists for this order")

        shipment = await self.shipments.create(
            Shipment(
                order_id=order_id,
                seller_id=seller_id,
                carrier=data.carrier,
                tracking_number=data.tracking_number,
                status=ShipmentStatus.CREATED.value,
            )
        )
        event = await self.events.record(shipment.id, ShipmentStatus.CREATED.value, "Shipment created")
        await self.session.commit()

        logger.info(f"Seller {seller_id} created shipment {shipment.id} for order {order_id}")
        await invalidate_cache(CacheKeys.tracking(order_id))
        return _shipment(shipment, [event])

    async def _apply_status(self, shipment: Shipment, status: str, note: str) -> ShipmentEvent:
        shipment.status = status
        if status == ShipmentStatus.SHIPPED.value:
            shipment.shipped_at = utc_now()
        elif status == ShipmentStatus.DELIVERED.value:
            shipment.delivered_at = utc_now()
        await self.shipments.update(shipment)
        return await self.events.record(shipment.id, status, note)

    async def _sync_order_status(self, order_id: str) -> Optional[Order]:
        """Advance the order once every seller's shipment has reached the same state."""
        order = await self.orders.get_by_id(order_id)
        if order is None or order.status == OrderStatus.CANCELLED.value:
            return order

        shipments = await self.shipments.list_by_order(order_id)
        sellers = await self.order_items.distinct_sellers(order_id)
        if not shipments or not set(sellers) <= {s.seller_id for s in shipments}:
            return order

        if all(s.status == ShipmentStatus.DELIVERED.value for s in shipments):
            new_status = OrderStatus.DELIVERED.value
        elif all(s.status in _SHIPPED_OR_LATER for s in shipments):
            new_status = OrderStatus.SHIPPED.value
        else:
            return order

        if order.status == new_status:
            return order
        if order.status == OrderStatus.DELIVERED.value and new_status == OrderStatus.SHIPPED.value:
            return order
        logger.info(f"Order {order_id} moved from {order.status} to {new_status}")
        return await self.orders.update_status(order, new_status)

    async def _invalidate(self, order: Optional[Order], order_id: str) -> None:
        keys = [CacheKeys.tracking(order_id), CacheKeys.order_detail(order_id), CacheKeys.ADMIN_ORDERS]
        if order is not None:
            keys.append(CacheKeys.buyer_orders(order.user_id))
        await invalidate_cache(*keys)

    async def update_status(
        self, shipment_id: str, seller_id: str, status: ShipmentStatus, note: Optional[str] = None
    ) -> Dict[str, Any]:
        shipment = await self.shipments.get_by_id(shipment_id)
        if shipment is None:
            raise ApiError.not_found("Shipment not found")
        if shipment.seller_id != seller_id:
            raise ApiError.forbidden("Unauthorized to update this shipment")
        if shipment.status == ShipmentStatus.DELIVERED.value:
            raise ApiError.bad_request("Cannot update delivered shipment")
        order = await self.orders.get_by_id(shipment.order_id)
        if order is not None and order.status == OrderStatus.CANCELLED.value:
            raise ApiError.bad_request("Cannot update shipment of a cancelled order")
        if status == ShipmentStatus.SHIPPED and shipment.status != ShipmentStatus.CREATED.value:
            raise ApiError.bad_request("Shipment can only be marked SHIPPED from CREATED state")
        if status == ShipmentStatus.DELIVERED and shipment.status != ShipmentStatus.SHIPPED.value:
            raise ApiError.bad_request("Shipment can only be marked DELIVERED from SHIPPED state")

        event = await self._apply_status(shipment, status.value, note or f"Shipment marked as {status.value}")
        order = await self._sync_order_status(shipment.order_id)
        await self.session.commit()
        await self._invalidate(order, shipment.order_id)

        if order is not None:
            try:
                if status == ShipmentStatus.SHIPPED:
                    await self.notifications.notify_order_shipped(
                        order.user_id, order.id, shipment.carrier, shipment.tracking_number
                    )
                else:
                    await self.notifications.notify_order_delivered(order.user_id, order.id)
            except Exception as e:
                logger.error(f"Failed to notify buyer about shipment {shipment.id}: {e}", exc_info=True)

        return _shipment(shipment, [event])

    async def admin_override_status(
        self, shipment_id: str, admin_id: str, status: OverrideStatus, note: str
    ) -> Dict[str, Any]:
        shipment = await self.shipments.get_by_id(shipment_id)
        if shipment is None:
            raise ApiError.not_found("Shipment not found")

        old_status = shipment.status
        event = await self._apply_status(shipment, status.value, f"Admin Override: {note}")
        await self.audit.log_action(
            admin_id,
            "SHIPMENT_STATUS_OVERRIDE",
            AuditEntityType.ORDER,
            shipment.order_id,
            {"shipmentId": shipment.id, "oldStatus": old_status, "newStatus": status.value, "reason": note},
        )
        order = await self._sync_order_status(shipment.order_id)
        await self.session.commit()
        await self._invalidate(order, shipment.order_id)
        return _shipment(shipment, [event])

    async def get_tracking(self, order_id: str, user_id: str) -> Dict[str, Any]:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise ApiError.not_found("Order not found")
        if order.user_id != user_id:
            raise ApiError.forbidden("Unauthorized to view tracking for this order")

        cache_key = CacheKeys.tracking(order_id)
        cached = await get_cache(cache_key)
        if cached:
            return cached

        shipments = await self.shipments.list_by_order(order_id)
        events = await self.events.list_by_shipments([s.id for s in shipments])
        response = {
            "orderId": order.id,
            "status": order.status,
            "shipments": [
                {
                    "id": s.id,
                    "carrier": s.carrier,
                    "trackingNumber": s.tracking_number,
                    "status": s.status,
                    "shippedAt": s.shipped_at,
                    "deliveredAt": s.delivered_at,
                    "events": [_event(e) for e in events.get(s.id, [])],
                }
                for s in shipments
            ],
        }
        await set_cache(cache_key, response, ttl=TRACKING_TTL)
        return response

    async def get_seller_shipments(self, seller_id: str) -> Dict[str, Any]:
        shipments = await self.shipments.list_by_seller(seller_id)
        orders = await self.orders.get_by_ids([s.order_id for s in shipments])
        result = []
        for s in shipments:
            data = _shipment(s)
            order = orders.get(s.order_id)
            data["order"] = (
                {"id": order.id, "createdAt": order.created_at, "totalAmount": order.total_amount} if order else None
            )
            result.append(data)
        return {"shipments": result}
