"""
Shipment Endpoints.

Sellers create and advance their shipments, buyers read tracking, and admins
can override a shipment's status. Responses use the ``{success, data}``
envelope.
"""

from fastapi import APIRouter, status

from tatvivah.core.database.entities.shipments import ShipmentStatus
from tatvivah.core.models.io import AdminOverrideRequest, ShipmentCreate, ShipmentStatusNote
from tatvivah.server.services.deps import AdminUser, CurrentUser, FulfillmentUser, SessionDep
from tatvivah.server.services.shipments import ShipmentService

tracking_router = APIRouter()
seller_router = APIRouter()
admin_router = APIRouter()


@tracking_router.get(
    "/{order_id}/tracking",
    summary="Order Tracking",
    description="Shipments of one of the caller's orders with their event history.",
    responses={403: {"description": "Not the buyer of this order"}, 404: {"description": "Order not found"}},
)
async def get_tracking(order_id: str, user: CurrentUser, session: SessionDep):
    return {"success": True, "data": await ShipmentService(session).get_tracking(order_id, user.id)}


@seller_router.get("", summary="List My Shipments")
async def list_shipments(seller: FulfillmentUser, session: SessionDep):
    return {"success": True, "data": await ShipmentService(session).get_seller_shipments(seller.id)}


@seller_router.post(
    "/{order_id}/create",
    status_code=status.HTTP_201_CREATED,
    summary="Create Shipment",
    description="Ship the caller's items of a confirmed order.",
    responses={400: {"description": "Order not confirmed or already shipped"}, 403: {"description": "No items"}},
)
async def create_shipment(order_id: str, body: ShipmentCreate, seller: FulfillmentUser, session: SessionDep):
    return {"success": True, "data": await ShipmentService(session).create_shipment(order_id, seller.id, body)}


@seller_router.put("/{shipment_id}/ship", summary="Mark Shipped")
async def mark_shipped(
    shipment_id: str, seller: FulfillmentUser, session: SessionDep, body: ShipmentStatusNote | None = None
):
    note = body.note if body else None
    data = await ShipmentService(session).update_status(shipment_id, seller.id, ShipmentStatus.SHIPPED, note)
    return {"success": True, "data": data}


@seller_router.put("/{shipment_id}/deliver", summary="Mark Delivered")
async def mark_delivered(
    shipment_id: str, seller: FulfillmentUser, session: SessionDep, body: ShipmentStatusNote | None = None
):
    note = body.note if body else None
    data = await ShipmentService(session).update_status(shipment_id, seller.id, ShipmentStatus.DELIVERED, note)
    return {"success": True, "data": data}


@admin_router.put(
    "/{shipment_id}/override-status",
    summary="Override Shipment Status",
    description="Force a shipment into SHIPPED or DELIVERED, bypassing transition checks. Audited.",
    responses={404: {"description": "Shipment not found"}},
)
async def override_status(shipment_id: str, body: AdminOverrideRequest, admin: AdminUser, session: SessionDep):
    data = await ShipmentService(session).admin_override_status(shipment_id, admin.id, body.status, body.note)
    return {"success": True, "data": data}
