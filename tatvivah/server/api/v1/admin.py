"""
Admin Endpoints.

Seller approval, product moderation, order intervention, and read access to
payments, settlements, and the audit trail. Every mutation is audited.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query

from tatvivah.core.database.entities.audit_logs import AuditEntityType
from tatvivah.core.models.io import ProductDeleteRequest, ProductRejectRequest
from tatvivah.server.services.admin import AdminService
from tatvivah.server.services.audit import AuditService
from tatvivah.server.services.deps import AdminUser, SessionDep, SuperAdminUser
from tatvivah.server.services.payments import PaymentService

router = APIRouter()

_NOT_FOUND = {404: {"description": "Not found"}}


# Sellers


@router.get("/sellers", summary="List Sellers")
async def list_sellers(admin: AdminUser, session: SessionDep):
    return await AdminService(session).list_sellers()


@router.put(
    "/sellers/{seller_id}/approve",
    summary="Approve Seller",
    responses={**_NOT_FOUND, 400: {"description": "Seller is not pending approval"}},
)
async def approve_seller(seller_id: str, admin: AdminUser, session: SessionDep):
    return await AdminService(session).approve_seller(seller_id, admin.id)


@router.put(
    "/sellers/{seller_id}/suspend",
    summary="Suspend Seller",
    responses={**_NOT_FOUND, 400: {"description": "Seller is already suspended"}},
)
async def suspend_seller(seller_id: str, admin: AdminUser, session: SessionDep):
    return await AdminService(session).suspend_seller(seller_id, admin.id)


# Products


@router.get("/products", summary="List All Products")
async def list_products(admin: AdminUser, session: SessionDep):
    return await AdminService(session).list_all_products()


@router.get("/products/pending", summary="List Products Pending Moderation")
async def list_pending_products(admin: AdminUser, session: SessionDep):
    return await AdminService(session).list_pending_products()


@router.put("/products/{product_id}/approve", summary="Approve Product", responses=_NOT_FOUND)
async def approve_product(product_id: str, admin: AdminUser, session: SessionDep):
    return await AdminService(session).approve_product(product_id, admin.id)


@router.put("/products/{product_id}/reject", summary="Reject Product", responses=_NOT_FOUND)
async def reject_product(product_id: str, body: ProductRejectRequest, admin: AdminUser, session: SessionDep):
    return await AdminService(session).reject_product(product_id, body.reason, admin.id)


@router.delete(
    "/products/{product_id}",
    summary="Delete Product",
    description="Soft-delete a product: it is unpublished, flagged, and removed from bestsellers.",
    responses=_NOT_FOUND,
)
async def delete_product(
    product_id: str, admin: AdminUser, session: SessionDep, body: ProductDeleteRequest | None = None
):
    return await AdminService(session).delete_product(product_id, admin.id, body.reason if body else None)


# Orders


@router.get("/orders", summary="List All Orders")
async def list_orders(admin: AdminUser, session: SessionDep):
    return await AdminService(session).list_orders()


@router.put(
    "/orders/{order_id}/cancel",
    summary="Cancel Order",
    description="Cancel an order that has not been delivered and release its reserved stock.",
    responses={**_NOT_FOUND, 400: {"description": "Order delivered or already cancelled"}},
)
async def cancel_order(order_id: str, admin: AdminUser, session: SessionDep):
    return await AdminService(session).cancel_order(order_id, admin.id)


@router.put(
    "/orders/{order_id}/force-confirm",
    summary="Force-confirm Order",
    description="Confirm an order without payment. Super admins only.",
    responses={**_NOT_FOUND, 400: {"description": "Order cannot be confirmed"}},
)
async def force_confirm_order(order_id: str, admin: SuperAdminUser, session: SessionDep):
    return await AdminService(session).force_confirm_order(order_id, admin.id)


# Payments and settlements


@router.get("/payments", summary="List Payments")
async def list_payments(admin: AdminUser, session: SessionDep):
    return await AdminService(session).list_payments()


@router.get("/settlements", summary="List Settlements")
async def list_settlements(admin: AdminUser, session: SessionDep):
    return await AdminService(session).list_settlements()


@router.put("/settlements/{settlement_id}/mark-paid", summary="Mark Settlement Paid", responses=_NOT_FOUND)
async def mark_settlement_paid(settlement_id: str, admin: AdminUser, session: SessionDep):
    return {"success": True, "data": await PaymentService(session).mark_settlement_paid(settlement_id)}


# Audit logs


@router.get("/audit-logs", summary="Search Audit Logs")
async def list_audit_logs(
    admin: AdminUser,
    session: SessionDep,
    entity_type: Optional[AuditEntityType] = Query(default=None, alias="entityType"),
    entity_id: Optional[str] = Query(default=None, alias="entityId"),
    actor_id: Optional[str] = Query(default=None, alias="actorId"),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
):
    return await AuditService(session).list_audit_logs(
        entity_type=entity_type,
        entity_id=entity_id,
        actor_id=actor_id,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )


@router.get("/audit-logs/{entity_type}/{entity_id}", summary="Entity History")
async def get_entity_history(entity_type: AuditEntityType, entity_id: str, admin: AdminUser, session: SessionDep):
    return await AuditService(session).get_entity_history(entity_type, entity_id)
