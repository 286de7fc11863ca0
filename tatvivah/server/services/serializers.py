"""
Response shaping helpers.

Entities are stored in snake_case; API payloads use the camelCase keys the
storefront and dashboards read. These helpers build those payloads from
entities that services have already loaded.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from tatvivah.core.database.entities.catalog import Category, Product, ProductModeration, ProductVariant
from tatvivah.core.database.entities.inventory import Inventory, InventoryMovement
from tatvivah.core.database.entities.orders import Order, OrderItem
from tatvivah.core.database.entities.payments import Payment, SellerSettlement


def category(c: Category, include_status: bool = False) -> Dict[str, Any]:
    data: Dict[str, Any] = {"id": c.id, "name": c.name, "slug": c.slug}
    if include_status:
        data.update({"isActive": c.is_active, "createdAt": c.created_at, "updatedAt": c.updated_at})
    return data


def inventory(inv: Optional[Inventory]) -> Optional[Dict[str, Any]]:
    if inv is None:
        return None
    return {"id": inv.id, "variantId": inv.variant_id, "stock": inv.stock, "updatedAt": inv.updated_at}


def variant(v: ProductVariant, inv: Optional[Inventory] = None) -> Dict[str, Any]:
    return {
        "id": v.id,
        "productId": v.product_id,
        "sku": v.sku,
        "price": v.price,
        "compareAtPrice": v.compare_at_price,
        "createdAt": v.created_at,
        "updatedAt": v.updated_at,
        "inventory": inventory(inv),
    }


def product(
    p: Product,
    cat: Optional[Category] = None,
    variants: Optional[Iterable[ProductVariant]] = None,
    inventories: Optional[Mapping[str, Inventory]] = None,
) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": p.id,
        "sellerId": p.seller_id,
        "categoryId": p.category_id,
        "title": p.title,
        "description": p.description,
        "images": list(p.images or []),
        "isPublished": p.is_published,
        "createdAt": p.created_at,
        "updatedAt": p.updated_at,
        "category": category(cat) if cat is not None else None,
    }
    if variants is not None:
        inventories = inventories or {}
        data["variants"] = [variant(v, inventories.get(v.id)) for v in variants]
    return data


def moderation(m: Optional[ProductModeration]) -> Optional[Dict[str, Any]]:
    if m is None:
        return None
    return {"status": m.status, "reason": m.reason, "reviewedBy": m.reviewed_by, "reviewedAt": m.reviewed_at}


def order_item(item: OrderItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "orderId": item.order_id,
        "sellerId": item.seller_id,
        "productId": item.product_id,
        "variantId": item.variant_id,
        "quantity": item.quantity,
        "priceSnapshot": item.price_snapshot,
    }


def order(o: Order, items: Optional[List[OrderItem]] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": o.id,
        "userId": o.user_id,
        "status": o.status,
        "totalAmount": o.total_amount,
        "shippingFee": o.shipping_fee,
        "shippingName": o.shipping_name,
        "shippingPhone": o.shipping_phone,
        "shippingEmail": o.shipping_email,
        "shippingAddressLine1": o.shipping_address_line1,
        "shippingAddressLine2": o.shipping_address_line2,
        "shippingCity": o.shipping_city,
        "shippingNotes": o.shipping_notes,
        "createdAt": o.created_at,
        "updatedAt": o.updated_at,
    }
    if items is not None:
        data["items"] = [order_item(i) for i in items]
    return data


def movement(m: InventoryMovement) -> Dict[str, Any]:
    return {
        "id": m.id,
        "variantId": m.variant_id,
        "orderId": m.order_id,
        "quantity": m.quantity,
        "type": m.type,
        "createdAt": m.created_at,
    }


def payment(p: Payment) -> Dict[str, Any]:
    return {
        "id": p.id,
        "orderId": p.order_id,
        "userId": p.user_id,
        "amount": p.amount,
        "currency": p.currency,
        "status": p.status,
        "provider": p.provider,
        "providerPaymentId": p.provider_payment_id,
        "createdAt": p.created_at,
        "updatedAt": p.updated_at,
    }


def settlement(s: SellerSettlement, item: Optional[OrderItem] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": s.id,
        "sellerId": s.seller_id,
        "orderItemId": s.order_item_id,
        "amount": s.amount,
        "status": s.status,
        "createdAt": s.created_at,
        "updatedAt": s.updated_at,
    }
    if item is not None:
        data["orderItem"] = order_item(item)
    return data
