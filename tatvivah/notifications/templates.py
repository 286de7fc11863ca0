"""
Email templates per notification type.

Each renderer takes the notification metadata and returns ``(subject, html)``.
"""

from __future__ import annotations

from html import escape
from typing import Any, Callable, Dict, Tuple

from tatvivah.core.database.entities.notifications import NotificationType

Rendered = Tuple[str, str]


def _e(value: Any) -> str:
    return escape(str(value)) if value is not None else ""


def order_placed(meta: Dict[str, Any]) -> Rendered:
    order_id = _e(meta.get("orderId"))
    return (
        f"Order Confirmed #{order_id}",
        "<h1>Order Confirmation</h1>"
        "<p>Thank you for your order!</p>"
        f"<p><strong>Order ID:</strong> {order_id}</p>"
        f"<p><strong>Total Amount:</strong> &#8377;{_e(meta.get('totalAmount'))}</p>"
        "<p>We will notify you when it ships.</p>",
    )


def order_shipped(meta: Dict[str, Any]) -> Rendered:
    return (
        f"Your Order #{_e(meta.get('orderId'))} has Shipped!",
        "<h1>Order Shipped</h1>"
        "<p>Your order is on the way.</p>"
        f"<p><strong>Carrier:</strong> {_e(meta.get('carrier'))}</p>"
        f"<p><strong>Tracking Number:</strong> {_e(meta.get('trackingNumber'))}</p>",
    )


def order_delivered(meta: Dict[str, Any]) -> Rendered:
    return (
        f"Order #{_e(meta.get('orderId'))} Delivered",
        "<h1>Order Delivered</h1><p>Your order has been delivered.</p><p>Enjoy your purchase!</p>",
    )


def seller_new_order(meta: Dict[str, Any]) -> Rendered:
    order_id = _e(meta.get("orderId"))
    return (
        f"New Order Received #{order_id}",
        "<h1>New Order Alert</h1>"
        "<p>You have received a new order.</p>"
        f"<p><strong>Order ID:</strong> {order_id}</p>"
        f"<p><strong>Items:</strong> {_e(meta.get('itemsCount'))}</p>"
        "<p>Please check your dashboard to fulfill it.</p>",
    )


def seller_approved(meta: Dict[str, Any]) -> Rendered:
    account = f"<p><strong>Account:</strong> {_e(meta['sellerEmail'])}</p>" if meta.get("sellerEmail") else ""
    return (
        "Your TatVivah seller account is approved",
        "<h1>Seller Account Approved</h1>"
        "<p>Your seller account has been approved by our admin team.</p>"
        f"<p>You can now log in and start selling on TatVivah.</p>{account}",
    )


def seller_product_rejected(meta: Dict[str, Any]) -> Rendered:
    title = _e(meta.get("productTitle") or "Your product")
    reason = f"<p><strong>Reason:</strong> {_e(meta['reason'])}</p>" if meta.get("reason") else ""
    return (
        "Product Rejected",
        f"<h1>Product Rejected</h1><p>{title} was rejected by our moderation team.</p>{reason}",
    )


def admin_alert(meta: Dict[str, Any]) -> Rendered:
    title = _e(meta.get("title"))
    return (
        f"[Admin Alert] {title}",
        f"<h1>Admin Alert</h1><p><strong>{title}</strong></p><p>{_e(meta.get('message'))}</p>",
    )


TEMPLATES: Dict[str, Callable[[Dict[str, Any]], Rendered]] = {
    NotificationType.ORDER_PLACED.value: order_placed,
    NotificationType.ORDER_SHIPPED.value: order_shipped,
    NotificationType.ORDER_DELIVERED.value: order_delivered,
    NotificationType.SELLER_NEW_ORDER.value: seller_new_order,
    NotificationType.SELLER_APPROVED.value: seller_approved,
    NotificationType.SELLER_PRODUCT_REJECTED.value: seller_product_rejected,
    NotificationType.ADMIN_ALERT.value: admin_alert,
}


def render(notification_type: str, meta: Dict[str, Any]) -> Rendered:
    """Render ``(subject, html)`` for a notification.

    Raises:
        ValueError: For a type without a template
    """
    renderer = TEMPLATES.get(notification_type)
    if renderer is None:
        raise ValueError(f"Unhandled notification type: {notification_type}")
    return renderer(meta or {})


def render_otp(code: str) -> Rendered:
    return (
        "Verify your TatVivah account",
        "<h1>Email Verification</h1>"
        f"<p>Your verification code is <strong>{_e(code)}</strong>.</p>"
        "<p>The code expires in 10 minutes.</p>",
    )
