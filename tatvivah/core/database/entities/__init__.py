"""
Database entity models.

This package contains all database entity models organized by business domain.

Modules:
- users: Accounts and refresh-token login sessions
- otps: Email verification codes and pending signups
- catalog: Categories, products, variants, moderation
- inventory: Stock levels and the stock movement ledger
- carts: Shopping carts and cart items
- orders: Orders and order items
- payments: Payments, payment events, seller settlements
- shipments: Seller shipments and their status history
- notifications: Outbound email notifications and delivery attempts
- audit_logs: Admin action audit trail
- reviews: Product reviews and bestseller curation
"""

from . import (
    audit_logs,
    carts,
    catalog,
    inventory,
    notifications,
    orders,
    otps,
    payments,
    reviews,
    shipments,
    users,
)

__all__ = [
    "audit_logs",
    "carts",
    "catalog",
    "inventory",
    "notifications",
    "orders",
    "otps",
    "payments",
    "reviews",
    "shipments",
    "users",
]
