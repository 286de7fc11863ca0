"""
Repository layer.

One repository per table family, all sharing the CRUD behaviour of
``SQLModelRepository``. Repositories flush; services commit.
"""

from .audit_logs import AuditLogRepository
from .base import AsyncBaseRepository, SQLModelRepository, apply_filters
from .carts import CartItemRepository, CartRepository
from .catalog import CategoryRepository, ModerationRepository, ProductRepository, VariantRepository
from .inventory import InventoryMovementRepository, InventoryRepository
from .notifications import NotificationEventRepository, NotificationRepository
from .orders import OrderItemRepository, OrderRepository
from .otps import EmailOtpRepository
from .payments import PaymentEventRepository, PaymentRepository, SettlementRepository
from .reviews import BestsellerRepository, ReviewRepository
from .shipments import ShipmentEventRepository, ShipmentRepository
from .users import LoginSessionRepository, UserRepository

__all__ = [
    "AsyncBaseRepository",
    "SQLModelRepository",
    "apply_filters",
    "AuditLogRepository",
    "BestsellerRepository",
    "CartItemRepository",
    "CartRepository",
    "CategoryRepository",
    "EmailOtpRepository",
    "InventoryMovementRepository",
    "InventoryRepository",
    "LoginSessionRepository",
    "ModerationRepository",
    "NotificationEventRepository",
    "NotificationRepository",
    "OrderItemRepository",
    "OrderRepository",
    "PaymentEventRepository",
    "PaymentRepository",
    "ProductRepository",
    "ReviewRepository",
    "SettlementRepository",
    "ShipmentEventRepository",
    "ShipmentRepository",
    "UserRepository",
    "VariantRepository",
]
