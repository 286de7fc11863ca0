"""
API I/O models.

Request bodies use snake_case attributes with camelCase JSON aliases, which
is the wire format every client of the API sends.
"""

from .auth import (
    AdminRegisterRequest,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterSellerRequest,
    RegisterUserRequest,
    RequestOtpRequest,
    VerifyOtpRequest,
)
from .catalog import (
    CategoryCreate,
    CategoryUpdate,
    ProductCreate,
    ProductUpdate,
    StockUpdate,
    VariantCreate,
    VariantUpdate,
)
from .common import CamelModel, MessageResponse
from .orders import CartItemCreate, CartItemUpdate, CheckoutRequest
from .payments import InitiatePaymentRequest, VerifyPaymentRequest
from .shipments import AdminOverrideRequest, OverrideStatus, ShipmentCreate, ShipmentStatusNote
from .admin import BestsellerCreate, BestsellerUpdate, ProductDeleteRequest, ProductRejectRequest, ReviewCreate

__all__ = [
    "AdminOverrideRequest",
    "AdminRegisterRequest",
    "BestsellerCreate",
    "BestsellerUpdate",
    "CamelModel",
    "CartItemCreate",
    "CartItemUpdate",
    "CategoryCreate",
    "CategoryUpdate",
    "CheckoutRequest",
    "InitiatePaymentRequest",
    "LoginRequest",
    "LogoutRequest",
    "MessageResponse",
    "OverrideStatus",
    "ProductCreate",
    "ProductDeleteRequest",
    "ProductRejectRequest",
    "ProductUpdate",
    "RefreshRequest",
    "RegisterSellerRequest",
    "RegisterUserRequest",
    "RequestOtpRequest",
    "ReviewCreate",
    "ShipmentCreate",
    "ShipmentStatusNote",
    "StockUpdate",
    "VariantCreate",
    "VariantUpdate",
    "VerifyOtpRequest",
    "VerifyPaymentRequest",
]
