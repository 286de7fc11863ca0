"""
Payment, payment event, and seller settlement entities.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class PaymentStatus(str, Enum):
    INITIATED = "INITIATED"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class PaymentProvider(str, Enum):
    RAZORPAY = "RAZORPAY"
    STRIPE = "STRIPE"
    MOCK = "MOCK"


class PaymentEventType(str, Enum):
    INITIATED = "INITIATED"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    WEBHOOK = "WEBHOOK"


class SettlementStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class Payment(Base, table=True):
    """One payment per order; re-initiating resets it.

    Table: payments
    """

    __tablename__ = "payments"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    order_id: str = Field(foreign_key="orders.id", max_length=64, unique=True, index=True)
    user_id: str = Field(max_length=64, index=True)
    amount: float
    currency: str = Field(default="INR", max_length=8)
    status: str = Field(default=PaymentStatus.INITIATED.value, max_length=16, index=True)
    provider: str = Field(max_length=16)
    provider_payment_id: Optional[str] = Field(default=None, max_length=128, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})


class PaymentEvent(Base, table=True):
    """Table: payment_events"""

    __tablename__ = "payment_events"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    payment_id: str = Field(foreign_key="payments.id", max_length=64, index=True)
    type: str = Field(max_length=16)
    payload: Optional[dict[str, Any]] = Field(default=None, sa_type=JSON)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class SellerSettlement(Base, table=True):
    """Amount owed to a seller for one order item.

    Table: seller_settlements
    """

    __tablename__ = "seller_settlements"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    seller_id: str = Field(max_length=64, index=True)
    order_item_id: str = Field(foreign_key="order_items.id", max_length=64, unique=True, index=True)
    amount: float
    status: str = Field(default=SettlementStatus.PENDING.value, max_length=16)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})
