"""
Payment request schemas.
"""

from __future__ import annotations

from pydantic import Field

from tatvivah.core.database.entities.payments import PaymentProvider

from .common import CamelModel


class InitiatePaymentRequest(CamelModel):
    order_id: str = Field(min_length=1)
    provider: PaymentProvider


class VerifyPaymentRequest(CamelModel):
    """Fields returned by the Razorpay checkout widget."""

    razorpay_order_id: str = Field(min_length=1)
    razorpay_payment_id: str = Field(min_length=1)
    razorpay_signature: str = Field(min_length=1)
