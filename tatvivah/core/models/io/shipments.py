"""
Shipment request schemas.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from .common import CamelModel


class OverrideStatus(str, Enum):
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"


class ShipmentCreate(CamelModel):
    carrier: str = Field(min_length=1, max_length=100)
    tracking_number: str = Field(min_length=1, max_length=100, pattern=r"^[a-zA-Z0-9_-]+$")


class ShipmentStatusNote(CamelModel):
    note: Optional[str] = None


class AdminOverrideRequest(CamelModel):
    status: OverrideStatus
    note: str = Field(min_length=1, description="Reason for the override")
