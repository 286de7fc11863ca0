"""
Email one-time password entity.

An OTP either belongs to an existing user (``user_id`` set) or carries a
pending signup in ``payload`` until the email address is verified.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON
from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class OtpPurpose(str, Enum):
    EMAIL_VERIFY = "EMAIL_VERIFY"


class EmailOtp(Base, table=True):
    """Hashed verification code sent by email.

    Table: email_otps
    """

    __tablename__ = "email_otps"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: Optional[str] = Field(default=None, foreign_key="users.id", max_length=64, index=True)
    email: str = Field(max_length=255, index=True)
    code_hash: str = Field(max_length=64)
    purpose: str = Field(default=OtpPurpose.EMAIL_VERIFY.value, max_length=32)
    expires_at: datetime = Field(sa_type=UTCDateTime)
    used_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    payload: Optional[dict[str, Any]] = Field(default=None, sa_type=JSON)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
