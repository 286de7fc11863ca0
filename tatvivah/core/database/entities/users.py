"""
User and login session entities.

Users are buyers, sellers, or admins distinguished by ``role``. Each login
creates a ``LoginSession`` that stores a bcrypt hash of the current refresh
token, so a leaked database row cannot be replayed as a token.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field

from ..base import Base, UTCDateTime, new_id, utc_now


class Role(str, Enum):
    USER = "USER"
    SELLER = "SELLER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class UserStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


class User(Base, table=True):
    """Account for every actor in the marketplace.

    Table: users
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    email: str = Field(max_length=255, unique=True, index=True)
    phone: Optional[str] = Field(default=None, max_length=20, unique=True, index=True)
    full_name: Optional[str] = Field(default=None, max_length=255)
    password_hash: str = Field(max_length=255)

    role: str = Field(default=Role.USER.value, max_length=16, index=True)
    status: str = Field(default=UserStatus.PENDING.value, max_length=16, index=True)
    is_email_verified: bool = Field(default=False)
    is_phone_verified: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role}, status={self.status})"


class LoginSession(Base, table=True):
    """Refresh-token session for one device/login.

    Table: login_sessions
    """

    __tablename__ = "login_sessions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", max_length=64, index=True)
    refresh_token: str = Field(default="", max_length=255)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    ip_address: Optional[str] = Field(default=None, max_length=64)
    expires_at: datetime = Field(sa_type=UTCDateTime)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"LoginSession(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})"
