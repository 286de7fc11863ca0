"""
Authentication request schemas.
"""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from .common import PHONE_PATTERN, CamelModel, check_password_strength


class _PasswordMixin(CamelModel):
    password: str = Field(min_length=8, description="At least 8 characters, one uppercase letter and one digit")

    @field_validator("password")
    @classmethod
    def _strong_password(cls, value: str) -> str:
        return check_password_strength(value)


class RegisterUserRequest(_PasswordMixin):
    """Buyer self-registration."""

    full_name: str = Field(min_length=2)
    email: EmailStr
    phone: str = Field(pattern=PHONE_PATTERN)


class RegisterSellerRequest(_PasswordMixin):
    """Seller self-registration; the account waits for admin approval."""

    full_name: Optional[str] = Field(default=None, min_length=2)
    email: EmailStr
    phone: str = Field(pattern=PHONE_PATTERN)


class AdminRegisterRequest(_PasswordMixin):
    first_name: str = Field(min_length=2)
    last_name: str = Field(min_length=2)
    email: EmailStr
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    department: Optional[str] = Field(default=None, min_length=2)
    designation: Optional[str] = Field(default=None, min_length=2)


class LoginRequest(CamelModel):
    identifier: str = Field(min_length=1, description="Email or phone")
    password: str = Field(min_length=1)


class RequestOtpRequest(CamelModel):
    email: EmailStr


class VerifyOtpRequest(CamelModel):
    email: EmailStr
    otp: str = Field(pattern=r"^\d{6}$")


class RefreshRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class LogoutRequest(CamelModel):
    refresh_token: Optional[str] = Field(default=None, min_length=1)
