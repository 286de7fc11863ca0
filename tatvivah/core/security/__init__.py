"""
Credential primitives: password hashing, JWTs, and one-time codes.
"""

from .otp import generate_otp, hash_otp, otp_expiry
from .passwords import compare_password, compare_refresh_token, hash_password, hash_refresh_token
from .tokens import (
    AccessTokenPayload,
    RefreshTokenPayload,
    extract_bearer_token,
    generate_access_token,
    generate_refresh_token,
    parse_duration,
    refresh_expiry_date,
    verify_access_token,
    verify_refresh_token,
)

__all__ = [
    "AccessTokenPayload",
    "RefreshTokenPayload",
    "compare_password",
    "compare_refresh_token",
    "extract_bearer_token",
    "generate_access_token",
    "generate_otp",
    "generate_refresh_token",
    "hash_otp",
    "hash_password",
    "hash_refresh_token",
    "otp_expiry",
    "parse_duration",
    "refresh_expiry_date",
    "verify_access_token",
    "verify_refresh_token",
]
