"""
Six-digit email verification codes.

Only the sha256 digest of a code is stored.
"""

import hashlib
import secrets
from datetime import datetime, timedelta

from tatvivah.core.database.base import utc_now

OTP_TTL_MINUTES = 10


def generate_otp() -> str:
    return str(100000 + secrets.randbelow(900000))


def hash_otp(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def otp_expiry() -> datetime:
    return utc_now() + timedelta(minutes=OTP_TTL_MINUTES)
