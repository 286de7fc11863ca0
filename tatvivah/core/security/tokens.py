"""
JWT access and refresh tokens (PyJWT, HS256).

Claims use the camelCase keys clients already read (``userId``,
``isEmailVerified``, ...). Expiries come from ``ACCESS_TOKEN_EXPIRY`` and
``REFRESH_TOKEN_EXPIRY`` in ``<n><s|m|h|d>`` form.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, TypedDict

import jwt

from tatvivah.core.database.base import utc_now
from tatvivah.core.errors import ApiError
from tatvivah.server.core.config import settings

ALGORITHM = "HS256"

_DURATION_RE = re.compile(r"^(\d+)([smhd])$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


class AccessTokenPayload(TypedDict):
    userId: str
    email: str
    phone: Optional[str]
    role: str
    status: str
    isEmailVerified: bool
    isPhoneVerified: bool


class RefreshTokenPayload(TypedDict):
    userId: str
    sessionId: str
    isEmailVerified: bool
    isPhoneVerified: bool


def parse_duration(value: str) -> int:
    """Convert ``"15m"``/``"7d"`` style durations to seconds.

    Raises:
        ValueError: If the value is not ``<digits><s|m|h|d>``
    """
    match = _DURATION_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid duration format: {value!r}")
    amount, unit = match.groups()
    return int(amount) * _UNIT_SECONDS[unit]


def _encode(payload: dict[str, Any], secret: str, expiry: str) -> str:
    now = datetime.now(timezone.utc)
    claims = dict(payload)
    claims["iat"] = now
    claims["exp"] = now + timedelta(seconds=parse_duration(expiry))
    claims["jti"] = uuid.uuid4().hex
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def _decode(token: str, secret: str, label: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ApiError.unauthorized(f"{label} token has expired")
    except jwt.InvalidTokenError:
        raise ApiError.unauthorized(f"Invalid {label.lower()} token")
    except Exception:
        raise ApiError.unauthorized("Token verification failed")


def generate_access_token(payload: AccessTokenPayload) -> str:
    return _encode(dict(payload), settings.jwt_access_secret, settings.access_token_expiry)


def generate_refresh_token(payload: RefreshTokenPayload) -> str:
    return _encode(dict(payload), settings.jwt_refresh_secret, settings.refresh_token_expiry)


def verify_access_token(token: str) -> dict[str, Any]:
    return _decode(token, settings.jwt_access_secret, "Access")


def verify_refresh_token(token: str) -> dict[str, Any]:
    return _decode(token, settings.jwt_refresh_secret, "Refresh")


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    if not header or not header.startswith("Bearer "):
        return None
    token = header[len("Bearer ") :].strip()
    return token or None


def refresh_expiry_date() -> datetime:
    """When a session created now should expire (naive UTC)."""
    return utc_now() + timedelta(seconds=parse_duration(settings.refresh_token_expiry))
