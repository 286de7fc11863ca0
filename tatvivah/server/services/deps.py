"""
Request Dependencies.

Authentication and authorization dependencies for API endpoints. The
authenticated principal comes from the access token claims only; no database
lookup happens per request.
"""

from typing import Annotated, Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.database import get_session
from tatvivah.core.database.entities.users import Role, UserStatus
from tatvivah.core.errors import ApiError
from tatvivah.core.security import verify_access_token

bearer_scheme = HTTPBearer(auto_error=False, description="Access token from /v1/auth/login")


class AuthUser(BaseModel):
    """Principal resolved from a verified access token."""

    id: str
    email: str
    phone: Optional[str] = None
    role: Role
    status: UserStatus
    is_email_verified: bool = False
    is_phone_verified: bool = False


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthUser:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise ApiError.unauthorized("Access token required")
    claims = verify_access_token(credentials.credentials)
    try:
        return AuthUser(
            id=claims["userId"],
            email=claims["email"],
            phone=claims.get("phone"),
            role=claims["role"],
            status=claims["status"],
            is_email_verified=claims.get("isEmailVerified", False),
            is_phone_verified=claims.get("isPhoneVerified", False),
        )
    except (KeyError, ValueError):
        raise ApiError.unauthorized("Invalid access token")


def require_roles(*roles: Role) -> Callable[..., AuthUser]:
    """Build a dependency that admits only the given roles."""
    allowed = set(roles)

    async def _check(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if user.role not in allowed:
            raise ApiError.forbidden("Insufficient permissions")
        return user

    return _check


async def require_active_status(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    if user.status != UserStatus.ACTIVE:
        raise ApiError.forbidden("Account not active")
    return user


async def require_email_verified(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    if not user.is_email_verified:
        raise ApiError.forbidden("Email verification required")
    return user


async def require_phone_verified(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    if not user.is_phone_verified:
        raise ApiError.forbidden("Phone verification required")
    return user


SessionDep = Annotated[AsyncSession, Depends(get_session)]
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
BuyerUser = Annotated[AuthUser, Depends(require_roles(Role.USER))]
SellerUser = Annotated[AuthUser, Depends(require_roles(Role.SELLER))]
FulfillmentUser = Annotated[AuthUser, Depends(require_roles(Role.SELLER, Role.ADMIN, Role.SUPER_ADMIN))]
AdminUser = Annotated[AuthUser, Depends(require_roles(Role.ADMIN, Role.SUPER_ADMIN))]
SuperAdminUser = Annotated[AuthUser, Depends(require_roles(Role.SUPER_ADMIN))]
