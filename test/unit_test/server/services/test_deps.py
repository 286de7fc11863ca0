"""Unit tests for authentication and authorization dependencies."""

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from tatvivah.core.database.entities.users import Role, UserStatus
from tatvivah.core.errors import ApiError
from tatvivah.core.security import generate_access_token
from tatvivah.server.services.deps import (
    AuthUser,
    get_current_user,
    require_active_status,
    require_email_verified,
    require_phone_verified,
    require_roles,
)

pytestmark = pytest.mark.asyncio


def _claims(**overrides):
    claims = {
        "userId": "u1",
        "email": "buyer@example.com",
        "phone": "9876500001",
        "role": "USER",
        "status": "ACTIVE",
        "isEmailVerified": True,
        "isPhoneVerified": False,
    }
    claims.update(overrides)
    return claims


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def _user(**overrides) -> AuthUser:
    data = {"id": "u1", "email": "buyer@example.com", "role": Role.USER, "status": UserStatus.ACTIVE}
    data.update(overrides)
    return AuthUser(**data)


class TestGetCurrentUser:
    async def test_resolves_claims(self):
        user = await get_current_user(_bearer(generate_access_token(_claims())))
        assert user.id == "u1"
        assert user.role == Role.USER
        assert user.is_email_verified is True
        assert user.is_phone_verified is False

    async def test_missing_credentials(self):
        with pytest.raises(ApiError) as exc_info:
            await get_current_user(None)
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Access token required"

    async def test_unknown_role_claim(self):
        token = generate_access_token(_claims(role="WIZARD"))
        with pytest.raises(ApiError) as exc_info:
            await get_current_user(_bearer(token))
        assert exc_info.value.message == "Invalid access token"

    async def test_missing_claim(self):
        claims = _claims()
        del claims["email"]
        with pytest.raises(ApiError) as exc_info:
            await get_current_user(_bearer(generate_access_token(claims)))
        assert exc_info.value.status_code == 401


class TestRoleAndStatusGuards:
    async def test_require_roles_admits_listed_role(self):
        check = require_roles(Role.ADMIN, Role.SUPER_ADMIN)
        admin = _user(role=Role.SUPER_ADMIN)
        assert await check(admin) is admin

    async def test_require_roles_rejects_other_roles(self):
        check = require_roles(Role.SELLER)
        with pytest.raises(ApiError) as exc_info:
            await check(_user())
        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Insufficient permissions"

    async def test_require_active_status(self):
        with pytest.raises(ApiError) as exc_info:
            await require_active_status(_user(status=UserStatus.SUSPENDED))
        assert exc_info.value.message == "Account not active"

    async def test_require_email_verified(self):
        with pytest.raises(ApiError) as exc_info:
            await require_email_verified(_user(is_email_verified=False))
        assert exc_info.value.message == "Email verification required"

    async def test_require_phone_verified(self):
        user = _user(is_phone_verified=True)
        assert await require_phone_verified(user) is user
        with pytest.raises(ApiError):
            await require_phone_verified(_user())
