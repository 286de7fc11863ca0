"""
Authentication Service.

Registration with email OTP, login, refresh-token rotation, and login
session management.

Refresh tokens are never stored in clear: each login session keeps the bcrypt
hash of its current refresh token. Presenting a refresh token that matches no
session is treated as token reuse and revokes every session of the user.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.database.base import utc_now
from tatvivah.core.database.entities.users import LoginSession, Role, User, UserStatus
from tatvivah.core.database.repositories import LoginSessionRepository, UserRepository
from tatvivah.core.errors import ApiError
from tatvivah.core.logging_config import get_logger
from tatvivah.core.models.io import (
    AdminRegisterRequest,
    RegisterSellerRequest,
    RegisterUserRequest,
)
from tatvivah.core.security import (
    compare_password,
    compare_refresh_token,
    generate_access_token,
    generate_refresh_token,
    hash_password,
    hash_refresh_token,
    refresh_expiry_date,
    verify_refresh_token,
)
from tatvivah.notifications.email import EmailClient

from .otp import OtpService

logger = get_logger(__name__)


def _public_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "phone": user.phone,
        "role": user.role,
        "status": user.status,
        "isEmailVerified": user.is_email_verified,
        "isPhoneVerified": user.is_phone_verified,
    }


def _access_token_for(user: User) -> str:
    return generate_access_token(
        {
            "userId": user.id,
            "email": user.email,
            "phone": user.phone,
            "role": user.role,
            "status": user.status,
            "isEmailVerified": user.is_email_verified,
            "isPhoneVerified": user.is_phone_verified,
        }
    )


def _refresh_token_for(user: User, session_id: str) -> str:
    return generate_refresh_token(
        {
            "userId": user.id,
            "sessionId": session_id,
            "isEmailVerified": user.is_email_verified,
            "isPhoneVerified": user.is_phone_verified,
        }
    )


class AuthService:
    def __init__(self, session: AsyncSession, email_client: Optional[EmailClient] = None) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.login_sessions = LoginSessionRepository(session)
        self.otp = OtpService(session, email_client)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def _start_signup(self, email: str, phone: str, password: str, role: Role, full_name: Optional[str]) -> None:
        if await self.users.exists_by_email_or_phone(email, phone):
            raise ApiError.conflict("Email or phone already in use")
        payload = {
            "email": email,
            "phone": phone,
            "passwordHash": hash_password(password),
            "role": role.value,
            "fullName": full_name,
        }
        await self.otp.send_signup_otp(payload)
        await self.session.commit()

    async def register_user(self, data: RegisterUserRequest) -> Dict[str, str]:
        """Start a buyer signup. The account is created when the OTP is verified."""
        await self._start_signup(data.email, data.phone, data.password, Role.USER, data.full_name)
        return {"message": "OTP sent to your email"}

    async def register_seller(self, data: RegisterSellerRequest) -> Dict[str, str]:
        await self._start_signup(data.email, data.phone, data.password, Role.SELLER, data.full_name)
        return {"message": "OTP sent to your email. Verify to complete seller registration."}

    async def register_admin(self, data: AdminRegisterRequest) -> Dict[str, str]:
        if data.phone:
            if await self.users.exists_by_email_or_phone(data.email, data.phone):
                raise ApiError.conflict("Email or phone already in use")
        elif await self.users.find_by_email(data.email):
            raise ApiError.conflict("Email already in use")

        await self.users.create(
            User(
                email=data.email,
                phone=data.phone,
                full_name=f"{data.first_name} {data.last_name}",
                password_hash=hash_password(data.password),
                role=Role.ADMIN.value,
                status=UserStatus.ACTIVE.value,
                is_email_verified=False,
                is_phone_verified=False,
            )
        )
        await self.session.commit()
        logger.info(f"Admin account registered: {data.email}")
        return {"message": "Admin registered successfully"}

    # ------------------------------------------------------------------
    # Login and tokens
    # ------------------------------------------------------------------

    async def issue_tokens(
        self, user: User, user_agent: Optional[str] = None, ip_address: Optional[str] = None
    ) -> Dict[str, Any]:
        """Open a login session for ``user`` and return the token pair."""
        login_session = await self.login_sessions.create(
            LoginSession(
                user_id=user.id,
                refresh_token="",
                user_agent=user_agent,
                ip_address=ip_address,
                expires_at=refresh_expiry_date(),
            )
        )
        refresh_token = _refresh_token_for(user, login_session.id)
        login_session.refresh_token = hash_refresh_token(refresh_token)
        await self.login_sessions.update(login_session)
        await self.session.commit()

        return {
            "user": _public_user(user),
            "accessToken": _access_token_for(user),
            "refreshToken": refresh_token,
        }

    async def login(
        self, identifier: str, password: str, user_agent: Optional[str] = None, ip_address: Optional[str] = None
    ) -> Dict[str, Any]:
        user = await self.users.find_by_identifier(identifier)
        if user is None:
            raise ApiError.unauthorized("User not found")
        if not compare_password(password, user.password_hash):
            raise ApiError.unauthorized("Invalid password")
        if user.status != UserStatus.ACTIVE.value:
            raise ApiError.forbidden("Account not active")
        if user.role in (Role.USER.value, Role.SELLER.value) and not user.is_email_verified:
            raise ApiError.forbidden("Email verification required")
        return await self.issue_tokens(user, user_agent, ip_address)

    async def refresh_tokens(self, refresh_token: str) -> Dict[str, str]:
        """Rotate a refresh token.

        Raises:
            ApiError: 401 for unknown, reused, or expired tokens and missing users;
                403 when the account is no longer active
        """
        claims = verify_refresh_token(refresh_token)
        user_id = claims.get("userId", "")

        matched: Optional[LoginSession] = None
        for candidate in await self.login_sessions.list_by_user(user_id):
            if compare_refresh_token(refresh_token, candidate.refresh_token):
                matched = candidate
                break

        if matched is None:
            revoked = await self.login_sessions.delete_all_for_user(user_id)
            await self.session.commit()
            logger.warning(f"Refresh token reuse detected for user {user_id}; revoked {revoked} sessions")
            raise ApiError.unauthorized("Invalid refresh token")

        if matched.expires_at < utc_now():
            await self.login_sessions.delete(matched.id)
            await self.session.commit()
            raise ApiError.unauthorized("Refresh token has expired")

        user = await self.users.get_by_id(user_id)
        if user is None:
            await self.login_sessions.delete(matched.id)
            await self.session.commit()
            raise ApiError.unauthorized("User not found")
        if user.status != UserStatus.ACTIVE.value:
            await self.login_sessions.delete(matched.id)
            await self.session.commit()
            raise ApiError.forbidden("Account not active")

        new_refresh_token = _refresh_token_for(user, matched.id)
        matched.refresh_token = hash_refresh_token(new_refresh_token)
        await self.login_sessions.update(matched)
        await self.session.commit()
        return {"accessToken": _access_token_for(user), "refreshToken": new_refresh_token}

    # ------------------------------------------------------------------
    # Email OTP
    # ------------------------------------------------------------------

    async def request_email_otp(self, email: str) -> Dict[str, str]:
        user = await self.users.find_by_email(email)
        if user is None:
            payload = await self.otp.latest_signup_payload(email)
            if not payload:
                raise ApiError.not_found("User not found")
            await self.otp.send_signup_otp(payload)
            await self.session.commit()
            return {"message": "OTP sent to email"}

        if user.is_email_verified:
            return {"message": "Email already verified"}

        await self.otp.send_verification_otp(user.id, user.email)
        await self.session.commit()
        return {"message": "OTP sent to email"}

    async def verify_email_otp(self, email: str, code: str) -> Union[Dict[str, Any], Dict[str, str]]:
        otp = await self.otp.verify(email, code)
        await self.session.commit()

        if otp.user_id:
            user = await self.users.get_by_id(otp.user_id)
            if user is None:
                raise ApiError.not_found("User not found")
            if user.role == Role.SELLER.value and user.status != UserStatus.ACTIVE.value:
                raise ApiError.forbidden("Seller approval pending")
            if user.role == Role.USER.value and user.status == UserStatus.PENDING.value:
                user.status = UserStatus.ACTIVE.value
            user.is_email_verified = True
            await self.users.update(user)
            return await self.issue_tokens(user)

        payload = otp.payload
        if not payload:
            raise ApiError.bad_request("Invalid or expired OTP")
        if await self.users.exists_by_email_or_phone(payload["email"], payload.get("phone")):
            raise ApiError.conflict("Email or phone already in use")

        role = payload.get("role", Role.USER.value)
        user = await self.users.create(
            User(
                email=payload["email"],
                phone=payload.get("phone"),
                full_name=payload.get("fullName"),
                password_hash=payload["passwordHash"],
                role=role,
                status=UserStatus.PENDING.value if role == Role.SELLER.value else UserStatus.ACTIVE.value,
                is_email_verified=True,
                is_phone_verified=False,
            )
        )
        await self.session.commit()
        logger.info(f"Account created after email verification: {user.email} ({role})")

        if role == Role.SELLER.value:
            return {"message": "Email verified. Seller account pending admin approval."}
        return await self.issue_tokens(user)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def logout(self, user_id: str, refresh_token: Optional[str] = None) -> Dict[str, str]:
        """Close the session holding ``refresh_token``. Unknown tokens are ignored."""
        if refresh_token:
            for candidate in await self.login_sessions.list_by_user(user_id):
                if compare_refresh_token(refresh_token, candidate.refresh_token):
                    await self.login_sessions.delete_for_user(user_id, candidate.id)
                    await self.session.commit()
                    break
        return {"message": "Logged out successfully"}

    async def list_sessions(self, user_id: str) -> Dict[str, Any]:
        sessions = await self.login_sessions.list_by_user(user_id)
        return {
            "sessions": [
                {
                    "sessionId": s.id,
                    "userAgent": s.user_agent,
                    "ipAddress": s.ip_address,
                    "createdAt": s.created_at,
                    "updatedAt": s.updated_at,
                }
                for s in sessions
            ]
        }

    async def revoke_session(self, user_id: str, session_id: str) -> Dict[str, str]:
        deleted = await self.login_sessions.delete_for_user(user_id, session_id)
        if not deleted:
            raise ApiError.not_found("Session not found")
        await self.session.commit()
        return {"message": "Session revoked successfully"}
