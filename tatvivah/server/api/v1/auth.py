"""
Authentication Endpoints.

Registration with email OTP, login, token refresh, and login session
management for every role.
"""

from fastapi import APIRouter, Request, status

from tatvivah.core.models.io import (
    AdminRegisterRequest,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RegisterUserRequest,
    RequestOtpRequest,
    VerifyOtpRequest,
)
from tatvivah.server.services.auth import AuthService
from tatvivah.server.services.deps import CurrentUser, SessionDep

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register Buyer",
    description="Start a buyer signup. The account is created once the emailed OTP is verified.",
    responses={409: {"description": "Email or phone already in use"}},
)
async def register(body: RegisterUserRequest, session: SessionDep):
    return await AuthService(session).register_user(body)


@router.post(
    "/admin/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register Admin",
    description="Create an active admin account.",
    responses={409: {"description": "Email or phone already in use"}},
)
async def register_admin(body: AdminRegisterRequest, session: SessionDep):
    return await AuthService(session).register_admin(body)


@router.post(
    "/login",
    summary="Login",
    description="Authenticate with email or phone and password. Opens a new login session.",
    responses={401: {"description": "Unknown user or wrong password"}, 403: {"description": "Account not usable"}},
)
async def login(body: LoginRequest, request: Request, session: SessionDep):
    """
    Login.

    Returns the public user profile with an access token and a refresh token
    bound to a fresh login session.
    """
    return await AuthService(session).login(
        body.identifier,
        body.password,
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
    )


@router.post(
    "/request-otp",
    summary="Request Email OTP",
    description="Send (or resend) an email verification code.",
    responses={404: {"description": "User not found"}},
)
async def request_otp(body: RequestOtpRequest, session: SessionDep):
    return await AuthService(session).request_email_otp(body.email)


@router.post(
    "/verify-otp",
    summary="Verify Email OTP",
    description="Verify an emailed code. Completes pending signups and returns tokens where applicable.",
    responses={400: {"description": "Invalid or expired OTP"}},
)
async def verify_otp(body: VerifyOtpRequest, session: SessionDep):
    return await AuthService(session).verify_email_otp(body.email, body.otp)


@router.post(
    "/refresh",
    summary="Refresh Tokens",
    description="Rotate a refresh token. Reusing an old refresh token revokes every session of the user.",
    responses={401: {"description": "Invalid, reused, or expired refresh token"}},
)
async def refresh(body: RefreshRequest, session: SessionDep):
    return await AuthService(session).refresh_tokens(body.refresh_token)


@router.post("/logout", summary="Logout", description="Close the login session holding the given refresh token.")
async def logout(user: CurrentUser, session: SessionDep, body: LogoutRequest | None = None):
    return await AuthService(session).logout(user.id, body.refresh_token if body else None)


@router.get("/sessions", summary="List Sessions", description="List the caller's login sessions, newest first.")
async def list_sessions(user: CurrentUser, session: SessionDep):
    return await AuthService(session).list_sessions(user.id)


@router.delete(
    "/sessions/{session_id}",
    summary="Revoke Session",
    description="Revoke one of the caller's login sessions.",
    responses={404: {"description": "Session not found"}},
)
async def revoke_session(session_id: str, user: CurrentUser, session: SessionDep):
    return await AuthService(session).revoke_session(user.id, session_id)
