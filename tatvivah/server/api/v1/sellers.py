"""
Seller Onboarding Endpoints.
"""

from fastapi import APIRouter, status

from tatvivah.core.models.io import RegisterSellerRequest
from tatvivah.server.services.auth import AuthService
from tatvivah.server.services.deps import SessionDep

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register Seller",
    description="Start a seller signup. After email verification the account waits for admin approval.",
    responses={409: {"description": "Email or phone already in use"}},
)
async def register_seller(body: RegisterSellerRequest, session: SessionDep):
    return await AuthService(session).register_seller(body)
