"""
Checkout Endpoint.
"""

from fastapi import APIRouter, status

from tatvivah.core.models.io import CheckoutRequest
from tatvivah.server.services.checkout import CheckoutService
from tatvivah.server.services.deps import BuyerUser, SessionDep

router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Checkout",
    description="Place an order for everything in the cart, reserving stock and emptying the cart.",
    responses={400: {"description": "Cart is empty or stock is insufficient"}},
)
async def checkout(user: BuyerUser, session: SessionDep, body: CheckoutRequest | None = None):
    """
    Checkout.

    Runs as a single transaction: either the order is created with all of its
    items and reservations, or nothing changes.
    """
    return await CheckoutService(session).checkout(user.id, body)
