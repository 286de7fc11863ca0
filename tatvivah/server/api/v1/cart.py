"""
Cart Endpoints.
"""

from fastapi import APIRouter, status

from tatvivah.core.models.io import CartItemCreate, CartItemUpdate
from tatvivah.server.services.carts import CartService
from tatvivah.server.services.deps import BuyerUser, SessionDep

router = APIRouter()


@router.get("", summary="Get Cart", description="The caller's cart with product, variant, and stock details.")
async def get_cart(user: BuyerUser, session: SessionDep):
    return await CartService(session).get_cart(user.id)


@router.post(
    "/items",
    status_code=status.HTTP_201_CREATED,
    summary="Add Cart Item",
    description="Add a variant to the cart. Adding a variant already in the cart replaces its quantity.",
    responses={400: {"description": "Insufficient stock"}, 404: {"description": "Variant not found"}},
)
async def add_item(body: CartItemCreate, user: BuyerUser, session: SessionDep):
    return await CartService(session).add_item(user.id, body)


@router.put("/items/{item_id}", summary="Update Cart Item")
async def update_item(item_id: str, body: CartItemUpdate, user: BuyerUser, session: SessionDep):
    return await CartService(session).update_item(user.id, item_id, body)


@router.delete("/items/{item_id}", summary="Remove Cart Item")
async def remove_item(item_id: str, user: BuyerUser, session: SessionDep):
    return await CartService(session).remove_item(user.id, item_id)
