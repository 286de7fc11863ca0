"""
Order Endpoints for buyers and sellers.
"""

from fastapi import APIRouter

from tatvivah.server.services.deps import BuyerUser, SellerUser, SessionDep
from tatvivah.server.services.orders import OrderService

router = APIRouter()
seller_router = APIRouter()


@router.get("", summary="List My Orders")
async def list_orders(user: BuyerUser, session: SessionDep):
    return await OrderService(session).list_buyer_orders(user.id)


@router.get("/{order_id}", summary="Get My Order", responses={404: {"description": "Order not found"}})
async def get_order(order_id: str, user: BuyerUser, session: SessionDep):
    return await OrderService(session).get_buyer_order(user.id, order_id)


@seller_router.get("", summary="List Seller Order Items")
async def list_seller_orders(seller: SellerUser, session: SessionDep):
    return await OrderService(session).list_seller_orders(seller.id)


@seller_router.get(
    "/{order_id}",
    summary="Get Seller Order",
    responses={403: {"description": "No items in this order belong to you"}, 404: {"description": "Order not found"}},
)
async def get_seller_order(order_id: str, seller: SellerUser, session: SessionDep):
    return await OrderService(session).get_seller_order(seller.id, order_id)
