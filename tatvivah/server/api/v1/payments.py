"""
Payment Endpoints.

Buyers initiate and verify payments; providers call the public webhook,
which is authenticated by its signature header.
"""

from fastapi import APIRouter, Request

from tatvivah.core.errors import ApiError
from tatvivah.core.models.io import InitiatePaymentRequest, VerifyPaymentRequest
from tatvivah.server.services.deps import CurrentUser, FulfillmentUser, SessionDep
from tatvivah.server.services.payments import PaymentService

router = APIRouter()
webhook_router = APIRouter()
settlement_router = APIRouter()


@webhook_router.post(
    "/{provider}",
    summary="Payment Webhook",
    description="Provider callback. Razorpay requests are verified with the x-razorpay-signature header.",
    responses={400: {"description": "Invalid provider or signature"}},
)
async def handle_webhook(provider: str, request: Request, session: SessionDep):
    try:
        raw_body = (await request.body()).decode("utf-8")
    except UnicodeDecodeError:
        raise ApiError.bad_request("Invalid webhook payload")
    header = "x-razorpay-signature" if provider.lower() == "razorpay" else "x-signature"
    await PaymentService(session).process_webhook(provider, raw_body, request.headers.get(header))
    return {"success": True, "message": "Webhook processed"}


@router.post(
    "/initiate",
    summary="Initiate Payment",
    responses={400: {"description": "Order already paid or provider not supported"}},
)
async def initiate_payment(body: InitiatePaymentRequest, user: CurrentUser, session: SessionDep):
    data = await PaymentService(session).initiate_payment(user.id, body.order_id, body.provider)
    return {"success": True, "data": data}


@router.post(
    "/verify",
    summary="Verify Razorpay Payment",
    description="Confirm a payment with the signature returned by the Razorpay checkout widget.",
    responses={400: {"description": "Invalid payment signature"}, 404: {"description": "Payment not found"}},
)
async def verify_payment(body: VerifyPaymentRequest, user: CurrentUser, session: SessionDep):
    data = await PaymentService(session).verify_razorpay_payment(
        user.id, body.razorpay_order_id, body.razorpay_payment_id, body.razorpay_signature
    )
    return {"success": True, "data": data}


@router.get("/{order_id}", summary="Get Payment", responses={404: {"description": "Payment not found"}})
async def get_payment(order_id: str, user: CurrentUser, session: SessionDep):
    return {"success": True, "data": await PaymentService(session).get_payment_details(user.id, order_id)}


@settlement_router.get("", summary="List My Settlements")
async def list_settlements(seller: FulfillmentUser, session: SessionDep):
    return {"success": True, "data": await PaymentService(session).list_seller_settlements(seller.id)}
