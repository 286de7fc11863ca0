"""
Payment Service.

Payment lifecycle for orders: initiate with a provider, confirm through a
client-side signature or a provider webhook, and fan a successful payment out
into per-seller settlements.

Success handling is idempotent. Webhooks are retried by providers and the
client-side verification may race them, so a payment already in SUCCESS is
left untouched. A unique settlement per order item backs this when two
confirmations commit at the same time.

A cancelled order stays cancelled: a payment that lands afterwards is kept
as SUCCESS and logged for refund, without settlements.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.cache import CacheKeys, invalidate_cache
from tatvivah.core.database.entities.orders import OrderStatus
from tatvivah.core.database.entities.payments import (
    Payment,
    PaymentEventType,
    PaymentProvider,
    PaymentStatus,
    SellerSettlement,
    SettlementStatus,
)
from tatvivah.core.database.repositories import (
    OrderItemRepository,
    OrderRepository,
    PaymentEventRepository,
    PaymentRepository,
    SettlementRepository,
)
from tatvivah.core.errors import ApiError
from tatvivah.core.logging_config import get_logger
from tatvivah.core.monitoring import log_business_event
from tatvivah.payments import RazorpayClient, RazorpayError
from tatvivah.server.core.config import settings

from . import serializers

logger = get_logger(__name__)

CURRENCY = "INR"
RAZORPAY_SUCCESS_EVENTS = ("payment.captured", "order.paid")
RAZORPAY_FAILURE_EVENTS = ("payment.failed",)


class PaymentService:
    def __init__(self, session: AsyncSession, razorpay: Optional[RazorpayClient] = None) -> None:
        self.session = session
        self.payments = PaymentRepository(session)
        self.events = PaymentEventRepository(session)
        self.settlements = SettlementRepository(session)
        self.orders = OrderRepository(session)
        self.order_items = OrderItemRepository(session)
        self.razorpay = razorpay or RazorpayClient()

    # ------------------------------------------------------------------
    # Initiation
    # ------------------------------------------------------------------

    async def initiate_payment(self, user_id: str, order_id: str, provider: PaymentProvider) -> Dict[str, Any]:
        order = await self.orders.get_by_id(order_id)
        if order is None or order.user_id != user_id:
            raise ApiError.not_found("Order not found or access denied")
        if order.status == OrderStatus.CANCELLED.value:
            raise ApiError.bad_request("Cannot pay for a cancelled order")

        if provider not in (PaymentProvider.MOCK, PaymentProvider.RAZORPAY):
            raise ApiError.bad_request("Provider not verified")
        if provider == PaymentProvider.MOCK and settings.is_production:
            raise ApiError.bad_request("Mock payments are disabled in production")
        if provider == PaymentProvider.RAZORPAY and not self.razorpay.configured:
            raise ApiError.internal("Razorpay is not configured")

        payment = await self.payments.get_by_order(order_id)
        if payment is not None and payment.status == PaymentStatus.SUCCESS.value:
            raise ApiError.bad_request("Order already paid")

        if payment is None:
            payment = await self.payments.create(
                Payment(
                    order_id=order.id,
                    user_id=user_id,
                    amount=order.total_amount,
                    currency=CURRENCY,
                    provider=provider.value,
                    status=PaymentStatus.INITIATED.value,
                )
            )
        else:
            payment.status = PaymentStatus.INITIATED.value
            payment.amount = order.total_amount
            payment.provider = provider.value
            payment.provider_payment_id = None
            payment = await self.payments.update(payment)
        await self.events.log(
            payment.id, PaymentEventType.INITIATED.value, {"provider": provider.value, "amount": order.total_amount}
        )

        if provider == PaymentProvider.MOCK:
            await self.session.commit()
            return {
                "paymentId": payment.id,
                "providerPaymentId": f"mock_{payment.id}",
                "checkoutUrl": f"https://mock-gateway.com/pay/{payment.id}",
                "amount": order.total_amount,
                "currency": CURRENCY,
            }

        try:
            gateway_order = await self.razorpay.create_order(
                order.total_amount, receipt=payment.id, currency=CURRENCY, notes={"orderId": order.id}
            )
        except RazorpayError as e:
            await self.session.rollback()
            logger.error(f"Razorpay order creation failed for order {order.id}: {e}")
            raise ApiError.internal(f"Razorpay order creation failed: {e}") from e

        payment.provider_payment_id = gateway_order["id"]
        await self.payments.update(payment)
        await self.session.commit()
        return {
            "razorpayOrderId": gateway_order["id"],
            "amount": int(round(order.total_amount * 100)),
            "currency": gateway_order.get("currency", CURRENCY),
            "key": self.razorpay.key_id,
            "orderId": order.id,
        }

    async def get_payment_details(self, user_id: str, order_id: str) -> Dict[str, Any]:
        payment = await self.payments.get_by_order(order_id)
        if payment is None:
            raise ApiError.not_found("Payment not found")
        if payment.user_id != user_id:
            raise ApiError.forbidden("Access denied")
        return serializers.payment(payment)

    # ------------------------------------------------------------------
    # Outcome handling
    # ------------------------------------------------------------------

    async def handle_payment_success(
        self, payment_id: str, provider_payment_id: Optional[str], payload: Optional[Any] = None
    ) -> None:
        """Confirm the order and create one settlement per order item.

        A payment for a cancelled order is recorded but the order is left
        cancelled and no settlements are created.
        """
        payment = await self.payments.get_by_id(payment_id)
        if payment is None:
            raise ApiError.not_found("Payment not found")
        if payment.status == PaymentStatus.SUCCESS.value:
            logger.info(f"Payment {payment_id} already succeeded. Skipping.")
            return

        order = await self.orders.get_by_id(payment.order_id)
        cancelled = order is not None and order.status == OrderStatus.CANCELLED.value
        try:
            payment.status = PaymentStatus.SUCCESS.value
            if provider_payment_id:
                payment.provider_payment_id = provider_payment_id
            await self.payments.update(payment)
            event_payload = {"refundRequired": True, "payload": payload} if cancelled else payload
            await self.events.log(payment.id, PaymentEventType.SUCCESS.value, event_payload)

            if order is not None and not cancelled:
                await self.orders.update_status(order, OrderStatus.CONFIRMED.value)
                for item in await self.order_items.list_by_order(payment.order_id):
                    await self.settlements.create(
                        SellerSettlement(
                            seller_id=item.seller_id,
                            order_item_id=item.id,
                            amount=item.price_snapshot * item.quantity,
                            status=SettlementStatus.PENDING.value,
                        )
                    )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.info(f"Payment {payment_id} was confirmed concurrently. Skipping.")
            return
        except Exception:
            await self.session.rollback()
            raise

        if cancelled:
            logger.warning(f"Payment {payment_id} succeeded for cancelled order {payment.order_id}; refund required")
            log_business_event("payment_refund_required", {"payment_id": payment_id, "order_id": payment.order_id})
            await invalidate_cache(CacheKeys.ADMIN_PAYMENTS)
            return

        logger.info(f"Payment {payment_id} succeeded; order {payment.order_id} confirmed")
        log_business_event("payment_succeeded", {"payment_id": payment_id, "order_id": payment.order_id})
        await invalidate_cache(
            CacheKeys.order_detail(payment.order_id),
            CacheKeys.buyer_orders(payment.user_id),
            CacheKeys.ADMIN_ORDERS,
            CacheKeys.ADMIN_PAYMENTS,
        )

    async def handle_payment_failure(self, payment_id: str, payload: Optional[Any] = None) -> None:
        payment = await self.payments.get_by_id(payment_id)
        if payment is None:
            raise ApiError.not_found("Payment not found")
        if payment.status == PaymentStatus.SUCCESS.value:
            logger.warning(f"Ignoring failure for already successful payment {payment_id}")
            return

        payment.status = PaymentStatus.FAILED.value
        await self.payments.update(payment)
        await self.events.log(payment.id, PaymentEventType.FAILED.value, payload)
        await self.session.commit()
        logger.info(f"Payment {payment_id} failed")
        await invalidate_cache(CacheKeys.ADMIN_PAYMENTS)

    async def verify_razorpay_payment(
        self, user_id: str, razorpay_order_id: str, razorpay_payment_id: str, signature: str
    ) -> Dict[str, Any]:
        if not self.razorpay.verify_payment_signature(razorpay_order_id, razorpay_payment_id, signature):
            raise ApiError.bad_request("Invalid payment signature")

        payment = await self.payments.get_by_provider_payment_id(razorpay_order_id)
        if payment is None:
            raise ApiError.not_found("Payment not found")
        if payment.user_id != user_id:
            raise ApiError.forbidden("Access denied")

        # The gateway order id stays the lookup key; the payment id goes to the event log
        await self.handle_payment_success(
            payment.id,
            razorpay_order_id,
            {"razorpayOrderId": razorpay_order_id, "razorpayPaymentId": razorpay_payment_id},
        )
        return {"message": "Payment verified successfully", "paymentId": payment.id, "orderId": payment.order_id}

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    async def process_webhook(self, provider: str, raw_body: str, signature: Optional[str]) -> None:
        try:
            matched = PaymentProvider(provider.upper())
        except ValueError:
            raise ApiError.bad_request("Invalid provider")

        try:
            payload = json.loads(raw_body or "{}")
        except ValueError:
            raise ApiError.bad_request("Invalid webhook payload")
        if not isinstance(payload, dict):
            raise ApiError.bad_request("Invalid webhook payload")

        if matched == PaymentProvider.RAZORPAY:
            await self._process_razorpay_webhook(raw_body, signature, payload)
        elif matched == PaymentProvider.MOCK:
            if settings.is_production:
                raise ApiError.bad_request("Mock payments are disabled in production")
            await self._process_mock_webhook(payload)
        else:
            logger.warning(f"Webhook received for unsupported provider {matched.value}")

    async def _process_mock_webhook(self, payload: Dict[str, Any]) -> None:
        payment_id = payload.get("paymentId")
        status = payload.get("status")
        if not payment_id:
            raise ApiError.bad_request("paymentId is required")
        if status == PaymentStatus.SUCCESS.value:
            await self.handle_payment_success(payment_id, payload.get("providerPaymentId"), payload)
        elif status == PaymentStatus.FAILED.value:
            await self.handle_payment_failure(payment_id, payload)
        else:
            logger.info(f"Ignoring mock webhook with status {status!r}")

    async def _process_razorpay_webhook(
        self, raw_body: str, signature: Optional[str], payload: Dict[str, Any]
    ) -> None:
        if not self.razorpay.verify_webhook_signature(raw_body, signature or ""):
            raise ApiError.bad_request("Invalid webhook signature")

        event = payload.get("event", "")
        entities = payload.get("payload") or {}
        payment_entity = (entities.get("payment") or {}).get("entity") or {}
        order_entity = (entities.get("order") or {}).get("entity") or {}
        gateway_order_id = payment_entity.get("order_id") or order_entity.get("id")

        payment = await self.payments.get_by_provider_payment_id(gateway_order_id) if gateway_order_id else None
        if payment is None:
            logger.warning(f"Razorpay webhook {event!r} for unknown order {gateway_order_id}")
            return

        await self.events.log(payment.id, PaymentEventType.WEBHOOK.value, payload)
        await self.session.commit()

        if event in RAZORPAY_SUCCESS_EVENTS:
            await self.handle_payment_success(payment.id, gateway_order_id, payload)
        elif event in RAZORPAY_FAILURE_EVENTS:
            await self.handle_payment_failure(payment.id, payload)
        else:
            logger.info(f"Unhandled Razorpay webhook event {event!r}")

    # ------------------------------------------------------------------
    # Settlements
    # ------------------------------------------------------------------

    async def list_seller_settlements(self, seller_id: str) -> list[Dict[str, Any]]:
        rows = await self.settlements.list_by_seller(seller_id)
        return [serializers.settlement(settlement, item) for settlement, item in rows]

    async def mark_settlement_paid(self, settlement_id: str) -> Dict[str, Any]:
        settlement = await self.settlements.get_by_id(settlement_id)
        if settlement is None:
            raise ApiError.not_found("Settlement not found")
        settlement = await self.settlements.mark_paid(settlement)
        await self.session.commit()
        return serializers.settlement(settlement)
