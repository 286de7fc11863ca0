"""Unit tests for notification persistence and delivery."""

from unittest.mock import AsyncMock

import pytest
from sqlmodel import select

from tatvivah.core.database.entities.notifications import Notification, NotificationEvent, NotificationType
from tatvivah.notifications import EmailClient, EmailDeliveryError, NotificationDispatcher, NotificationService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def email_client() -> AsyncMock:
    client = AsyncMock(spec=EmailClient)
    client.send.return_value = "msg_1"
    return client


@pytest.fixture
def service(session_factory, email_client) -> NotificationService:
    dispatcher = NotificationDispatcher(max_attempts=2, base_delay=0)
    return NotificationService(session_factory=session_factory, dispatcher=dispatcher, email_client=email_client)


async def _events(session_factory, notification_id):
    async with session_factory() as session:
        result = await session.execute(
            select(NotificationEvent).where(NotificationEvent.notification_id == notification_id)
        )
        return list(result.scalars().all())


async def _reload(session_factory, notification_id) -> Notification:
    async with session_factory() as session:
        return await session.get(Notification, notification_id)


class TestCreateAndDeliver:
    async def test_delivers_to_user_email(self, service, email_client, factory, session_factory):
        buyer = await factory.buyer()

        notification = await service.notify_order_placed(buyer.id, "order-1", 1500.0)
        assert notification.status == "PENDING"
        await service.dispatcher.drain()

        email_client.send.assert_awaited_once()
        to, subject, html = email_client.send.await_args.args
        assert to == buyer.email
        assert subject == "Order Confirmed #order-1"

        stored = await _reload(session_factory, notification.id)
        assert stored.status == "SENT"
        assert stored.sent_at is not None
        assert stored.subject == subject
        events = await _events(session_factory, notification.id)
        assert [(e.status, e.provider, e.provider_message_id) for e in events] == [("SENT", "RESEND", "msg_1")]

    async def test_metadata_email_overrides_user(self, service, email_client):
        await service.notify_admin("Low stock", "Variant SKU-1 is low", email="ops@tatvivah.com")
        await service.dispatcher.drain()
        assert email_client.send.await_args.args[0] == "ops@tatvivah.com"

    async def test_missing_recipient_is_retried_then_recorded(self, service, email_client, session_factory):
        notification = await service.notify_admin("Low stock", "Variant SKU-1 is low")
        await service.dispatcher.drain()

        email_client.send.assert_not_awaited()
        events = await _events(session_factory, notification.id)
        assert [e.status for e in events] == ["FAILED", "FAILED"]
        assert "No recipient email" in events[0].error
        assert (await _reload(session_factory, notification.id)).status == "PENDING"

    async def test_provider_failure_then_success(self, service, email_client, factory, session_factory):
        seller = await factory.seller()
        email_client.send.side_effect = [EmailDeliveryError("Resend Error: 500", status_code=500), "msg_2"]

        notification = await service.notify_seller_new_order(seller.id, "order-9", 2)
        await service.dispatcher.drain()

        assert email_client.send.await_count == 2
        events = await _events(session_factory, notification.id)
        assert sorted(e.status for e in events) == ["FAILED", "SENT"]
        assert (await _reload(session_factory, notification.id)).status == "SENT"

    async def test_already_sent_is_skipped(self, service, email_client, factory):
        buyer = await factory.buyer()
        notification = await service.notify_order_delivered(buyer.id, "order-1")
        await service.dispatcher.drain()

        await service.deliver(notification.id)
        email_client.send.assert_awaited_once()

    async def test_unknown_notification_is_ignored(self, service, email_client):
        await service.deliver("missing")
        email_client.send.assert_not_awaited()


class TestTriggers:
    @pytest.fixture
    def create(self, service, monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
        mock = AsyncMock()
        monkeypatch.setattr(service, "create", mock)
        return mock

    async def test_order_shipped(self, service, create):
        await service.notify_order_shipped("u1", "o1", "BlueDart", "BD1")
        kwargs = create.await_args.kwargs
        assert kwargs["type"] == NotificationType.ORDER_SHIPPED
        assert kwargs["role"] == "USER"
        assert kwargs["metadata"] == {"orderId": "o1", "carrier": "BlueDart", "trackingNumber": "BD1"}

    async def test_product_rejected(self, service, create):
        await service.notify_product_rejected("s1", "p1", "Silk Saree", "Blurry")
        kwargs = create.await_args.kwargs
        assert kwargs["user_id"] == "s1"
        assert kwargs["content"] == "Product Silk Saree rejected"

    async def test_seller_approved(self, service, create):
        await service.notify_seller_approved("s1", "s1@example.com")
        kwargs = create.await_args.kwargs
        assert kwargs["type"] == NotificationType.SELLER_APPROVED
        assert kwargs["metadata"] == {"sellerEmail": "s1@example.com"}

    async def test_admin_alert_targets_role(self, service, create):
        await service.notify_admin("Payout", "Settlement run finished")
        kwargs = create.await_args.kwargs
        assert kwargs["role"] == "ADMIN"
        assert "user_id" not in kwargs
