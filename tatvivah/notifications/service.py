"""Notification creation and delivery.

Notifications are written to the database as PENDING and handed to the
in-process ``NotificationDispatcher``, which calls ``deliver`` with retries.
Each step uses its own session so a notification never joins (or breaks)
the caller's transaction.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tatvivah.core.database.entities.notifications import (
    Notification,
    NotificationChannel,
    NotificationStatus,
    NotificationType,
)
from tatvivah.core.database.entities.users import Role
from tatvivah.core.database.repositories import (
    NotificationEventRepository,
    NotificationRepository,
    UserRepository,
)
from tatvivah.core.logging_config import get_logger

from . import templates
from .dispatcher import NotificationDispatcher
from .email import PROVIDER_NAME, EmailClient

logger = get_logger(__name__)


class NotificationService:
    """Persist notifications and deliver them by email.

    Args:
        session_factory: Session maker for notification writes; defaults to the
            application's ``async_session_maker``.
        dispatcher: Job runner; one is created around ``deliver`` when omitted.
        email_client: Email transport; defaults to ``EmailClient()``.
    """

    def __init__(
        self,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
        email_client: Optional[EmailClient] = None,
    ) -> None:
        self._session_factory = session_factory
        self.dispatcher = dispatcher or NotificationDispatcher()
        if self.dispatcher.handler is None:
            self.dispatcher.handler = self.deliver
        self.email_client = email_client or EmailClient()

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            from tatvivah.core.database.session import async_session_maker

            self._session_factory = async_session_maker
        return self._session_factory

    @session_factory.setter
    def session_factory(self, factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = factory

    async def create(
        self,
        *,
        type: NotificationType,
        content: str,
        user_id: Optional[str] = None,
        role: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        channel: NotificationChannel = NotificationChannel.EMAIL,
    ) -> Notification:
        """Store a PENDING notification and schedule its delivery."""
        async with self.session_factory() as session:
            notification = await NotificationRepository(session).create(
                Notification(
                    user_id=user_id,
                    role=role,
                    type=type.value,
                    channel=channel.value,
                    content=content,
                    meta=metadata or {},
                )
            )
            await session.commit()

        self.dispatcher.submit(notification.id)
        logger.debug(f"Queued {type.value} notification {notification.id}")
        return notification

    async def deliver(self, notification_id: str) -> None:
        """Send one notification. Raises on failure so the dispatcher retries."""
        async with self.session_factory() as session:
            notifications = NotificationRepository(session)
            events = NotificationEventRepository(session)

            notification = await notifications.get_by_id(notification_id)
            if notification is None:
                logger.error(f"Notification {notification_id} not found")
                return
            if notification.status == NotificationStatus.SENT.value:
                logger.info(f"Notification {notification_id} already sent. Skipping.")
                return

            try:
                meta = notification.meta or {}
                recipient = meta.get("email")
                if not recipient and notification.user_id:
                    user = await UserRepository(session).get_by_id(notification.user_id)
                    recipient = user.email if user else None
                if not recipient:
                    raise ValueError(f"No recipient email found for notification {notification_id}")

                subject, html = templates.render(notification.type, meta)
                message_id = await self.email_client.send(recipient, subject, html)

                notification.subject = subject
                await notifications.update_status(notification, NotificationStatus.SENT.value)
                await events.record(notification_id, PROVIDER_NAME, NotificationStatus.SENT.value, message_id)
                await session.commit()
                logger.info(f"Notification {notification_id} sent to {recipient}")
            except Exception as e:
                await session.rollback()
                await events.record(notification_id, PROVIDER_NAME, NotificationStatus.FAILED.value, error=str(e))
                await session.commit()
                raise

    # ------------------------------------------------------------------
    # Business triggers
    # ------------------------------------------------------------------

    async def notify_order_placed(self, user_id: str, order_id: str, total_amount: float) -> Notification:
        return await self.create(
            type=NotificationType.ORDER_PLACED,
            user_id=user_id,
            role=Role.USER.value,
            content=f"Order #{order_id} Placed",
            metadata={"orderId": order_id, "totalAmount": total_amount},
        )

    async def notify_seller_new_order(self, seller_id: str, order_id: str, items_count: int) -> Notification:
        return await self.create(
            type=NotificationType.SELLER_NEW_ORDER,
            user_id=seller_id,
            role=Role.SELLER.value,
            content=f"New Order #{order_id}",
            metadata={"orderId": order_id, "itemsCount": items_count},
        )

    async def notify_order_shipped(
        self, user_id: str, order_id: str, carrier: str, tracking_number: str
    ) -> Notification:
        return await self.create(
            type=NotificationType.ORDER_SHIPPED,
            user_id=user_id,
            role=Role.USER.value,
            content=f"Order #{order_id} Shipped",
            metadata={"orderId": order_id, "carrier": carrier, "trackingNumber": tracking_number},
        )

    async def notify_order_delivered(self, user_id: str, order_id: str) -> Notification:
        return await self.create(
            type=NotificationType.ORDER_DELIVERED,
            user_id=user_id,
            role=Role.USER.value,
            content=f"Order #{order_id} Delivered",
            metadata={"orderId": order_id},
        )

    async def notify_seller_approved(self, seller_id: str, seller_email: Optional[str] = None) -> Notification:
        return await self.create(
            type=NotificationType.SELLER_APPROVED,
            user_id=seller_id,
            role=Role.SELLER.value,
            content="Seller account approved",
            metadata={"sellerEmail": seller_email},
        )

    async def notify_product_rejected(
        self, seller_id: str, product_id: str, product_title: str, reason: str
    ) -> Notification:
        return await self.create(
            type=NotificationType.SELLER_PRODUCT_REJECTED,
            user_id=seller_id,
            role=Role.SELLER.value,
            content=f"Product {product_title} rejected",
            metadata={"productId": product_id, "productTitle": product_title, "reason": reason},
        )

    async def notify_admin(self, title: str, message: str, email: Optional[str] = None) -> Notification:
        metadata: Dict[str, Any] = {"title": title, "message": message}
        if email:
            metadata["email"] = email
        return await self.create(
            type=NotificationType.ADMIN_ALERT,
            role=Role.ADMIN.value,
            content=title,
            metadata=metadata,
        )


notification_service = NotificationService()
