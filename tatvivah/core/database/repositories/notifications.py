"""
Notification and notification event repositories.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.notifications import Notification, NotificationEvent, NotificationStatus
from .base import SQLModelRepository


class NotificationRepository(SQLModelRepository[Notification]):
    """Repository for outbound notifications."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Notification)

    async def update_status(self, notification: Notification, status: str) -> Notification:
        notification.status = status
        if status == NotificationStatus.SENT.value:
            notification.sent_at = utc_now()
        return await self.update(notification)

    async def find_all(self, page: int, limit: int) -> Tuple[List[Notification], int]:
        total_result = await self.session.execute(select(func.count()).select_from(Notification))
        total = int(total_result.scalar_one())
        stmt = (
            select(Notification)
            .order_by(Notification.created_at.desc())  # type: ignore[attr-defined]
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total


class NotificationEventRepository(SQLModelRepository[NotificationEvent]):
    """Delivery attempt log for notifications."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, NotificationEvent)

    async def record(
        self,
        notification_id: str,
        provider: str,
        status: str,
        provider_message_id: Optional[str] = None,
        error: Optional[str] = None,
    ) -> NotificationEvent:
        event = NotificationEvent(
            notification_id=notification_id,
            provider=provider,
            status=status,
            provider_message_id=provider_message_id,
            error=error,
        )
        self.session.add(event)
        await self.session.flush()
        return event

    async def list_by_notification(self, notification_id: str) -> List[NotificationEvent]:
        stmt = (
            select(NotificationEvent)
            .where(NotificationEvent.notification_id == notification_id)
            .order_by(NotificationEvent.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
