"""
Payment, payment event, and seller settlement repositories.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.orders import OrderItem
from ..entities.payments import Payment, PaymentEvent, SellerSettlement, SettlementStatus
from .base import SQLModelRepository


class PaymentRepository(SQLModelRepository[Payment]):
    """Repository for order payments (one per order)."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Payment)

    async def get_by_order(self, order_id: str) -> Optional[Payment]:
        result = await self.session.execute(select(Payment).where(Payment.order_id == order_id))
        return result.scalars().first()

    async def get_by_provider_payment_id(self, provider_payment_id: str) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.provider_payment_id == provider_payment_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_all(self) -> List[Payment]:
        result = await self.session.execute(select(Payment).order_by(Payment.created_at.desc()))  # type: ignore[attr-defined]
        return list(result.scalars().all())


class PaymentEventRepository(SQLModelRepository[PaymentEvent]):
    """Append-only payment event log."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PaymentEvent)

    async def log(self, payment_id: str, event_type: str, payload: Optional[Any] = None) -> PaymentEvent:
        event = PaymentEvent(payment_id=payment_id, type=event_type, payload=payload)
        self.session.add(event)
        await self.session.flush()
        return event

    async def list_by_payment(self, payment_id: str) -> List[PaymentEvent]:
        stmt = (
            select(PaymentEvent)
            .where(PaymentEvent.payment_id == payment_id)
            .order_by(PaymentEvent.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class SettlementRepository(SQLModelRepository[SellerSettlement]):
    """Repository for seller payouts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SellerSettlement)

    async def list_by_seller(self, seller_id: str) -> List[Tuple[SellerSettlement, OrderItem]]:
        stmt = (
            select(SellerSettlement, OrderItem)
            .join(OrderItem, OrderItem.id == SellerSettlement.order_item_id)  # type: ignore[arg-type]
            .where(SellerSettlement.seller_id == seller_id)
            .order_by(SellerSettlement.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return [(settlement, item) for settlement, item in result.all()]

    async def list_all(self) -> List[SellerSettlement]:
        stmt = select(SellerSettlement).order_by(SellerSettlement.created_at.desc())  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_paid(self, settlement: SellerSettlement) -> SellerSettlement:
        settlement.status = SettlementStatus.PAID.value
        return await self.update(settlement)
