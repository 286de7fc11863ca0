"""
Shipment and shipment event repositories.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.shipments import Shipment, ShipmentEvent
from .base import SQLModelRepository


class ShipmentRepository(SQLModelRepository[Shipment]):
    """Repository for per-seller shipments of an order."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Shipment)

    async def list_by_order(self, order_id: str) -> List[Shipment]:
        stmt = select(Shipment).where(Shipment.order_id == order_id).order_by(Shipment.created_at.desc())  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_seller(self, seller_id: str) -> List[Shipment]:
        stmt = (
            select(Shipment).where(Shipment.seller_id == seller_id).order_by(Shipment.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_order_and_seller(self, order_id: str, seller_id: str) -> Optional[Shipment]:
        stmt = select(Shipment).where(Shipment.order_id == order_id, Shipment.seller_id == seller_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()


class ShipmentEventRepository(SQLModelRepository[ShipmentEvent]):
    """Append-only shipment status history."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ShipmentEvent)

    async def record(self, shipment_id: str, status: str, note: Optional[str] = None) -> ShipmentEvent:
        event = ShipmentEvent(shipment_id=shipment_id, status=status, note=note)
        self.session.add(event)
        await self.session.flush()
        return event

    async def list_by_shipments(self, shipment_ids: Sequence[str]) -> Dict[str, List[ShipmentEvent]]:
        """Events grouped by shipment, newest first."""
        grouped: Dict[str, List[ShipmentEvent]] = {sid: [] for sid in shipment_ids}
        if not shipment_ids:
            return grouped
        stmt = (
            select(ShipmentEvent)
            .where(ShipmentEvent.shipment_id.in_(set(shipment_ids)))  # type: ignore[attr-defined]
            .order_by(ShipmentEvent.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        for event in result.scalars().all():
            grouped.setdefault(event.shipment_id, []).append(event)
        return grouped
