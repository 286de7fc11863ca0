"""
Order repositories.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.orders import Order, OrderItem
from .base import SQLModelRepository


class OrderRepository(SQLModelRepository[Order]):
    """Repository for buyer orders."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Order)

    async def list_by_user(self, user_id: str) -> List[Order]:
        stmt = select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc())  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_all(self) -> List[Order]:
        result = await self.session.execute(select(Order).order_by(Order.created_at.desc()))  # type: ignore[attr-defined]
        return list(result.scalars().all())

    async def get_by_ids(self, ids: Sequence[str]) -> Dict[str, Order]:
        if not ids:
            return {}
        result = await self.session.execute(select(Order).where(Order.id.in_(set(ids))))  # type: ignore[attr-defined]
        return {o.id: o for o in result.scalars().all()}

    async def update_status(self, order: Order, status: str) -> Order:
        order.status = status
        return await self.update(order)


class OrderItemRepository(SQLModelRepository[OrderItem]):
    """Repository for order lines."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, OrderItem)

    async def list_by_order(self, order_id: str) -> List[OrderItem]:
        result = await self.session.execute(select(OrderItem).where(OrderItem.order_id == order_id))
        return list(result.scalars().all())

    async def list_by_orders(self, order_ids: Sequence[str]) -> Dict[str, List[OrderItem]]:
        """Order lines grouped by order id."""
        grouped: Dict[str, List[OrderItem]] = {order_id: [] for order_id in order_ids}
        if not order_ids:
            return grouped
        stmt = select(OrderItem).where(OrderItem.order_id.in_(set(order_ids)))  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        for item in result.scalars().all():
            grouped.setdefault(item.order_id, []).append(item)
        return grouped

    async def list_by_seller(self, seller_id: str) -> List[Tuple[OrderItem, Order]]:
        """A seller's order lines joined with their order, newest order first."""
        stmt = (
            select(OrderItem, Order)
            .join(Order, Order.id == OrderItem.order_id)  # type: ignore[arg-type]
            .where(OrderItem.seller_id == seller_id)
            .order_by(Order.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return [(item, order) for item, order in result.all()]

    async def list_by_order_and_seller(self, order_id: str, seller_id: str) -> List[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id, OrderItem.seller_id == seller_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def distinct_sellers(self, order_id: str) -> List[str]:
        stmt = select(OrderItem.seller_id).where(OrderItem.order_id == order_id).distinct()
        result = await self.session.execute(stmt)
        return [row[0] for row in result.all()]
