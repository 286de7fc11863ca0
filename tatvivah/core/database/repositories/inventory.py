"""
Inventory repositories: stock levels and stock movement ledger.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.inventory import Inventory, InventoryMovement
from .base import SQLModelRepository


class InventoryRepository(SQLModelRepository[Inventory]):
    """Repository for per-variant stock."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Inventory)

    async def get_by_variant(self, variant_id: str) -> Optional[Inventory]:
        result = await self.session.execute(select(Inventory).where(Inventory.variant_id == variant_id))
        return result.scalars().first()

    async def get_by_variants(self, variant_ids: Sequence[str]) -> Dict[str, Inventory]:
        if not variant_ids:
            return {}
        stmt = select(Inventory).where(Inventory.variant_id.in_(set(variant_ids)))  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return {i.variant_id: i for i in result.scalars().all()}

    async def upsert_stock(self, variant_id: str, stock: int) -> Inventory:
        inventory = await self.get_by_variant(variant_id)
        if inventory is None:
            inventory = Inventory(variant_id=variant_id, stock=stock)
        else:
            inventory.stock = stock
        return await self.update(inventory)

    async def decrement_stock(self, variant_id: str, quantity: int) -> bool:
        """Atomically take ``quantity`` units. False when stock is insufficient."""
        stmt = (
            update(Inventory)
            .where(Inventory.variant_id == variant_id, Inventory.stock >= quantity)
            .values(stock=Inventory.stock - quantity, updated_at=utc_now())
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0

    async def increment_stock(self, variant_id: str, quantity: int) -> None:
        stmt = (
            update(Inventory)
            .where(Inventory.variant_id == variant_id)
            .values(stock=Inventory.stock + quantity, updated_at=utc_now())
            .execution_options(synchronize_session="evaluate")
        )
        await self.session.execute(stmt)

    async def delete_by_variants(self, variant_ids: Sequence[str]) -> None:
        if variant_ids:
            await self.session.execute(
                delete(Inventory).where(Inventory.variant_id.in_(set(variant_ids)))  # type: ignore[attr-defined]
            )


class InventoryMovementRepository(SQLModelRepository[InventoryMovement]):
    """Repository for the stock movement ledger."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, InventoryMovement)

    async def record(self, variant_id: str, order_id: str, quantity: int, movement_type: str) -> InventoryMovement:
        movement = InventoryMovement(variant_id=variant_id, order_id=order_id, quantity=quantity, type=movement_type)
        self.session.add(movement)
        await self.session.flush()
        return movement

    async def list_by_order(self, order_id: str) -> List[InventoryMovement]:
        stmt = (
            select(InventoryMovement)
            .where(InventoryMovement.order_id == order_id)
            .order_by(InventoryMovement.created_at.asc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_variant(self, variant_id: str) -> List[InventoryMovement]:
        stmt = (
            select(InventoryMovement)
            .where(InventoryMovement.variant_id == variant_id)
            .order_by(InventoryMovement.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
