"""
Review and bestseller repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.reviews import Bestseller, Review
from .base import SQLModelRepository


class ReviewRepository(SQLModelRepository[Review]):
    """Repository for product reviews."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Review)

    async def list_by_product(self, product_id: str) -> List[Review]:
        stmt = select(Review).where(Review.product_id == product_id).order_by(Review.created_at.desc())  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class BestsellerRepository(SQLModelRepository[Bestseller]):
    """Repository for the curated bestseller shelf."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Bestseller)

    async def list_ordered(self) -> List[Bestseller]:
        stmt = select(Bestseller).order_by(Bestseller.position, Bestseller.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_product(self, product_id: str) -> Optional[Bestseller]:
        result = await self.session.execute(select(Bestseller).where(Bestseller.product_id == product_id))
        return result.scalars().first()

    async def max_position(self) -> int:
        result = await self.session.execute(select(func.max(Bestseller.position)))
        value = result.scalar_one_or_none()
        return int(value) if value is not None else 0

    async def delete_by_product(self, product_id: str) -> int:
        result = await self.session.execute(delete(Bestseller).where(Bestseller.product_id == product_id))
        return result.rowcount or 0
