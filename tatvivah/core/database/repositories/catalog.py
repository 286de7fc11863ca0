"""
Catalog repositories: categories, products, variants, and moderation records.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.catalog import Category, ModerationStatus, Product, ProductModeration, ProductVariant
from .base import SQLModelRepository


class CategoryRepository(SQLModelRepository[Category]):
    """Repository for product categories."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Category)

    async def list_ordered(self, active_only: bool = True) -> List[Category]:
        stmt = select(Category)
        if active_only:
            stmt = stmt.where(Category.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt.order_by(Category.name))
        return list(result.scalars().all())

    async def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        stmt = select(Category.id).where(Category.slug == slug)
        if exclude_id:
            stmt = stmt.where(Category.id != exclude_id)
        result = await self.session.execute(stmt.limit(1))
        return result.first() is not None

    async def get_by_ids(self, ids: Sequence[str]) -> Dict[str, Category]:
        if not ids:
            return {}
        result = await self.session.execute(select(Category).where(Category.id.in_(set(ids))))  # type: ignore[attr-defined]
        return {c.id: c for c in result.scalars().all()}


class ProductRepository(SQLModelRepository[Product]):
    """Repository for seller products."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Product)

    @staticmethod
    def _visible():
        return (Product.is_published == True, Product.deleted_by_admin == False)  # noqa: E712

    async def list_published(
        self,
        page: int,
        limit: int,
        category_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Product], int]:
        """Page of storefront-visible products, newest first, with the total count."""
        conditions = list(self._visible())
        if category_id:
            conditions.append(Product.category_id == category_id)
        if search:
            conditions.append(
                or_(
                    Product.title.icontains(search, autoescape=True),  # type: ignore[attr-defined]
                    Product.description.icontains(search, autoescape=True),  # type: ignore[union-attr]
                )
            )

        total_result = await self.session.execute(select(func.count()).select_from(Product).where(*conditions))
        total = int(total_result.scalar_one())

        stmt = (
            select(Product)
            .where(*conditions)
            .order_by(Product.created_at.desc())  # type: ignore[attr-defined]
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_published(self, product_id: str) -> Optional[Product]:
        stmt = select(Product).where(Product.id == product_id, *self._visible())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_by_seller(self, seller_id: str) -> List[Product]:
        stmt = (
            select(Product)
            .where(Product.seller_id == seller_id, Product.deleted_by_admin == False)  # noqa: E712
            .order_by(Product.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_ids(self, ids: Sequence[str]) -> Dict[str, Product]:
        if not ids:
            return {}
        result = await self.session.execute(select(Product).where(Product.id.in_(set(ids))))  # type: ignore[attr-defined]
        return {p.id: p for p in result.scalars().all()}


class VariantRepository(SQLModelRepository[ProductVariant]):
    """Repository for product variants (SKUs)."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProductVariant)

    async def get_by_sku(self, sku: str) -> Optional[ProductVariant]:
        result = await self.session.execute(select(ProductVariant).where(ProductVariant.sku == sku))
        return result.scalars().first()

    async def list_by_products(self, product_ids: Sequence[str]) -> List[ProductVariant]:
        if not product_ids:
            return []
        stmt = (
            select(ProductVariant)
            .where(ProductVariant.product_id.in_(set(product_ids)))  # type: ignore[attr-defined]
            .order_by(ProductVariant.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_ids(self, ids: Sequence[str]) -> Dict[str, ProductVariant]:
        if not ids:
            return {}
        stmt = select(ProductVariant).where(ProductVariant.id.in_(set(ids)))  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return {v.id: v for v in result.scalars().all()}

    async def delete_by_product(self, product_id: str) -> None:
        await self.session.execute(delete(ProductVariant).where(ProductVariant.product_id == product_id))


class ModerationRepository(SQLModelRepository[ProductModeration]):
    """Repository for product moderation records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProductModeration)

    async def get_by_product(self, product_id: str) -> Optional[ProductModeration]:
        stmt = select(ProductModeration).where(ProductModeration.product_id == product_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_products(self, product_ids: Sequence[str]) -> Dict[str, ProductModeration]:
        if not product_ids:
            return {}
        stmt = select(ProductModeration).where(
            ProductModeration.product_id.in_(set(product_ids))  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return {m.product_id: m for m in result.scalars().all()}

    async def list_pending(self) -> List[ProductModeration]:
        stmt = (
            select(ProductModeration)
            .where(ProductModeration.status == ModerationStatus.PENDING.value)
            .order_by(ProductModeration.created_at.desc())  # type: ignore[attr-defined]
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def upsert(
        self, product_id: str, status: str, reviewed_by: Optional[str] = None, reason: Optional[str] = None
    ) -> ProductModeration:
        moderation = await self.get_by_product(product_id)
        if moderation is None:
            moderation = ProductModeration(product_id=product_id)
        moderation.status = status
        moderation.reason = reason
        moderation.reviewed_by = reviewed_by
        moderation.reviewed_at = utc_now() if reviewed_by else None
        return await self.update(moderation)

    async def delete_by_product(self, product_id: str) -> None:
        await self.session.execute(delete(ProductModeration).where(ProductModeration.product_id == product_id))
