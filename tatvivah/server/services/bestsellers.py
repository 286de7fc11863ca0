"""
Bestseller Service.

Admins curate a shelf of at most four products shown on the storefront.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.cache import CacheKeys, get_cache, invalidate_cache, set_cache
from tatvivah.core.database.entities.reviews import Bestseller
from tatvivah.core.database.repositories import (
    BestsellerRepository,
    CategoryRepository,
    ProductRepository,
    UserRepository,
    VariantRepository,
)
from tatvivah.core.errors import ApiError
from tatvivah.core.logging_config import get_logger

logger = get_logger(__name__)

MAX_BESTSELLERS = 4


class BestsellerService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.bestsellers = BestsellerRepository(session)
        self.products = ProductRepository(session)
        self.categories = CategoryRepository(session)
        self.variants = VariantRepository(session)
        self.users = UserRepository(session)

    async def list_public(self, limit: int = MAX_BESTSELLERS) -> Dict[str, Any]:
        cached = await get_cache(CacheKeys.BESTSELLERS)
        if cached:
            return cached

        entries = await self.bestsellers.list_ordered()
        products = await self.products.get_by_ids([e.product_id for e in entries])
        visible = [
            e
            for e in entries
            if e.product_id in products
            and products[e.product_id].is_published
            and not products[e.product_id].deleted_by_admin
        ][:limit]

        categories = await self.categories.get_by_ids([products[e.product_id].category_id for e in visible])
        variants = await self.variants.list_by_products([e.product_id for e in visible])
        min_prices: Dict[str, float] = {}
        for v in variants:
            if v.product_id not in min_prices or v.price < min_prices[v.product_id]:
                min_prices[v.product_id] = v.price

        items: List[Dict[str, Any]] = []
        for e in visible:
            product = products[e.product_id]
            category = categories.get(product.category_id)
            items.append(
                {
                    "id": e.id,
                    "productId": product.id,
                    "position": e.position,
                    "title": product.title,
                    "image": product.images[0] if product.images else None,
                    "categoryName": category.name if category else None,
                    "minPrice": min_prices.get(product.id),
                }
            )

        response = {"products": items}
        await set_cache(CacheKeys.BESTSELLERS, response)
        return response

    async def list_admin(self) -> Dict[str, Any]:
        entries = await self.bestsellers.list_ordered()
        products = await self.products.get_by_ids([e.product_id for e in entries])
        categories = await self.categories.get_by_ids([p.category_id for p in products.values()])
        sellers = await self.users.get_by_ids([p.seller_id for p in products.values()])

        items: List[Dict[str, Any]] = []
        for e in entries:
            product = products.get(e.product_id)
            category = categories.get(product.category_id) if product else None
            seller = sellers.get(product.seller_id) if product else None
            items.append(
                {
                    "id": e.id,
                    "productId": e.product_id,
                    "position": e.position,
                    "title": product.title if product else None,
                    "categoryName": category.name if category else None,
                    "sellerEmail": seller.email if seller else None,
                    "isPublished": product.is_published if product else False,
                    "deletedByAdmin": product.deleted_by_admin if product else False,
                    "image": product.images[0] if product and product.images else None,
                }
            )
        return {"bestsellers": items}

    async def add(self, product_id: str, position: Optional[int] = None) -> Dict[str, Any]:
        if await self.bestsellers.count() >= MAX_BESTSELLERS:
            raise ApiError.bad_request(f"Only {MAX_BESTSELLERS} products can be marked as bestsellers")

        product = await self.products.get_by_id(product_id)
        if product is None:
            raise ApiError.not_found("Product not found")
        if product.deleted_by_admin:
            raise ApiError.bad_request("Product deleted by admin")
        if await self.bestsellers.get_by_product(product_id):
            raise ApiError.conflict("Product already in bestsellers")

        if position is None:
            position = await self.bestsellers.max_position() + 1
        entry = await self.bestsellers.create(Bestseller(product_id=product_id, position=position))
        await self.session.commit()
        await invalidate_cache(CacheKeys.BESTSELLERS)
        logger.info(f"Product {product_id} added to bestsellers at position {position}")
        return {"message": "Bestseller added", "bestseller": self._entry(entry)}

    async def update(self, bestseller_id: str, position: int) -> Dict[str, Any]:
        entry = await self.bestsellers.get_by_id(bestseller_id)
        if entry is None:
            raise ApiError.not_found("Bestseller not found")
        entry.position = position
        entry = await self.bestsellers.update(entry)
        await self.session.commit()
        await invalidate_cache(CacheKeys.BESTSELLERS)
        return {"message": "Bestseller updated", "bestseller": self._entry(entry)}

    async def remove(self, bestseller_id: str) -> Dict[str, str]:
        if not await self.bestsellers.delete(bestseller_id):
            raise ApiError.not_found("Bestseller not found")
        await self.session.commit()
        await invalidate_cache(CacheKeys.BESTSELLERS)
        return {"message": "Bestseller removed"}

    async def remove_by_product_id(self, product_id: str) -> None:
        """Drop a product from the shelf if present. Flushes only."""
        if await self.bestsellers.delete_by_product(product_id):
            await invalidate_cache(CacheKeys.BESTSELLERS)

    @staticmethod
    def _entry(entry: Bestseller) -> Dict[str, Any]:
        return {
            "id": entry.id,
            "productId": entry.product_id,
            "position": entry.position,
            "createdAt": entry.created_at,
            "updatedAt": entry.updated_at,
        }
