"""
Product Service.

Storefront browsing plus the seller catalog: products, variants (SKUs), and
stock. Every seller mutation checks ownership and drops the affected caches.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.cache import CacheKeys, get_cache, invalidate_product_caches, set_cache
from tatvivah.core.database.entities.catalog import ModerationStatus, Product, ProductModeration, ProductVariant
from tatvivah.core.database.entities.inventory import Inventory
from tatvivah.core.database.repositories import (
    BestsellerRepository,
    CartItemRepository,
    CategoryRepository,
    InventoryRepository,
    ModerationRepository,
    ProductRepository,
    ReviewRepository,
    VariantRepository,
)
from tatvivah.core.errors import ApiError
from tatvivah.core.logging_config import get_logger
from tatvivah.core.models.io import ProductCreate, ProductUpdate, StockUpdate, VariantCreate, VariantUpdate

from . import serializers

logger = get_logger(__name__)


class ProductService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.products = ProductRepository(session)
        self.variants = VariantRepository(session)
        self.inventory = InventoryRepository(session)
        self.categories = CategoryRepository(session)
        self.moderations = ModerationRepository(session)

    # ------------------------------------------------------------------
    # Storefront
    # ------------------------------------------------------------------

    async def list_products(
        self, page: int = 1, limit: int = 20, category_id: Optional[str] = None, search: Optional[str] = None
    ) -> Dict[str, Any]:
        use_cache = not category_id and not search and page == 1 and limit == 20
        if use_cache:
            cached = await get_cache(CacheKeys.PRODUCTS_LIST)
            if cached:
                return cached

        products, total = await self.products.list_published(page, limit, category_id, search)
        categories = await self.categories.get_by_ids([p.category_id for p in products])
        response = {
            "data": [serializers.product(p, categories.get(p.category_id)) for p in products],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit),
            },
        }
        if use_cache:
            await set_cache(CacheKeys.PRODUCTS_LIST, response)
        return response

    async def _with_details(self, products: List[Product]) -> List[Dict[str, Any]]:
        categories = await self.categories.get_by_ids([p.category_id for p in products])
        variants = await self.variants.list_by_products([p.id for p in products])
        inventories = await self.inventory.get_by_variants([v.id for v in variants])
        by_product: Dict[str, List[ProductVariant]] = {}
        for v in variants:
            by_product.setdefault(v.product_id, []).append(v)
        return [
            serializers.product(p, categories.get(p.category_id), by_product.get(p.id, []), inventories)
            for p in products
        ]

    async def get_product_by_id(self, product_id: str) -> Dict[str, Any]:
        cache_key = CacheKeys.product_detail(product_id)
        cached = await get_cache(cache_key)
        if cached:
            return cached

        product = await self.products.get_published(product_id)
        if product is None:
            raise ApiError.not_found("Product not found")
        response = {"product": (await self._with_details([product]))[0]}
        await set_cache(cache_key, response)
        return response

    # ------------------------------------------------------------------
    # Seller catalog
    # ------------------------------------------------------------------

    async def _ensure_category(self, category_id: str) -> None:
        category = await self.categories.get_by_id(category_id)
        if category is None or not category.is_active:
            raise ApiError.bad_request("Invalid category ID")

    async def _owned_product(self, product_id: str, seller_id: str, action: str) -> Product:
        product = await self.products.get_by_id(product_id)
        if product is None or product.deleted_by_admin:
            raise ApiError.not_found("Product not found")
        if product.seller_id != seller_id:
            raise ApiError.forbidden(f"You do not have permission to {action}")
        return product

    async def _owned_variant(self, variant_id: str, seller_id: str, action: str) -> ProductVariant:
        variant = await self.variants.get_by_id(variant_id)
        if variant is None:
            raise ApiError.not_found("Variant not found")
        product = await self.products.get_by_id(variant.product_id)
        if product is None or product.seller_id != seller_id:
            raise ApiError.forbidden(f"You do not have permission to {action}")
        return variant

    async def create_product(self, seller_id: str, data: ProductCreate) -> Dict[str, Any]:
        await self._ensure_category(data.category_id)
        product = await self.products.create(
            Product(
                seller_id=seller_id,
                category_id=data.category_id,
                title=data.title,
                description=data.description,
                images=list(data.images or []),
                is_published=data.is_published,
            )
        )
        await self.moderations.create(ProductModeration(product_id=product.id, status=ModerationStatus.PENDING.value))
        await self.session.commit()
        await invalidate_product_caches()
        logger.info(f"Seller {seller_id} created product {product.id}")
        return {"message": "Product created successfully", "product": serializers.product(product)}

    async def list_seller_products(self, seller_id: str) -> Dict[str, Any]:
        products = await self.products.list_by_seller(seller_id)
        return {"products": await self._with_details(products)}

    async def update_product(self, product_id: str, seller_id: str, data: ProductUpdate) -> Dict[str, Any]:
        product = await self._owned_product(product_id, seller_id, "update this product")
        if data.category_id:
            await self._ensure_category(data.category_id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(product, field, list(value) if field == "images" else value)
        product = await self.products.update(product)
        await self.session.commit()
        await invalidate_product_caches(product_id)
        return {"message": "Product updated successfully", "product": serializers.product(product)}

    async def delete_product(self, product_id: str, seller_id: str) -> Dict[str, str]:
        """Remove a product together with its variants, stock, and listings."""
        product = await self._owned_product(product_id, seller_id, "delete this product")
        variant_ids = [v.id for v in await self.variants.list_by_products([product.id])]

        await self.inventory.delete_by_variants(variant_ids)
        await self.variants.delete_by_product(product.id)
        await self.moderations.delete_by_product(product.id)
        await BestsellerRepository(self.session).delete_by_product(product.id)
        await CartItemRepository(self.session).delete_by_product(product.id)
        for review in await ReviewRepository(self.session).list_by_product(product.id):
            await self.session.delete(review)
        await self.session.flush()
        await self.products.delete(product.id)
        await self.session.commit()
        await invalidate_product_caches(product_id)
        return {"message": "Product deleted successfully"}

    async def add_variant(self, product_id: str, seller_id: str, data: VariantCreate) -> Dict[str, Any]:
        product = await self._owned_product(product_id, seller_id, "add variants to this product")
        if await self.variants.get_by_sku(data.sku):
            raise ApiError.conflict("SKU already exists")

        variant = await self.variants.create(
            ProductVariant(
                product_id=product.id, sku=data.sku, price=data.price, compare_at_price=data.compare_at_price
            )
        )
        inventory = await self.inventory.create(Inventory(variant_id=variant.id, stock=data.initial_stock))
        await self.session.commit()
        await invalidate_product_caches(product_id)
        return {"message": "Variant created successfully", "variant": serializers.variant(variant, inventory)}

    async def update_variant(self, variant_id: str, seller_id: str, data: VariantUpdate) -> Dict[str, Any]:
        variant = await self._owned_variant(variant_id, seller_id, "update this variant")
        changes = data.model_dump(exclude_unset=True)
        if changes.get("price") is not None:
            variant.price = changes["price"]
        if "compare_at_price" in changes:
            variant.compare_at_price = changes["compare_at_price"]
        variant = await self.variants.update(variant)
        await self.session.commit()
        await invalidate_product_caches(variant.product_id)
        inventory = await self.inventory.get_by_variant(variant.id)
        return {"message": "Variant updated successfully", "variant": serializers.variant(variant, inventory)}

    async def update_stock(self, variant_id: str, seller_id: str, data: StockUpdate) -> Dict[str, Any]:
        variant = await self._owned_variant(variant_id, seller_id, "update this variant's stock")
        inventory = await self.inventory.upsert_stock(variant.id, data.stock)
        await self.session.commit()
        await invalidate_product_caches(variant.product_id)
        return {"message": "Stock updated successfully", "inventory": serializers.inventory(inventory)}
