"""
Category Service.

Storefront category listing (cached) and admin category management.
"""

import re
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.core.cache import CacheKeys, get_cache, invalidate_category_cache, set_cache
from tatvivah.core.database.entities.catalog import Category
from tatvivah.core.database.repositories import CategoryRepository
from tatvivah.core.errors import ApiError
from tatvivah.core.models.io import CategoryCreate, CategoryUpdate

from . import serializers


def slugify(name: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to ``-``, trim dashes."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class CategoryService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.categories = CategoryRepository(session)

    async def _unique_slug(self, name: str, exclude_id: Optional[str] = None) -> str:
        base = slugify(name)
        if not base:
            raise ApiError.bad_request("Invalid category name")
        slug, suffix = base, 2
        while await self.categories.slug_exists(slug, exclude_id):
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    async def list_categories(self) -> Dict[str, Any]:
        cached = await get_cache(CacheKeys.CATEGORIES)
        if cached:
            return cached
        categories = await self.categories.list_ordered(active_only=True)
        response = {"categories": [serializers.category(c) for c in categories]}
        await set_cache(CacheKeys.CATEGORIES, response)
        return response

    async def list_all_categories(self) -> Dict[str, Any]:
        categories = await self.categories.list_ordered(active_only=False)
        return {"categories": [serializers.category(c, include_status=True) for c in categories]}

    async def create_category(self, data: CategoryCreate) -> Dict[str, Any]:
        category = await self.categories.create(
            Category(name=data.name.strip(), slug=await self._unique_slug(data.name), is_active=True)
        )
        await self.session.commit()
        await invalidate_category_cache()
        return {"message": "Category created successfully", "category": serializers.category(category, True)}

    async def update_category(self, category_id: str, data: CategoryUpdate) -> Dict[str, Any]:
        category = await self.categories.get_by_id(category_id)
        if category is None:
            raise ApiError.not_found("Category not found")
        if data.name is not None:
            category.name = data.name.strip()
            category.slug = await self._unique_slug(data.name, exclude_id=category.id)
        if data.is_active is not None:
            category.is_active = data.is_active
        category = await self.categories.update(category)
        await self.session.commit()
        await invalidate_category_cache()
        return {"message": "Category updated successfully", "category": serializers.category(category, True)}

    async def deactivate_category(self, category_id: str) -> Dict[str, Any]:
        category = await self.categories.get_by_id(category_id)
        if category is None:
            raise ApiError.not_found("Category not found")
        category.is_active = False
        category = await self.categories.update(category)
        await self.session.commit()
        await invalidate_category_cache()
        return {"message": "Category deactivated successfully", "category": serializers.category(category, True)}
