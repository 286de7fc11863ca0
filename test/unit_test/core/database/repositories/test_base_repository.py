"""Tests for the shared CRUD behaviour of table repositories."""

import pytest

from tatvivah.core.database.entities.catalog import Category
from tatvivah.core.database.repositories import CategoryRepository

pytestmark = pytest.mark.asyncio


class TestSQLModelRepository:
    async def test_create_get_update_delete(self, session):
        repo = CategoryRepository(session)

        category = await repo.create(Category(name="Sherwani", slug="sherwani"))
        assert category.id
        assert category.created_at is not None

        category.name = "Sherwanis"
        await repo.update(category)
        assert (await repo.get_by_id(category.id)).name == "Sherwanis"

        assert await repo.delete(category.id) is True
        assert await repo.get_by_id(category.id) is None
        assert await repo.delete(category.id) is False

    async def test_list_and_count_with_filters(self, session, factory):
        await factory.category("Sarees")
        await factory.category("Lehengas")
        await factory.category("Archive", is_active=False)
        repo = CategoryRepository(session)

        assert await repo.count() == 3
        assert await repo.count(filters={"is_active": True}) == 2
        assert {c.name for c in await repo.list(filters={"is_active": False})} == {"Archive"}

    async def test_filters_ignore_unknown_columns_and_none(self, session, factory):
        await factory.category("Sarees")
        repo = CategoryRepository(session)

        assert await repo.count(filters={"no_such_column": 1, "is_active": None}) == 1

    async def test_pagination(self, session, factory):
        for name in ("A", "B", "C"):
            await factory.category(name)
        repo = CategoryRepository(session)

        first = await repo.list(limit=2)
        rest = await repo.list(limit=2, offset=2)

        assert len(first) == 2
        assert len(rest) == 1
        assert {c.id for c in first}.isdisjoint({c.id for c in rest})
