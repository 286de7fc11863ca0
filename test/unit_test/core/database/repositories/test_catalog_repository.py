"""Repository tests for products, categories and moderation records."""

import pytest

from tatvivah.core.database.entities.catalog import ModerationStatus
from tatvivah.core.database.repositories import (
    CategoryRepository,
    ModerationRepository,
    ProductRepository,
    VariantRepository,
)

pytestmark = pytest.mark.asyncio


class TestProductRepository:
    async def test_only_visible_products_are_listed(self, session, factory):
        seller = await factory.seller()
        visible, _ = await factory.product(seller, title="Banarasi Silk")
        await factory.product(seller, title="Draft Lehenga", is_published=False)
        removed, _ = await factory.product(seller, title="Removed Kurta")
        removed.deleted_by_admin = True
        await session.commit()

        products, total = await ProductRepository(session).list_published(page=1, limit=20)

        assert total == 1
        assert [p.id for p in products] == [visible.id]

    async def test_search_matches_title_and_description(self, session, factory):
        seller = await factory.seller()
        by_title, _ = await factory.product(seller, title="Kanjivaram Saree")
        by_description, _ = await factory.product(seller, title="Wedding Dupatta", description="pure kanjivaram silk")
        await factory.product(seller, title="Cotton Kurta")

        products, total = await ProductRepository(session).list_published(page=1, limit=20, search="KANJIVARAM")

        assert total == 2
        assert {p.id for p in products} == {by_title.id, by_description.id}

    async def test_search_escapes_wildcards(self, session, factory):
        await factory.product(await factory.seller(), title="Festive Saree")

        _, total = await ProductRepository(session).list_published(page=1, limit=20, search="%")

        assert total == 0

    async def test_category_filter_and_pagination(self, session, factory):
        seller = await factory.seller()
        bridal = await factory.category("Bridal")
        for i in range(3):
            await factory.product(seller, category=bridal, title=f"Bridal {i}")
        await factory.product(seller, title="Other")
        repo = ProductRepository(session)

        first_page, total = await repo.list_published(page=1, limit=2, category_id=bridal.id)
        second_page, _ = await repo.list_published(page=2, limit=2, category_id=bridal.id)

        assert total == 3
        assert len(first_page) == 2
        assert len(second_page) == 1
        assert not {p.id for p in first_page} & {p.id for p in second_page}

    async def test_get_published(self, session, factory):
        seller = await factory.seller()
        live, _ = await factory.product(seller)
        draft, _ = await factory.product(seller, is_published=False)
        repo = ProductRepository(session)

        assert (await repo.get_published(live.id)).id == live.id
        assert await repo.get_published(draft.id) is None

    async def test_list_by_seller_hides_admin_deleted(self, session, factory):
        seller = await factory.seller()
        kept, _ = await factory.product(seller, is_published=False)
        removed, _ = await factory.product(seller)
        removed.deleted_by_admin = True
        await factory.product(await factory.seller())
        await session.commit()

        assert [p.id for p in await ProductRepository(session).list_by_seller(seller.id)] == [kept.id]


class TestCategoryRepository:
    async def test_list_ordered_active_only(self, session, factory):
        active = await factory.category("Sarees")
        inactive = await factory.category("Archive", is_active=False)
        repo = CategoryRepository(session)

        assert [c.id for c in await repo.list_ordered()] == [active.id]
        assert {c.id for c in await repo.list_ordered(active_only=False)} == {active.id, inactive.id}

    async def test_slug_exists(self, session, factory):
        category = await factory.category("Lehengas")
        repo = CategoryRepository(session)

        assert await repo.slug_exists(category.slug) is True
        assert await repo.slug_exists(category.slug, exclude_id=category.id) is False
        assert await repo.slug_exists("unknown-slug") is False


class TestVariantAndModeration:
    async def test_variant_lookups(self, session, factory):
        product, variant = await factory.product(await factory.seller())
        repo = VariantRepository(session)

        assert (await repo.get_by_sku(variant.sku)).id == variant.id
        assert [v.id for v in await repo.list_by_products([product.id])] == [variant.id]
        assert await repo.list_by_products([]) == []

    async def test_moderation_upsert_sets_review_fields(self, session, factory):
        product, _ = await factory.product(await factory.seller())
        admin = await factory.admin()
        repo = ModerationRepository(session)

        assert [m.product_id for m in await repo.list_pending()] == [product.id]

        moderation = await repo.upsert(product.id, ModerationStatus.REJECTED.value, admin.id, "Blurry images")

        assert moderation.status == "REJECTED"
        assert moderation.reason == "Blurry images"
        assert moderation.reviewed_by == admin.id
        assert moderation.reviewed_at is not None
        assert await repo.list_pending() == []
