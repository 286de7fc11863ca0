"""Unit tests for the Redis response cache."""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from tatvivah.core import cache
from tatvivah.core.cache import CacheKeys
from tatvivah.server.core.config import settings

pytestmark = pytest.mark.asyncio


@pytest.fixture
def redis_client(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    client = AsyncMock()
    monkeypatch.setattr(settings, "redis_url", "redis://cache.test:6379/0")
    monkeypatch.setattr(cache, "_client", client)
    return client


class TestCacheKeys:
    async def test_builders(self):
        assert CacheKeys.product_detail("p1") == "products:detail:p1"
        assert CacheKeys.cart("u1") == "cart:u1"
        assert CacheKeys.buyer_orders("u1") == "orders:buyer:u1"
        assert CacheKeys.order_detail("o1") == "orders:detail:o1"
        assert CacheKeys.tracking("o1") == "tracking:o1"


class TestDisabled:
    async def test_no_url_means_no_client(self, monkeypatch):
        monkeypatch.setattr(settings, "redis_url", "")
        monkeypatch.setattr(cache, "_client", AsyncMock())

        assert cache.get_client() is None
        assert await cache.get_cache("categories:list") is None
        await cache.set_cache("categories:list", [1])
        await cache.invalidate_cache("categories:list")


class TestReadWrite:
    async def test_hit_decodes_json(self, redis_client):
        redis_client.get.return_value = json.dumps({"products": []})

        assert await cache.get_cache(CacheKeys.PRODUCTS_LIST) == {"products": []}
        redis_client.get.assert_awaited_once_with("products:list")

    async def test_miss(self, redis_client):
        redis_client.get.return_value = None

        assert await cache.get_cache("cart:u1") is None

    async def test_corrupt_entry_is_a_miss(self, redis_client):
        redis_client.get.return_value = "{not json"

        assert await cache.get_cache("cart:u1") is None

    async def test_read_error_is_a_miss(self, redis_client):
        redis_client.get.side_effect = RedisConnectionError("down")

        assert await cache.get_cache("cart:u1") is None

    async def test_set_encodes_with_ttl(self, redis_client):
        created = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        await cache.set_cache("orders:detail:o1", {"id": "o1", "createdAt": created}, ttl=cache.TRACKING_TTL)

        key, payload = redis_client.set.await_args.args
        assert key == "orders:detail:o1"
        assert json.loads(payload) == {"id": "o1", "createdAt": "2025-01-02T03:04:05+00:00"}
        assert redis_client.set.await_args.kwargs == {"ex": 600}

    async def test_write_error_is_swallowed(self, redis_client):
        redis_client.set.side_effect = RedisConnectionError("down")

        await cache.set_cache("cart:u1", {"items": []})


class TestInvalidation:
    async def test_deletes_all_keys(self, redis_client):
        await cache.invalidate_cache("a", "b")

        redis_client.delete.assert_awaited_once_with("a", "b")

    async def test_no_keys_no_call(self, redis_client):
        await cache.invalidate_cache()

        redis_client.delete.assert_not_awaited()

    async def test_delete_error_is_swallowed(self, redis_client):
        redis_client.delete.side_effect = RedisConnectionError("down")

        await cache.invalidate_cache("a")

    async def test_product_caches(self, redis_client):
        await cache.invalidate_product_caches("p1")

        redis_client.delete.assert_awaited_once_with("products:list", "bestsellers:list", "products:detail:p1")

    async def test_product_caches_without_detail(self, redis_client):
        await cache.invalidate_product_caches()

        redis_client.delete.assert_awaited_once_with("products:list", "bestsellers:list")

    async def test_category_cache(self, redis_client):
        await cache.invalidate_category_cache()

        redis_client.delete.assert_awaited_once_with("categories:list")


class TestClose:
    async def test_close_resets_client(self, redis_client):
        await cache.close_cache()

        redis_client.aclose.assert_awaited_once()
        assert cache._client is None

    async def test_close_error_still_resets(self, redis_client):
        redis_client.aclose.side_effect = RedisConnectionError("gone")

        await cache.close_cache()

        assert cache._client is None

    async def test_close_without_client(self, monkeypatch):
        monkeypatch.setattr(cache, "_client", None)

        await cache.close_cache()
