"""Read-through response cache backed by Redis.

This module provides best-effort caching for read-heavy endpoints:
- Catalog listings and product details
- Buyer carts and orders
- Admin order and payment tables
- Shipment tracking

A cache failure is never an API failure: every operation logs the problem and
behaves like a miss. Leaving ``REDIS_URL`` empty disables caching entirely.
"""

import json
from typing import Any, Optional

import redis.asyncio as redis
from fastapi.encoders import jsonable_encoder

from tatvivah.core.logging_config import get_logger
from tatvivah.server.core.config import settings

logger = get_logger(__name__)

DEFAULT_TTL = 300
TRACKING_TTL = 600

_client: Optional[redis.Redis] = None


class CacheKeys:
    """Cache key names and builders."""

    CATEGORIES = "categories:list"
    PRODUCTS_LIST = "products:list"
    ADMIN_ORDERS = "admin:orders:list"
    ADMIN_PAYMENTS = "admin:payments:list"
    BESTSELLERS = "bestsellers:list"

    @staticmethod
    def product_detail(product_id: str) -> str:
        return f"products:detail:{product_id}"

    @staticmethod
    def cart(user_id: str) -> str:
        return f"cart:{user_id}"

    @staticmethod
    def buyer_orders(user_id: str) -> str:
        return f"orders:buyer:{user_id}"

    @staticmethod
    def order_detail(order_id: str) -> str:
        return f"orders:detail:{order_id}"

    @staticmethod
    def tracking(order_id: str) -> str:
        return f"tracking:{order_id}"


def get_client() -> Optional[redis.Redis]:
    """Lazily build the shared Redis client, or None when caching is disabled."""
    global _client
    if not settings.redis_url:
        return None
    if _client is None:
        _client = redis.from_url(settings.redis_url, decode_responses=True)
    return _client


async def get_cache(key: str) -> Optional[Any]:
    client = get_client()
    if client is None:
        return None
    try:
        raw = await client.get(key)
    except Exception as e:
        logger.warning(f"Cache read failed for {key}: {e}")
        return None
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning(f"Discarding undecodable cache entry {key}")
        return None


async def set_cache(key: str, value: Any, ttl: int = DEFAULT_TTL) -> None:
    client = get_client()
    if client is None:
        return
    try:
        await client.set(key, json.dumps(jsonable_encoder(value)), ex=ttl)
    except Exception as e:
        logger.warning(f"Cache write failed for {key}: {e}")


async def invalidate_cache(*keys: str) -> None:
    client = get_client()
    if client is None or not keys:
        return
    try:
        await client.delete(*keys)
    except Exception as e:
        logger.warning(f"Cache invalidation failed for {', '.join(keys)}: {e}")


async def invalidate_product_caches(product_id: Optional[str] = None) -> None:
    """Drop the product listing, bestsellers, and optionally one product detail."""
    keys = [CacheKeys.PRODUCTS_LIST, CacheKeys.BESTSELLERS]
    if product_id:
        keys.append(CacheKeys.product_detail(product_id))
    await invalidate_cache(*keys)


async def invalidate_category_cache() -> None:
    await invalidate_cache(CacheKeys.CATEGORIES)


async def close_cache() -> None:
    global _client
    if _client is None:
        return
    try:
        await _client.aclose()
    except Exception as e:
        logger.warning(f"Error closing Redis client: {e}")
    finally:
        _client = None
