"""Tests for the Redis-backed website content cache."""

from conftest import MockRedis, make_content

from adsintel.core.redis import RedisManager
from adsintel.services.content_cache import CACHE_KEY_PREFIX, ContentCache


class TestCacheKey:
    def test_key_normalizes_url(self, mock_redis_manager: RedisManager) -> None:
        cache = ContentCache(redis=mock_redis_manager)

        key = cache.build_cache_key("https://Acme.example/")

        assert key.startswith(CACHE_KEY_PREFIX)
        assert key == cache.build_cache_key("https://acme.example")
        assert len(key) == len(CACHE_KEY_PREFIX) + 16


class TestContentCache:
    async def test_set_then_get(self, mock_redis_manager: RedisManager) -> None:
        cache = ContentCache(redis=mock_redis_manager, ttl_seconds=60)
        content = make_content(title="Acme", headings=["One", "Two"])

        assert await cache.set(content.url, content) is True
        cached = await cache.get(content.url)

        assert cached == content
        assert cache.stats.hits == 1

    async def test_miss(self, mock_redis_manager: RedisManager) -> None:
        cache = ContentCache(redis=mock_redis_manager)

        assert await cache.get("https://unknown.example") is None
        assert cache.stats.misses == 1
        assert cache.stats.hit_rate == 0.0

    async def test_corrupt_entry_dropped(
        self, mock_redis_manager: RedisManager, mock_redis: MockRedis
    ) -> None:
        cache = ContentCache(redis=mock_redis_manager)
        key = cache.build_cache_key("https://acme.example")
        await mock_redis.set(key, "not json")

        assert await cache.get("https://acme.example") is None
        assert cache.stats.errors == 1
        assert await mock_redis.get(key) is None

    async def test_invalidate(self, mock_redis_manager: RedisManager) -> None:
        cache = ContentCache(redis=mock_redis_manager)
        content = make_content()
        await cache.set(content.url, content)

        assert await cache.invalidate(content.url) is True
        assert await cache.get(content.url) is None

    async def test_unavailable_redis_is_a_miss(
        self, mock_redis_unavailable: RedisManager
    ) -> None:
        cache = ContentCache(redis=mock_redis_unavailable)
        content = make_content()

        assert cache.available is False
        assert await cache.set(content.url, content) is False
        assert await cache.get(content.url) is None
