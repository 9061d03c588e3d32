"""Extracted-content cache backed by Redis.

Caches WebsiteContent snapshots keyed by URL so re-analysing the same site
(or a competitor shared across sessions) skips the network fetch.
The cache is optional: when Redis is unavailable every lookup is a miss.

ERROR LOGGING REQUIREMENTS:
- Log hits/misses at DEBUG level with the cache key
- Log deserialization failures with full stack trace and drop the entry
- Add timing logs for operations >1 second
"""

import hashlib
import json
import time
from dataclasses import dataclass

from adsintel.core.config import get_settings
from adsintel.core.logging import get_logger
from adsintel.core.redis import RedisManager, redis_manager
from adsintel.services.content_extraction import WebsiteContent

logger = get_logger(__name__)

SLOW_OPERATION_THRESHOLD_MS = 1000
CACHE_KEY_PREFIX = "website_content:"


@dataclass
class CacheStats:
    """Statistics for cache operations."""

    hits: int = 0
    misses: int = 0
    errors: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total


class ContentCache:
    """Redis cache of WebsiteContent.

    Cache key format: website_content:{sha256(url)[:16]}
    """

    def __init__(
        self,
        redis: RedisManager | None = None,
        ttl_seconds: int | None = None,
    ) -> None:
        settings = get_settings()
        self._redis = redis or redis_manager
        self._ttl_seconds = ttl_seconds or settings.content_cache_ttl
        self._stats = CacheStats()

    @property
    def available(self) -> bool:
        return self._redis.available

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def build_cache_key(self, url: str) -> str:
        normalized = url.lower().strip().rstrip("/")
        url_hash = hashlib.sha256(normalized.encode()).hexdigest()[:16]
        return f"{CACHE_KEY_PREFIX}{url_hash}"

    async def get(self, url: str) -> WebsiteContent | None:
        """Return cached content for a URL, or None on miss."""
        if not self.available:
            return None

        start_time = time.monotonic()
        cache_key = self.build_cache_key(url)
        cached = await self._redis.get(cache_key)
        duration_ms = (time.monotonic() - start_time) * 1000

        if duration_ms > SLOW_OPERATION_THRESHOLD_MS:
            logger.warning(
                "Slow content cache get operation",
                extra={
                    "cache_key": cache_key,
                    "duration_ms": round(duration_ms, 2),
                    "threshold_ms": SLOW_OPERATION_THRESHOLD_MS,
                },
            )

        if cached is None:
            self._stats.misses += 1
            logger.debug("Content cache miss", extra={"cache_key": cache_key})
            return None

        try:
            raw = cached.decode("utf-8") if isinstance(cached, bytes) else cached
            content = WebsiteContent.from_dict(json.loads(raw))
        except (json.JSONDecodeError, UnicodeDecodeError, AttributeError) as e:
            self._stats.errors += 1
            logger.error(
                "Content cache deserialization error",
                extra={"cache_key": cache_key, "error": str(e)},
                exc_info=True,
            )
            await self._redis.delete(cache_key)
            return None

        self._stats.hits += 1
        logger.debug(
            "Content cache hit",
            extra={"cache_key": cache_key, "duration_ms": round(duration_ms, 2)},
        )
        return content

    async def set(self, url: str, content: WebsiteContent) -> bool:
        """Store content for a URL. Returns False when nothing was written."""
        if not self.available:
            return False
        cache_key = self.build_cache_key(url)
        return await self._redis.set(
            cache_key, json.dumps(content.to_dict()), ex=self._ttl_seconds
        )

    async def invalidate(self, url: str) -> bool:
        if not self.available:
            return False
        deleted = await self._redis.delete(self.build_cache_key(url))
        return bool(deleted)
