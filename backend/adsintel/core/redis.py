"""Optional Redis connection backing the extracted-content cache.

Nothing in the analysis flow requires Redis. When REDIS_URL is unset, the
server cannot be reached, or the circuit is open, commands return None and
callers carry on as if the cache missed.
"""

import time
from typing import Any

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from adsintel.core.circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from adsintel.core.config import Settings, get_settings
from adsintel.core.logging import get_logger, redis_logger

logger = get_logger(__name__)


def _breaker_for(settings: Settings) -> CircuitBreaker:
    return CircuitBreaker(
        config=CircuitBreakerConfig(
            failure_threshold=settings.redis_circuit_failure_threshold,
            recovery_timeout=settings.redis_circuit_recovery_timeout,
        ),
        name="redis",
    )


class RedisManager:
    """Process-wide Redis pool guarded by a circuit breaker."""

    def __init__(self) -> None:
        self._pool: ConnectionPool | None = None
        self._client: Redis | None = None
        self._circuit_breaker: CircuitBreaker | None = None
        self._available = False

    @property
    def available(self) -> bool:
        return self._available and self._client is not None

    async def init_redis(self) -> bool:
        """Connect and ping. Returns whether the cache can be used."""
        settings = get_settings()
        if not settings.redis_url:
            logger.info("REDIS_URL not set, content cache disabled")
            self._available = False
            return False

        redis_url = str(settings.redis_url)
        self._circuit_breaker = _breaker_for(settings)
        self._pool = ConnectionPool.from_url(
            redis_url,
            max_connections=settings.redis_pool_size,
            socket_connect_timeout=settings.redis_connect_timeout,
            socket_timeout=settings.redis_socket_timeout,
        )
        self._client = Redis(connection_pool=self._pool)

        try:
            await self._client.ping()  # type: ignore[misc]
        except (RedisError, OSError) as e:
            redis_logger.connection_error(e, redis_url)
            self._available = False
            return False

        self._available = True
        redis_logger.connection_success()
        return True

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
        if self._pool is not None:
            await self._pool.disconnect()
        self._client = None
        self._pool = None
        self._available = False
        logger.info("Redis pool closed")

    async def execute(self, command: str, *args: Any, **kwargs: Any) -> Any | None:
        """Run one redis command; None when the cache is unusable or errors."""
        if self._client is None or self._circuit_breaker is None:
            redis_logger.graceful_fallback(command, "Redis not initialized")
            return None
        if not await self._circuit_breaker.can_execute():
            redis_logger.graceful_fallback(command, "Circuit breaker open")
            return None

        key = str(args[0]) if args else ""
        started = time.monotonic()
        try:
            result = await getattr(self._client, command)(*args, **kwargs)
        except RedisError as e:
            redis_logger.operation(
                command, key, (time.monotonic() - started) * 1000, success=False
            )
            await self._circuit_breaker.record_failure()
            logger.error(
                "Redis command failed",
                extra={
                    "operation": command,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            return None

        redis_logger.operation(command, key, (time.monotonic() - started) * 1000, success=True)
        await self._circuit_breaker.record_success()
        return result

    async def get(self, key: str) -> bytes | None:
        return await self.execute("get", key)

    async def set(self, key: str, value: str | bytes, ex: int | None = None) -> bool:
        if ex is None:
            result = await self.execute("set", key, value)
        else:
            result = await self.execute("set", key, value, ex=ex)
        return result is not None

    async def delete(self, *keys: str) -> int | None:
        return await self.execute("delete", *keys)

    async def check_health(self) -> bool:
        if not self._available:
            return False
        pong = await self.execute("ping")
        return pong is True or pong == b"PONG"


redis_manager = RedisManager()
