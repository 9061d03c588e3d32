"""Core utilities and configuration."""

from adsintel.core.circuit_breaker import CircuitBreaker, CircuitBreakerConfig, CircuitState
from adsintel.core.config import Settings, get_settings
from adsintel.core.database import Base, db_manager, get_session
from adsintel.core.logging import ai_logger, db_logger, get_logger, redis_logger, setup_logging
from adsintel.core.redis import redis_manager

__all__ = [
    # Circuit breaker
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    # Config
    "Settings",
    "get_settings",
    # Database
    "Base",
    "db_manager",
    "get_session",
    # Logging
    "ai_logger",
    "db_logger",
    "get_logger",
    "redis_logger",
    "setup_logging",
    # Redis
    "redis_manager",
]
