"""Circuit breaker shared by the outbound clients.

Used by the Claude transport, the page fetcher and the Redis manager so a
failing dependency is skipped quickly instead of stalling the pipeline.
After recovery_timeout a single trial call is let through (half-open); its
outcome decides whether the circuit closes again.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreakerConfig:
    """Circuit breaker configuration."""

    failure_threshold: int
    recovery_timeout: float


class CircuitBreaker:
    """Async circuit breaker keyed by a dependency name."""

    def __init__(self, config: CircuitBreakerConfig, name: str = "default") -> None:
        self._config = config
        self._name = name
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._opened_at: float | None = None
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def is_open(self) -> bool:
        return self._state == CircuitState.OPEN

    def _transition(self, new_state: CircuitState) -> None:
        previous = self._state
        self._state = new_state
        log = logger.warning if new_state == CircuitState.OPEN else logger.info
        log(
            f"Circuit breaker {self._name}: {previous.value} -> {new_state.value}",
            extra={
                "circuit_name": self._name,
                "previous_state": previous.value,
                "new_state": new_state.value,
                "failure_count": self._failure_count,
                "recovery_timeout": self._config.recovery_timeout,
            },
        )

    async def can_execute(self) -> bool:
        """Return True when a call may go through right now."""
        async with self._lock:
            if self._state != CircuitState.OPEN:
                return True
            if (
                self._opened_at is not None
                and time.monotonic() - self._opened_at >= self._config.recovery_timeout
            ):
                self._transition(CircuitState.HALF_OPEN)
                return True
            return False

    async def record_success(self) -> None:
        async with self._lock:
            self._failure_count = 0
            if self._state == CircuitState.HALF_OPEN:
                self._opened_at = None
                self._transition(CircuitState.CLOSED)

    async def record_failure(self) -> None:
        async with self._lock:
            self._failure_count += 1
            if self._state == CircuitState.HALF_OPEN or (
                self._state == CircuitState.CLOSED
                and self._failure_count >= self._config.failure_threshold
            ):
                self._opened_at = time.monotonic()
                self._transition(CircuitState.OPEN)
