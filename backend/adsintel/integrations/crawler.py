"""HTTP page fetcher for website and competitor analysis.

Features:
- Async HTTP client using httpx with redirects followed
- Bounded timeout (content_fetch_timeout, default 30s)
- Circuit breaker so a dead network path fails fast
- Oversized bodies truncated to content_max_html_bytes

ERROR LOGGING REQUIREMENTS:
- Log every fetch with target URL, status code and timing
- Log timeouts and network errors at WARNING level
- Slow fetches (>1000ms) logged at WARNING level
"""

import time
from dataclasses import dataclass

import httpx

from adsintel.core.circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from adsintel.core.config import get_settings
from adsintel.core.logging import get_logger

logger = get_logger(__name__)

SLOW_OPERATION_THRESHOLD_MS = 1000


@dataclass
class FetchResult:
    """Result of fetching a single page."""

    success: bool
    url: str
    html: str | None = None
    final_url: str | None = None
    status_code: int | None = None
    error: str | None = None
    duration_ms: float = 0.0


class PageFetcher:
    """Fetches raw HTML for a URL."""

    def __init__(
        self,
        timeout: float | None = None,
        user_agent: str | None = None,
        max_bytes: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._timeout = timeout or settings.content_fetch_timeout
        self._user_agent = user_agent or settings.content_fetch_user_agent
        self._max_bytes = max_bytes or settings.content_max_html_bytes
        self._transport = transport
        self._circuit_breaker = CircuitBreaker(
            CircuitBreakerConfig(
                failure_threshold=settings.content_circuit_failure_threshold,
                recovery_timeout=settings.content_circuit_recovery_timeout,
            ),
            name="page_fetcher",
        )

    @property
    def circuit_breaker(self) -> CircuitBreaker:
        return self._circuit_breaker

    async def fetch(self, url: str) -> FetchResult:
        """Fetch a page. Never raises; failures come back in the result."""
        if not await self._circuit_breaker.can_execute():
            return FetchResult(success=False, url=url, error="Circuit breaker is open")

        start_time = time.monotonic()
        logger.debug("Fetching page", extra={"target_url": url[:200]})

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                headers={"User-Agent": self._user_agent},
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException:
            duration_ms = (time.monotonic() - start_time) * 1000
            await self._circuit_breaker.record_failure()
            logger.warning(
                "Page fetch timed out",
                extra={
                    "target_url": url[:200],
                    "timeout_seconds": self._timeout,
                    "duration_ms": round(duration_ms, 2),
                },
            )
            return FetchResult(
                success=False,
                url=url,
                error=f"Request timed out after {self._timeout}s",
                duration_ms=duration_ms,
            )
        except httpx.RequestError as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            await self._circuit_breaker.record_failure()
            logger.warning(
                "Page fetch failed",
                extra={
                    "target_url": url[:200],
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "duration_ms": round(duration_ms, 2),
                },
            )
            return FetchResult(
                success=False, url=url, error=str(e), duration_ms=duration_ms
            )

        duration_ms = (time.monotonic() - start_time) * 1000
        # Any HTTP response, 4xx included, resets the failure streak
        await self._circuit_breaker.record_success()

        log_extra = {
            "target_url": url[:200],
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }
        if duration_ms > SLOW_OPERATION_THRESHOLD_MS:
            logger.warning("Slow page fetch", extra=log_extra)
        else:
            logger.debug("Page fetched", extra=log_extra)

        if response.status_code >= 400:
            return FetchResult(
                success=False,
                url=url,
                status_code=response.status_code,
                error=f"HTTP {response.status_code}",
                duration_ms=duration_ms,
            )

        html = response.text
        if len(html) > self._max_bytes:
            html = html[: self._max_bytes]

        return FetchResult(
            success=True,
            url=url,
            html=html,
            final_url=str(response.url),
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
