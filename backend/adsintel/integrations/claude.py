"""Anthropic Messages API transport used by the AI reasoning engine.

complete() never raises. Every outcome, including a missing API key or an
open circuit, comes back as a CompletionResult so the targeting service can
decide whether to fall back to its rule-based path.

Retried (exponential backoff from CLAUDE_RETRY_DELAY):
- timeouts and transport errors
- 5xx responses
- 429 when retry-after is given and at most 60s

Not retried: 401/403 and other 4xx. Prompts and completions are logged at
DEBUG through ai_logger; the API key never is.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any

import httpx

from adsintel.core.circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from adsintel.core.config import get_settings
from adsintel.core.logging import ai_logger, get_logger

logger = get_logger(__name__)

ANTHROPIC_API_URL = "https://api.anthropic.com"
ANTHROPIC_API_VERSION = "2023-06-01"
MESSAGES_PATH = "/v1/messages"
MAX_RETRY_AFTER_SECONDS = 60


@dataclass
class CompletionResult:
    success: bool
    text: str | None = None
    stop_reason: str | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None
    error: str | None = None
    status_code: int | None = None
    duration_ms: float = 0.0
    request_id: str | None = None

    @property
    def total_tokens(self) -> int:
        return (self.input_tokens or 0) + (self.output_tokens or 0)


def _api_error_message(response: httpx.Response) -> str:
    """Pull error.message out of an Anthropic error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or "Client error"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return str(body)[:200]


def _failure(
    error: str, status: int, request_id: str | None, duration_ms: float
) -> CompletionResult:
    return CompletionResult(
        success=False,
        error=error,
        status_code=status,
        request_id=request_id,
        duration_ms=duration_ms,
    )


class ClaudeClient:
    """Async Claude client with retries and a circuit breaker.

    Any argument left as None is read from settings.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        settings = get_settings()

        self._api_key = api_key or settings.anthropic_api_key
        self._model = model or settings.claude_model
        self._timeout = timeout or settings.claude_timeout
        self._max_retries = max_retries or settings.claude_max_retries
        self._retry_delay = settings.claude_retry_delay if retry_delay is None else retry_delay
        self._max_tokens = max_tokens or settings.claude_max_tokens
        self._circuit_breaker = CircuitBreaker(
            CircuitBreakerConfig(
                failure_threshold=settings.claude_circuit_failure_threshold,
                recovery_timeout=settings.claude_circuit_recovery_timeout,
            ),
            name="claude",
        )
        self._client: httpx.AsyncClient | None = None

    @property
    def available(self) -> bool:
        return bool(self._api_key)

    @property
    def model(self) -> str:
        return self._model

    @property
    def circuit_breaker(self) -> CircuitBreaker:
        return self._circuit_breaker

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=ANTHROPIC_API_URL,
                headers={
                    "content-type": "application/json",
                    "accept": "application/json",
                    "anthropic-version": ANTHROPIC_API_VERSION,
                    "x-api-key": self._api_key or "",
                },
                timeout=httpx.Timeout(self._timeout),
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _can_retry(self, attempt: int) -> bool:
        return attempt < self._max_retries - 1

    async def _wait_before_retry(self, attempt: int, reason: str) -> None:
        delay = self._retry_delay * (2**attempt)
        logger.warning(
            "Retrying Claude request in %.1fs",
            delay,
            extra={
                "attempt": attempt + 1,
                "max_retries": self._max_retries,
                "delay_seconds": delay,
                "reason": reason,
            },
        )
        await asyncio.sleep(delay)

    def _build_body(
        self,
        user_prompt: str,
        system_prompt: str | None,
        max_tokens: int | None,
        temperature: float,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens or self._max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": user_prompt}],
        }
        if system_prompt:
            body["system"] = system_prompt
        return body

    async def _send(self, body: dict[str, Any], attempt: int) -> httpx.Response | str:
        """POST once; a transport failure is logged and returned as a message."""
        started = time.monotonic()
        try:
            return await self._http().post(MESSAGES_PATH, json=body)
        except httpx.TimeoutException:
            message = f"Request timed out after {self._timeout}s"
            ai_logger.timeout(self._model, self._timeout)
            error_type = "TimeoutError"
        except httpx.RequestError as e:
            message = f"Request failed: {e}"
            error_type = type(e).__name__
        ai_logger.api_call_error(
            self._model,
            (time.monotonic() - started) * 1000,
            None,
            message,
            error_type,
            retry_attempt=attempt,
        )
        await self._circuit_breaker.record_failure()
        return message

    async def complete(
        self,
        user_prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
        temperature: float = 0.0,
    ) -> CompletionResult:
        """Send one user prompt; temperature 0.0 keeps answers repeatable."""
        if not self.available:
            return CompletionResult(success=False, error="Claude not configured (missing API key)")
        if not await self._circuit_breaker.can_execute():
            return CompletionResult(success=False, error="Circuit breaker is open")

        body = self._build_body(user_prompt, system_prompt, max_tokens, temperature)
        started = time.monotonic()
        request_id: str | None = None
        last_error = "Request failed after all retries"

        for attempt in range(self._max_retries):
            ai_logger.api_call_start(
                self._model, len(user_prompt), retry_attempt=attempt, request_id=request_id
            )
            if system_prompt:
                ai_logger.request_body(self._model, system_prompt, user_prompt)

            attempt_started = time.monotonic()
            response = await self._send(body, attempt)
            if isinstance(response, str):
                last_error = response
                if not self._can_retry(attempt):
                    break
                await self._wait_before_retry(attempt, response)
                continue

            elapsed_ms = (time.monotonic() - attempt_started) * 1000
            request_id = response.headers.get("request-id")
            status = response.status_code

            if status == 429:
                header = response.headers.get("retry-after")
                retry_after = float(header) if header else None
                ai_logger.rate_limit(self._model, retry_after=retry_after, request_id=request_id)
                await self._circuit_breaker.record_failure()
                if (
                    self._can_retry(attempt)
                    and retry_after
                    and retry_after <= MAX_RETRY_AFTER_SECONDS
                ):
                    await asyncio.sleep(retry_after)
                    continue
                return _failure("Rate limit exceeded", status, request_id, elapsed_ms)

            if status in (401, 403):
                ai_logger.auth_failure(status)
                await self._circuit_breaker.record_failure()
                return _failure(f"Authentication failed ({status})", status, request_id, elapsed_ms)

            if status >= 500:
                error = f"Server error ({status})"
                ai_logger.api_call_error(
                    self._model,
                    elapsed_ms,
                    status,
                    error,
                    "ServerError",
                    retry_attempt=attempt,
                    request_id=request_id,
                )
                await self._circuit_breaker.record_failure()
                if not self._can_retry(attempt):
                    return _failure(error, status, request_id, elapsed_ms)
                await self._wait_before_retry(attempt, error)
                continue

            if status >= 400:
                message = _api_error_message(response)
                ai_logger.api_call_error(
                    self._model,
                    elapsed_ms,
                    status,
                    message,
                    "ClientError",
                    retry_attempt=attempt,
                    request_id=request_id,
                )
                return _failure(f"Client error ({status}): {message}", status, request_id, elapsed_ms)

            try:
                payload = response.json()
            except ValueError:
                await self._circuit_breaker.record_failure()
                return _failure("Response body is not valid JSON", status, request_id, elapsed_ms)

            await self._circuit_breaker.record_success()
            return self._success(payload, status, request_id, elapsed_ms, started)

        return CompletionResult(
            success=False,
            error=last_error,
            request_id=request_id,
            duration_ms=(time.monotonic() - started) * 1000,
        )

    def _success(
        self,
        payload: dict[str, Any],
        status: int,
        request_id: str | None,
        elapsed_ms: float,
        started: float,
    ) -> CompletionResult:
        blocks = payload.get("content") or []
        text = "".join(b.get("text", "") for b in blocks if b.get("type", "text") == "text")
        usage = payload.get("usage") or {}
        result = CompletionResult(
            success=True,
            text=text,
            stop_reason=payload.get("stop_reason"),
            input_tokens=usage.get("input_tokens"),
            output_tokens=usage.get("output_tokens"),
            status_code=status,
            request_id=request_id,
            duration_ms=(time.monotonic() - started) * 1000,
        )
        ai_logger.api_call_success(
            self._model,
            elapsed_ms,
            input_tokens=result.input_tokens,
            output_tokens=result.output_tokens,
            request_id=request_id,
        )
        ai_logger.response_body(self._model, text, elapsed_ms, stop_reason=result.stop_reason)
        return result


claude_client: ClaudeClient | None = None


async def init_claude() -> ClaudeClient:
    global claude_client
    if claude_client is None:
        claude_client = ClaudeClient()
        if claude_client.available:
            logger.info("Claude client ready", extra={"model": claude_client.model})
    return claude_client


async def close_claude() -> None:
    global claude_client
    if claude_client is not None:
        await claude_client.close()
        claude_client = None


async def get_claude() -> ClaudeClient:
    """Shared client, created on first use outside the app lifespan."""
    return await init_claude()
