"""AI reasoning adapter over the Claude transport.

Wraps a single prompt/response exchange in an AIAnalysisResponse
envelope. Callers never see transport exceptions or raw model JSON:

- Transport failures, non-2xx responses, unparsable JSON and schema
  validation errors all come back as success=False with an error string
- Successful responses carry a validated pydantic model from
  adsintel.schemas.ai_responses, with defaults applied to every
  optional field

ERROR LOGGING REQUIREMENTS:
- Log method entry/exit at DEBUG level with parameters (sanitized)
- Log failed analyses at WARNING level with the operation name
- Log unexpected exceptions with full stack trace
- Add timing logs for operations >1 second
"""

import json
import time
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from adsintel.core.config import get_settings
from adsintel.core.logging import ai_logger, get_logger
from adsintel.integrations.claude import ClaudeClient, get_claude
from adsintel.schemas.ai_responses import (
    AIAudienceInsights,
    AIBusinessModelAnalysis,
    AIGoogleTargeting,
    AIMetaTargeting,
)
from adsintel.services.ai_prompts import (
    ANALYST_SYSTEM_PROMPT,
    AUDIENCE_INSIGHTS_PROMPT_TEMPLATE,
    BUSINESS_MODEL_PROMPT_TEMPLATE,
    GOOGLE_TARGETING_PROMPT_TEMPLATE,
    KEYWORD_GOOGLE_TARGETING_PROMPT_TEMPLATE,
    KEYWORD_META_TARGETING_PROMPT_TEMPLATE,
    META_TARGETING_PROMPT_TEMPLATE,
    format_content,
    format_insights,
    format_keywords,
)
from adsintel.services.content_extraction import WebsiteContent
from adsintel.utils.classification_rules import BUSINESS_MODEL_TYPES

logger = get_logger(__name__)

SLOW_OPERATION_THRESHOLD_MS = 1000

# Some variety in wording, but stable structure
AI_TEMPERATURE = 0.3

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class AIAnalysisResponse:
    """Outcome of one AI reasoning call."""

    success: bool
    data: Any = None
    error: str | None = None
    confidence: float | None = None
    reasoning: str | None = None
    tokens_used: int | None = None
    duration_ms: float = 0.0


def extract_json(text: str) -> dict[str, Any]:
    """Pull a JSON object out of a model response.

    Tries a markdown code fence first, then the span from the first "{"
    to the last "}". Raises ValueError when neither yields an object.
    """
    candidates: list[str] = []
    if "```json" in text:
        candidates.append(text.split("```json", 1)[1].split("```", 1)[0])
    elif "```" in text:
        candidates.append(text.split("```", 2)[1])

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate.strip())
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise ValueError("No JSON object found in AI response")


def _first_attr(model: BaseModel, *names: str) -> Any:
    for name in names:
        value = getattr(model, name, None)
        if value is not None:
            return value
    return None


class AIReasoningEngine:
    """Structured AI analysis of website content."""

    def __init__(self, claude_client: ClaudeClient | None = None) -> None:
        self._claude = claude_client

    async def _get_client(self) -> ClaudeClient:
        if self._claude is None:
            self._claude = await get_claude()
        return self._claude

    def is_configured(self) -> bool:
        """True when an Anthropic API key is available."""
        if self._claude is not None:
            return self._claude.available
        return bool(get_settings().anthropic_api_key)

    async def invoke(
        self,
        prompt: str,
        system_prompt: str | None,
        response_model: type[ModelT],
        operation: str = "invoke",
    ) -> AIAnalysisResponse:
        """Send one prompt and validate the reply against response_model."""
        start_time = time.monotonic()
        logger.debug(
            "AI reasoning call starting",
            extra={
                "operation": operation,
                "prompt_length": len(prompt),
                "response_model": response_model.__name__,
            },
        )

        try:
            client = await self._get_client()
            if not client.available:
                return self._failure(operation, "AI reasoning is not configured", start_time)

            result = await client.complete(
                user_prompt=prompt,
                system_prompt=system_prompt,
                temperature=AI_TEMPERATURE,
            )
        except Exception as e:
            logger.error(
                "Unexpected error during AI reasoning call",
                extra={
                    "operation": operation,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
                exc_info=True,
            )
            return self._failure(operation, f"Unexpected error: {e}", start_time)

        tokens_used = result.total_tokens if result.success else None
        if not result.success or not result.text:
            return self._failure(
                operation, result.error or "Empty AI response", start_time, tokens_used
            )

        try:
            payload = extract_json(result.text)
        except ValueError as e:
            return self._failure(operation, str(e), start_time, tokens_used)

        try:
            data = response_model.model_validate(payload)
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            logger.warning(
                "Validation failed: AI response does not match schema",
                extra={
                    "operation": operation,
                    "field": fields[:10],
                    "rejected_value": json.dumps(payload, default=str)[:200],
                },
            )
            return self._failure(
                operation,
                f"AI response failed validation: {', '.join(fields[:5])}",
                start_time,
                tokens_used,
            )
        except (TypeError, ValueError) as e:
            logger.warning(
                "Validation failed: AI response has malformed values",
                extra={"operation": operation, "error": str(e)},
            )
            return self._failure(
                operation, f"AI response failed validation: {e}", start_time, tokens_used
            )

        duration_ms = round((time.monotonic() - start_time) * 1000, 2)
        logger.debug(
            "AI reasoning call complete",
            extra={
                "operation": operation,
                "tokens_used": tokens_used,
                "duration_ms": duration_ms,
            },
        )
        if duration_ms > SLOW_OPERATION_THRESHOLD_MS:
            logger.warning(
                "Slow AI reasoning call",
                extra={"operation": operation, "duration_ms": duration_ms},
            )

        return AIAnalysisResponse(
            success=True,
            data=data,
            confidence=_first_attr(data, "confidence", "confidence_score"),
            reasoning=_first_attr(data, "reasoning", "overall_reasoning"),
            tokens_used=tokens_used,
            duration_ms=duration_ms,
        )

    def _failure(
        self,
        operation: str,
        error: str,
        start_time: float,
        tokens_used: int | None = None,
    ) -> AIAnalysisResponse:
        ai_logger.analysis_failed(operation, error)
        return AIAnalysisResponse(
            success=False,
            error=error,
            tokens_used=tokens_used,
            duration_ms=round((time.monotonic() - start_time) * 1000, 2),
        )

    async def analyze_business_model(self, content: WebsiteContent) -> AIAnalysisResponse:
        prompt = BUSINESS_MODEL_PROMPT_TEMPLATE.format(
            business_model_types=", ".join(BUSINESS_MODEL_TYPES),
            content=format_content(content),
        )
        return await self.invoke(
            prompt, ANALYST_SYSTEM_PROMPT, AIBusinessModelAnalysis, "analyze_business_model"
        )

    async def analyze_audience_insights(
        self, content: WebsiteContent, business_model: str | None = None
    ) -> AIAnalysisResponse:
        prompt = AUDIENCE_INSIGHTS_PROMPT_TEMPLATE.format(
            business_model=business_model or "business",
            content=format_content(content),
        )
        return await self.invoke(
            prompt, ANALYST_SYSTEM_PROMPT, AIAudienceInsights, "analyze_audience_insights"
        )

    async def generate_meta_targeting(
        self,
        content: WebsiteContent,
        insights: dict[str, Any] | None,
        keywords: list[str] | None = None,
    ) -> AIAnalysisResponse:
        """Meta Ads targeting; keyword-focused when keywords are given."""
        if keywords:
            prompt = KEYWORD_META_TARGETING_PROMPT_TEMPLATE.format(
                keywords=format_keywords(keywords),
                content=format_content(content),
                insights=format_insights(insights),
            )
        else:
            prompt = META_TARGETING_PROMPT_TEMPLATE.format(
                content=format_content(content),
                insights=format_insights(insights),
            )
        return await self.invoke(
            prompt, ANALYST_SYSTEM_PROMPT, AIMetaTargeting, "generate_meta_targeting"
        )

    async def generate_google_targeting(
        self,
        content: WebsiteContent,
        insights: dict[str, Any] | None,
        keywords: list[str] | None = None,
    ) -> AIAnalysisResponse:
        """Google Ads targeting; keyword-focused when keywords are given."""
        if keywords:
            prompt = KEYWORD_GOOGLE_TARGETING_PROMPT_TEMPLATE.format(
                keywords=format_keywords(keywords),
                content=format_content(content),
                insights=format_insights(insights),
            )
        else:
            prompt = GOOGLE_TARGETING_PROMPT_TEMPLATE.format(
                content=format_content(content),
                insights=format_insights(insights),
            )
        return await self.invoke(
            prompt, ANALYST_SYSTEM_PROMPT, AIGoogleTargeting, "generate_google_targeting"
        )
