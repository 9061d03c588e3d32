"""CompetitorAnalysisService for per-URL competitor positioning.

Each competitor URL is analyzed independently: extract content, classify
it, derive positioning, audience overlap and content strategy, then
persist one CompetitorAnalysis row. A failure on one URL is logged and
that URL is skipped; the batch returns whatever succeeded.

ERROR LOGGING REQUIREMENTS:
- Log method entry/exit at DEBUG level with parameters (sanitized)
- Log per-URL failures with full stack trace and context
- Include entity IDs (session_id) in all service logs
- Add timing logs for operations >1 second
"""

import time
from dataclasses import asdict
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.core.logging import get_logger
from adsintel.models.competitor_analysis import CompetitorAnalysis
from adsintel.repositories.competitor_analysis import CompetitorAnalysisRepository
from adsintel.services.business_model_classifier import (
    ClassificationResult,
    classify_business_model,
)
from adsintel.services.content_extraction import ContentExtractor, WebsiteContent
from adsintel.utils.classification_rules import compile_keyword

logger = get_logger(__name__)

SLOW_OPERATION_THRESHOLD_MS = 1000

# Evaluated in order, first match wins
PRICING_STRATEGY_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("Freemium", ("free trial", "freemium")),
    ("Subscription", ("subscription", "monthly")),
    ("Custom pricing", ("quote", "contact sales")),
]
DEFAULT_PRICING_STRATEGY = "Standard"

GENERIC_STRENGTHS = [
    "Established online presence",
    "Clear product or service messaging",
]
GENERIC_WEAKNESSES = [
    "Messaging may not address every audience segment",
    "Limited differentiation visible from the website alone",
]
GENERIC_OPPORTUNITIES = [
    "Target audience segments the competitor under-serves",
    "Differentiate on value propositions the competitor does not stress",
    "Bid on competitor brand and comparison keywords",
]

MARKET_LABELS = {
    "B2B SaaS": "Businesses",
    "Agency": "Businesses",
    "Consulting": "Businesses",
    "Professional Services": "Businesses",
    "Manufacturing": "Businesses",
}
DEFAULT_MARKET_LABEL = "Consumers"


def guess_pricing_strategy(text: str) -> str:
    for label, cues in PRICING_STRATEGY_RULES:
        if any(compile_keyword(cue).search(text) for cue in cues):
            return label
    return DEFAULT_PRICING_STRATEGY


def target_market_label(business_model: str) -> str:
    return MARKET_LABELS.get(business_model, DEFAULT_MARKET_LABEL)


def build_positioning(
    content: WebsiteContent, classification: ClassificationResult
) -> dict[str, Any]:
    value_props = classification.value_propositions
    return {
        "business_model": classification.business_model.type,
        "unique_value_proposition": value_props[0].text if value_props else content.title,
        "value_propositions": [vp.text for vp in value_props],
        "target_market": target_market_label(classification.business_model.type),
        "pricing_strategy": guess_pricing_strategy(content.all_text().lower()),
        "strengths": list(GENERIC_STRENGTHS),
        "weaknesses": list(GENERIC_WEAKNESSES),
        "opportunities": list(GENERIC_OPPORTUNITIES),
    }


def build_audience_overlap(classification: ClassificationResult) -> dict[str, Any]:
    signals = classification.audience_signals
    return {
        "job_titles": signals.job_titles,
        "pain_points": signals.pain_points or [],
        "goals": signals.goals or [],
        "behaviors": signals.behaviors or [],
        "interests": signals.interests or [],
    }


def build_content_strategy(
    content: WebsiteContent, classification: ClassificationResult
) -> dict[str, Any]:
    return {
        "themes": [asdict(theme) for theme in classification.content_themes],
        "cta_buttons": list(content.cta_buttons),
        "heading_count": len(content.headings),
        "paragraph_count": len(content.paragraphs),
        "classification_confidence": classification.confidence,
    }


class CompetitorAnalysisService:
    """Analyze competitor websites for an analysis session."""

    def __init__(
        self,
        session: AsyncSession,
        extractor: ContentExtractor | None = None,
    ) -> None:
        self.session = session
        self.extractor = extractor or ContentExtractor()
        self.repository = CompetitorAnalysisRepository(session)

    async def analyze_competitors(
        self, session_id: str, urls: list[str]
    ) -> list[CompetitorAnalysis]:
        """Analyze each URL in order, skipping the ones that fail."""
        start_time = time.monotonic()
        logger.info(
            "Competitor analysis started",
            extra={"session_id": session_id, "competitor_count": len(urls)},
        )

        results: list[CompetitorAnalysis] = []
        for url in urls:
            try:
                results.append(await self._analyze_one(session_id, url))
            except Exception as e:
                logger.error(
                    "Competitor analysis failed, skipping URL",
                    extra={
                        "session_id": session_id,
                        "competitor_url": url[:200],
                        "error_type": type(e).__name__,
                        "error": str(e),
                    },
                    exc_info=True,
                )

        duration_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            "Competitor analysis complete",
            extra={
                "session_id": session_id,
                "requested": len(urls),
                "succeeded": len(results),
                "failed": len(urls) - len(results),
                "duration_ms": round(duration_ms, 2),
            },
        )
        if duration_ms > SLOW_OPERATION_THRESHOLD_MS:
            logger.warning(
                "Slow competitor analysis",
                extra={"session_id": session_id, "duration_ms": round(duration_ms, 2)},
            )
        return results

    async def _analyze_one(self, session_id: str, url: str) -> CompetitorAnalysis:
        content = await self.extractor.extract(url)
        classification = classify_business_model(content)
        # A failed insert rolls back to this savepoint only
        async with self.session.begin_nested():
            return await self.repository.create(
                session_id=session_id,
                competitor_url=url,
                positioning=build_positioning(content, classification),
                audience_insights=build_audience_overlap(classification),
                content_strategy=build_content_strategy(content, classification),
            )

    async def get_analyses_by_session(self, session_id: str) -> list[CompetitorAnalysis]:
        return await self.repository.get_by_session(session_id)
