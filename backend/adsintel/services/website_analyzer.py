"""WebsiteAnalyzerService: extract, classify and persist one website.

ERROR LOGGING REQUIREMENTS:
- Log method entry/exit at DEBUG level with parameters (sanitized)
- Log state transitions (phase changes) at INFO level
- Include entity IDs (session_id, analysis_id) in all service logs
- Add timing logs for operations >1 second
"""

import time
from dataclasses import asdict
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.core.logging import get_logger
from adsintel.models.website_analysis import WebsiteAnalysis
from adsintel.repositories.website_analysis import WebsiteAnalysisRepository
from adsintel.services.business_model_classifier import (
    ClassificationResult,
    classify_business_model,
)
from adsintel.services.content_extraction import ContentExtractor, WebsiteContent

logger = get_logger(__name__)

SLOW_OPERATION_THRESHOLD_MS = 1000


def build_technical_metadata(
    content: WebsiteContent, classification: ClassificationResult
) -> dict[str, Any]:
    """Extracted content plus classification details, as stored JSON."""
    metadata = content.to_dict()
    metadata.pop("url", None)
    metadata["classification_confidence"] = classification.confidence
    metadata["business_model_details"] = asdict(classification.business_model)
    return metadata


def build_target_audience(classification: ClassificationResult) -> dict[str, Any]:
    """Audience signals as stored JSON; undetected signals stay None."""
    return asdict(classification.audience_signals)


class WebsiteAnalyzerService:
    """Runs content extraction and classification for a session's website."""

    def __init__(
        self,
        session: AsyncSession,
        extractor: ContentExtractor | None = None,
    ) -> None:
        self.session = session
        self.extractor = extractor or ContentExtractor()
        self.repository = WebsiteAnalysisRepository(session)

    async def analyze_website(self, session_id: str, url: str) -> WebsiteAnalysis:
        """Extract, classify and persist a website analysis.

        Raises:
            ContentExtractionError: If the website cannot be fetched
        """
        start_time = time.monotonic()
        logger.info(
            "Website analysis started",
            extra={"session_id": session_id, "target_url": url[:200]},
        )

        content = await self.extractor.extract(url)
        classification = classify_business_model(content)

        analysis = await self.repository.create(
            session_id=session_id,
            url=url,
            business_model=classification.business_model.type,
            value_propositions=[asdict(vp) for vp in classification.value_propositions],
            target_audience=build_target_audience(classification),
            content_themes=[asdict(theme) for theme in classification.content_themes],
            technical_metadata=build_technical_metadata(content, classification),
        )

        duration_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            "Website analysis complete",
            extra={
                "session_id": session_id,
                "analysis_id": analysis.id,
                "business_model": classification.business_model.type,
                "confidence": classification.confidence,
                "duration_ms": round(duration_ms, 2),
            },
        )
        if duration_ms > SLOW_OPERATION_THRESHOLD_MS:
            logger.warning(
                "Slow website analysis",
                extra={"session_id": session_id, "duration_ms": round(duration_ms, 2)},
            )
        return analysis

    async def get_analyses_by_session(self, session_id: str) -> list[WebsiteAnalysis]:
        return await self.repository.get_by_session(session_id)
