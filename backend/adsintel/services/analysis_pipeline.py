"""AnalysisPipeline: the background task that owns session status.

A run walks one session through:
1. Website analysis (extraction failure is fatal)
2. Competitor analysis, when competitor URLs were given (per-URL failures
   are skipped inside the competitor service)
3. Meta targeting
4. Google targeting
5. completed

Any exception marks the session failed with a generic message; the
details only go to the logs. The final status is written once, at the
end of the run.

ERROR LOGGING REQUIREMENTS:
- Log state transitions (phase changes) at INFO level
- Log all exceptions with full stack trace and context
- Include entity IDs (session_id) in all logs
- Add timing logs for operations >1 second
"""

import time

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adsintel.core.logging import get_logger
from adsintel.models.analysis_session import AnalysisStatus
from adsintel.repositories.analysis_session import AnalysisSessionRepository
from adsintel.services.ai_reasoning import AIReasoningEngine
from adsintel.services.analysis_session import AnalysisSessionNotFoundError
from adsintel.services.competitor import CompetitorAnalysisService
from adsintel.services.content_extraction import ContentExtractor
from adsintel.services.targeting import TargetingService
from adsintel.services.website_analyzer import WebsiteAnalyzerService

logger = get_logger(__name__)

SLOW_OPERATION_THRESHOLD_MS = 1000

GENERIC_FAILURE_MESSAGE = "Analysis failed. Please try again."


class AnalysisPipeline:
    """Runs the full analysis for one session in its own DB sessions."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        ai_engine: AIReasoningEngine | None = None,
        extractor: ContentExtractor | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._ai_engine = ai_engine
        self._extractor = extractor

    async def start(self, session_id: str) -> None:
        """Mark the session processing before the run is scheduled."""
        async with self._session_factory() as session:
            updated = await AnalysisSessionRepository(session).update_status(
                session_id, AnalysisStatus.PROCESSING
            )
            if updated is None:
                raise AnalysisSessionNotFoundError(session_id)
            await session.commit()

    async def run(self, session_id: str) -> AnalysisStatus:
        """Run every step; returns the final status. Never raises."""
        start_time = time.monotonic()
        logger.info("Analysis pipeline started", extra={"session_id": session_id})

        try:
            await self._run_steps(session_id)
        except Exception as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            logger.error(
                "Analysis pipeline failed",
                extra={
                    "session_id": session_id,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "duration_ms": round(duration_ms, 2),
                },
                exc_info=True,
            )
            await self._mark_failed(session_id)
            return AnalysisStatus.FAILED

        duration_ms = (time.monotonic() - start_time) * 1000
        logger.info(
            "Analysis pipeline completed",
            extra={"session_id": session_id, "duration_ms": round(duration_ms, 2)},
        )
        if duration_ms > SLOW_OPERATION_THRESHOLD_MS:
            logger.warning(
                "Slow analysis pipeline",
                extra={"session_id": session_id, "duration_ms": round(duration_ms, 2)},
            )
        return AnalysisStatus.COMPLETED

    async def _run_steps(self, session_id: str) -> None:
        async with self._session_factory() as session:
            sessions = AnalysisSessionRepository(session)
            analysis_session = await sessions.get_by_id(session_id)
            if analysis_session is None:
                raise AnalysisSessionNotFoundError(session_id)

            logger.info("Pipeline phase: website analysis", extra={"session_id": session_id})
            website = await WebsiteAnalyzerService(
                session, self._extractor
            ).analyze_website(session_id, analysis_session.website_url)

            competitor_urls = list(analysis_session.competitor_urls or [])
            if competitor_urls:
                logger.info(
                    "Pipeline phase: competitor analysis",
                    extra={"session_id": session_id, "competitor_count": len(competitor_urls)},
                )
                await CompetitorAnalysisService(
                    session, self._extractor
                ).analyze_competitors(session_id, competitor_urls)

            keywords = list(analysis_session.keywords or []) or None
            targeting = TargetingService(session, self._ai_engine)

            logger.info("Pipeline phase: meta targeting", extra={"session_id": session_id})
            await targeting.generate_meta_targeting(session_id, website, keywords)

            logger.info("Pipeline phase: google targeting", extra={"session_id": session_id})
            await targeting.generate_google_targeting(session_id, website, keywords)

            await sessions.update_status(session_id, AnalysisStatus.COMPLETED)
            await session.commit()

    async def _mark_failed(self, session_id: str) -> None:
        try:
            async with self._session_factory() as session:
                await AnalysisSessionRepository(session).update_status(
                    session_id, AnalysisStatus.FAILED, GENERIC_FAILURE_MESSAGE
                )
                await session.commit()
        except Exception as e:
            logger.error(
                "Failed to mark analysis session failed",
                extra={
                    "session_id": session_id,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
                exc_info=True,
            )
