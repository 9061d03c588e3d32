"""WebsiteAnalysisRepository for classified website content.

ERROR LOGGING REQUIREMENTS:
- Log method entry/exit at DEBUG level with parameters (sanitized)
- Log all exceptions with full stack trace and context
- Include entity IDs (session_id, analysis_id) in all logs
- Add timing logs for operations >1 second
"""

import time
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.core.logging import db_logger, get_logger
from adsintel.models.website_analysis import WebsiteAnalysis

logger = get_logger(__name__)


class WebsiteAnalysisRepository:
    """Repository for WebsiteAnalysis operations."""

    TABLE_NAME = "website_analyses"
    SLOW_OPERATION_THRESHOLD_MS = 1000

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        session_id: str,
        url: str,
        business_model: str | None,
        value_propositions: list[dict[str, Any]],
        target_audience: dict[str, Any],
        content_themes: list[dict[str, Any]],
        technical_metadata: dict[str, Any],
    ) -> WebsiteAnalysis:
        start_time = time.monotonic()
        logger.debug(
            "Creating website analysis",
            extra={
                "session_id": session_id,
                "url": url[:200],
                "business_model": business_model,
            },
        )

        try:
            analysis = WebsiteAnalysis(
                session_id=session_id,
                url=url,
                business_model=business_model,
                value_propositions=value_propositions,
                target_audience=target_audience,
                content_themes=content_themes,
                technical_metadata=technical_metadata,
            )
            self.session.add(analysis)
            await self.session.flush()
            await self.session.refresh(analysis)

            duration_ms = (time.monotonic() - start_time) * 1000
            logger.debug(
                "Website analysis created successfully",
                extra={
                    "analysis_id": analysis.id,
                    "session_id": session_id,
                    "duration_ms": round(duration_ms, 2),
                },
            )
            if duration_ms > self.SLOW_OPERATION_THRESHOLD_MS:
                db_logger.slow_query(
                    query="INSERT INTO website_analyses",
                    duration_ms=duration_ms,
                    table=self.TABLE_NAME,
                )
            return analysis

        except SQLAlchemyError as e:
            db_logger.transaction_failure(
                e,
                table=self.TABLE_NAME,
                context=f"Creating website analysis for session_id={session_id}",
            )
            raise

    async def get_by_session(self, session_id: str) -> list[WebsiteAnalysis]:
        """All analyses for a session, newest first."""
        start_time = time.monotonic()
        try:
            result = await self.session.execute(
                select(WebsiteAnalysis)
                .where(WebsiteAnalysis.session_id == session_id)
                .order_by(WebsiteAnalysis.created_at.desc())
            )
            analyses = list(result.scalars().all())

            duration_ms = (time.monotonic() - start_time) * 1000
            logger.debug(
                "Website analyses fetch by session completed",
                extra={
                    "session_id": session_id,
                    "count": len(analyses),
                    "duration_ms": round(duration_ms, 2),
                },
            )
            if duration_ms > self.SLOW_OPERATION_THRESHOLD_MS:
                db_logger.slow_query(
                    query=f"SELECT FROM website_analyses WHERE session_id={session_id}",
                    duration_ms=duration_ms,
                    table=self.TABLE_NAME,
                )
            return analyses

        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch website analyses by session",
                extra={
                    "session_id": session_id,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
                exc_info=True,
            )
            raise

    async def get_latest_by_session(self, session_id: str) -> WebsiteAnalysis | None:
        analyses = await self.get_by_session(session_id)
        return analyses[0] if analyses else None
