"""CompetitorAnalysisRepository for competitor analysis rows.

ERROR LOGGING REQUIREMENTS:
- Log all exceptions with full stack trace and context
- Include entity IDs (session_id) in all logs
- Add timing logs for operations >1 second
"""

import time
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.core.logging import db_logger, get_logger
from adsintel.models.competitor_analysis import CompetitorAnalysis

logger = get_logger(__name__)


class CompetitorAnalysisRepository:
    TABLE_NAME = "competitor_analyses"
    SLOW_OPERATION_THRESHOLD_MS = 1000

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        session_id: str,
        competitor_url: str,
        positioning: dict[str, Any],
        audience_insights: dict[str, Any],
        content_strategy: dict[str, Any],
        market_share_data: dict[str, Any] | None = None,
    ) -> CompetitorAnalysis:
        start_time = time.monotonic()
        try:
            analysis = CompetitorAnalysis(
                session_id=session_id,
                competitor_url=competitor_url,
                positioning=positioning,
                audience_insights=audience_insights,
                content_strategy=content_strategy,
                market_share_data=market_share_data,
            )
            self.session.add(analysis)
            await self.session.flush()
            await self.session.refresh(analysis)

            duration_ms = (time.monotonic() - start_time) * 1000
            logger.debug(
                "Competitor analysis created successfully",
                extra={
                    "analysis_id": analysis.id,
                    "session_id": session_id,
                    "competitor_url": competitor_url[:200],
                    "duration_ms": round(duration_ms, 2),
                },
            )
            if duration_ms > self.SLOW_OPERATION_THRESHOLD_MS:
                db_logger.slow_query(
                    query="INSERT INTO competitor_analyses",
                    duration_ms=duration_ms,
                    table=self.TABLE_NAME,
                )
            return analysis

        except SQLAlchemyError as e:
            db_logger.transaction_failure(
                e,
                table=self.TABLE_NAME,
                context=f"Creating competitor analysis for session_id={session_id}",
            )
            raise

    async def get_by_session(self, session_id: str) -> list[CompetitorAnalysis]:
        try:
            result = await self.session.execute(
                select(CompetitorAnalysis)
                .where(CompetitorAnalysis.session_id == session_id)
                .order_by(CompetitorAnalysis.created_at.asc())
            )
            return list(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch competitor analyses by session",
                extra={
                    "session_id": session_id,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
                exc_info=True,
            )
            raise
