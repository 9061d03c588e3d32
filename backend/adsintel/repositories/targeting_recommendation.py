"""TargetingRecommendationRepository for generated targeting rows.

Inserts are append-only: each generation call creates a new row.

ERROR LOGGING REQUIREMENTS:
- Log method entry/exit at DEBUG level with parameters (sanitized)
- Log all exceptions with full stack trace and context
- Include entity IDs (session_id, recommendation_id) in all logs
- Add timing logs for operations >1 second
"""

import time
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.core.logging import db_logger, get_logger
from adsintel.models.targeting_recommendation import Platform, TargetingRecommendation

logger = get_logger(__name__)


class TargetingRecommendationRepository:
    """Repository for TargetingRecommendation operations."""

    TABLE_NAME = "targeting_recommendations"
    SLOW_OPERATION_THRESHOLD_MS = 1000

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        session_id: str,
        platform: Platform | str,
        targeting_data: dict[str, Any],
        confidence_scores: list[dict[str, Any]] | None = None,
        explanations: list[dict[str, Any]] | None = None,
    ) -> TargetingRecommendation:
        """Insert a recommendation row.

        Raises:
            SQLAlchemyError: On database errors
        """
        start_time = time.monotonic()
        platform_value = Platform(platform).value
        logger.debug(
            "Creating targeting recommendation",
            extra={
                "session_id": session_id,
                "platform": platform_value,
                "source": targeting_data.get("source"),
            },
        )

        try:
            recommendation = TargetingRecommendation(
                session_id=session_id,
                platform=platform_value,
                targeting_data=targeting_data,
                confidence_scores=confidence_scores,
                explanations=explanations,
            )
            self.session.add(recommendation)
            await self.session.flush()
            await self.session.refresh(recommendation)

            duration_ms = (time.monotonic() - start_time) * 1000
            logger.debug(
                "Targeting recommendation created successfully",
                extra={
                    "recommendation_id": recommendation.id,
                    "session_id": session_id,
                    "platform": platform_value,
                    "duration_ms": round(duration_ms, 2),
                },
            )
            if duration_ms > self.SLOW_OPERATION_THRESHOLD_MS:
                db_logger.slow_query(
                    query="INSERT INTO targeting_recommendations",
                    duration_ms=duration_ms,
                    table=self.TABLE_NAME,
                )
            return recommendation

        except SQLAlchemyError as e:
            db_logger.transaction_failure(
                e,
                table=self.TABLE_NAME,
                context=f"Creating {platform_value} recommendation for session_id={session_id}",
            )
            raise

    async def get_by_session(
        self,
        session_id: str,
        platform: Platform | str | None = None,
    ) -> list[TargetingRecommendation]:
        """Recommendations for a session, oldest first, optionally by platform."""
        start_time = time.monotonic()
        try:
            query = select(TargetingRecommendation).where(
                TargetingRecommendation.session_id == session_id
            )
            if platform is not None:
                query = query.where(
                    TargetingRecommendation.platform == Platform(platform).value
                )
            query = query.order_by(TargetingRecommendation.created_at.asc())

            result = await self.session.execute(query)
            recommendations = list(result.scalars().all())

            duration_ms = (time.monotonic() - start_time) * 1000
            if duration_ms > self.SLOW_OPERATION_THRESHOLD_MS:
                db_logger.slow_query(
                    query=f"SELECT FROM targeting_recommendations WHERE session_id={session_id}",
                    duration_ms=duration_ms,
                    table=self.TABLE_NAME,
                )
            return recommendations

        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch targeting recommendations by session",
                extra={
                    "session_id": session_id,
                    "platform": str(platform) if platform else None,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
                exc_info=True,
            )
            raise
