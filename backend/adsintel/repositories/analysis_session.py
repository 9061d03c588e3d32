"""AnalysisSessionRepository for analysis session storage and retrieval.

Handles all database operations for AnalysisSession entities.
Follows the layered architecture pattern: API -> Service -> Repository -> Database.

ERROR LOGGING REQUIREMENTS:
- Log method entry/exit at DEBUG level with parameters (sanitized)
- Log all exceptions with full stack trace and context
- Include entity IDs (session_id) in all logs
- Log state transitions (status changes) at INFO level
- Add timing logs for operations >1 second
"""

import time
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.core.logging import db_logger, get_logger
from adsintel.models.analysis_session import (
    GUEST_USER_ID,
    AnalysisSession,
    AnalysisStatus,
)

logger = get_logger(__name__)

TERMINAL_STATUSES = frozenset({AnalysisStatus.COMPLETED.value, AnalysisStatus.FAILED.value})


class AnalysisSessionRepository:
    """Repository for AnalysisSession CRUD operations.

    All methods accept an AsyncSession and handle database operations
    with comprehensive logging as required.
    """

    TABLE_NAME = "analysis_sessions"
    SLOW_OPERATION_THRESHOLD_MS = 1000  # 1 second

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        logger.debug("AnalysisSessionRepository initialized")

    async def create(
        self,
        website_url: str,
        user_id: str | None = None,
        target_location: str | None = None,
        competitor_urls: list[str] | None = None,
        keywords: list[str] | None = None,
    ) -> AnalysisSession:
        """Create a new analysis session in pending status.

        Args:
            website_url: URL of the website to analyze
            user_id: Owner; the guest user when omitted
            target_location: Optional location to prioritize
            competitor_urls: Optional competitor URLs
            keywords: Optional seed keywords

        Returns:
            Created AnalysisSession instance

        Raises:
            SQLAlchemyError: On database errors
        """
        start_time = time.monotonic()
        logger.debug(
            "Creating analysis session",
            extra={
                "website_url": website_url[:200],
                "user_id": user_id,
                "competitor_count": len(competitor_urls or []),
                "keyword_count": len(keywords or []),
            },
        )

        try:
            analysis_session = AnalysisSession(
                user_id=user_id or GUEST_USER_ID,
                website_url=website_url,
                target_location=target_location,
                competitor_urls=list(competitor_urls or []),
                keywords=list(keywords or []),
                status=AnalysisStatus.PENDING.value,
            )
            self.session.add(analysis_session)
            await self.session.flush()
            await self.session.refresh(analysis_session)

            duration_ms = (time.monotonic() - start_time) * 1000
            logger.debug(
                "Analysis session created successfully",
                extra={
                    "session_id": analysis_session.id,
                    "duration_ms": round(duration_ms, 2),
                },
            )

            if duration_ms > self.SLOW_OPERATION_THRESHOLD_MS:
                db_logger.slow_query(
                    query="INSERT INTO analysis_sessions",
                    duration_ms=duration_ms,
                    table=self.TABLE_NAME,
                )

            return analysis_session

        except SQLAlchemyError as e:
            db_logger.transaction_failure(
                e,
                table=self.TABLE_NAME,
                context=f"Creating analysis session for url={website_url[:200]}",
            )
            raise

    async def get_by_id(self, session_id: str) -> AnalysisSession | None:
        """Get an analysis session by ID.

        Raises:
            SQLAlchemyError: On database errors
        """
        start_time = time.monotonic()
        logger.debug("Fetching analysis session by ID", extra={"session_id": session_id})

        try:
            result = await self.session.execute(
                select(AnalysisSession).where(AnalysisSession.id == session_id)
            )
            analysis_session = result.scalar_one_or_none()

            duration_ms = (time.monotonic() - start_time) * 1000
            logger.debug(
                "Analysis session fetch completed",
                extra={
                    "session_id": session_id,
                    "found": analysis_session is not None,
                    "duration_ms": round(duration_ms, 2),
                },
            )

            if duration_ms > self.SLOW_OPERATION_THRESHOLD_MS:
                db_logger.slow_query(
                    query=f"SELECT FROM analysis_sessions WHERE id={session_id}",
                    duration_ms=duration_ms,
                    table=self.TABLE_NAME,
                )

            return analysis_session

        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch analysis session by ID",
                extra={
                    "session_id": session_id,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
                exc_info=True,
            )
            raise

    async def update_status(
        self,
        session_id: str,
        status: AnalysisStatus | str,
        error_message: str | None = None,
    ) -> AnalysisSession | None:
        """Update session status.

        completed_at is stamped when the session reaches a terminal status.

        Returns:
            Updated AnalysisSession if found, None otherwise

        Raises:
            SQLAlchemyError: On database errors
        """
        start_time = time.monotonic()
        status_value = AnalysisStatus(status).value

        current = await self.get_by_id(session_id)
        if current is None:
            logger.debug(
                "Analysis session not found for status update",
                extra={"session_id": session_id},
            )
            return None

        logger.info(
            "Analysis session status transition",
            extra={
                "session_id": session_id,
                "from_status": current.status,
                "to_status": status_value,
            },
        )

        try:
            update_values: dict[str, Any] = {"status": status_value}
            if error_message is not None:
                update_values["error_message"] = error_message
            if status_value in TERMINAL_STATUSES:
                update_values["completed_at"] = datetime.now(UTC)

            await self.session.execute(
                update(AnalysisSession)
                .where(AnalysisSession.id == session_id)
                .values(**update_values)
            )
            await self.session.flush()

            updated = await self.get_by_id(session_id)

            duration_ms = (time.monotonic() - start_time) * 1000
            if duration_ms > self.SLOW_OPERATION_THRESHOLD_MS:
                db_logger.slow_query(
                    query=f"UPDATE analysis_sessions SET status={status_value} WHERE id={session_id}",
                    duration_ms=duration_ms,
                    table=self.TABLE_NAME,
                )

            return updated

        except SQLAlchemyError as e:
            db_logger.transaction_failure(
                e,
                table=self.TABLE_NAME,
                context=f"Updating status for session_id={session_id}",
            )
            raise
