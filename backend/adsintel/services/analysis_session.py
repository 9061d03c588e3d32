"""AnalysisSessionService: create sessions and read their results.

ERROR LOGGING REQUIREMENTS:
- Log method entry/exit at DEBUG level with parameters (sanitized)
- Log validation failures with field names and rejected values
- Include entity IDs (session_id) in all service logs
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.core.logging import get_logger
from adsintel.models.analysis_session import AnalysisSession, AnalysisStatus
from adsintel.models.competitor_analysis import CompetitorAnalysis
from adsintel.models.targeting_recommendation import TargetingRecommendation
from adsintel.models.website_analysis import WebsiteAnalysis
from adsintel.repositories.analysis_session import AnalysisSessionRepository
from adsintel.repositories.competitor_analysis import CompetitorAnalysisRepository
from adsintel.repositories.targeting_recommendation import (
    TargetingRecommendationRepository,
)
from adsintel.repositories.website_analysis import WebsiteAnalysisRepository

logger = get_logger(__name__)

MAX_COMPETITOR_URLS = 5


class AnalysisSessionServiceError(Exception):
    """Base exception for AnalysisSessionService errors."""

    pass


class AnalysisSessionValidationError(AnalysisSessionServiceError):
    """Raised when session input validation fails."""

    def __init__(self, field: str, value: Any, message: str):
        self.field = field
        self.value = value
        self.message = message
        super().__init__(f"Validation failed for '{field}': {message}")


class AnalysisSessionNotFoundError(AnalysisSessionServiceError):
    """Raised when an analysis session does not exist."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Analysis session not found: {session_id}")


@dataclass
class AnalysisSessionDetails:
    """A session plus its results (results only once completed)."""

    session: AnalysisSession
    website_analyses: list[WebsiteAnalysis] = field(default_factory=list)
    competitor_analyses: list[CompetitorAnalysis] = field(default_factory=list)
    targeting_recommendations: list[TargetingRecommendation] = field(default_factory=list)


class AnalysisSessionService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.sessions = AnalysisSessionRepository(session)

    async def create_session(
        self,
        website_url: str,
        user_id: str | None = None,
        target_location: str | None = None,
        competitor_urls: list[str] | None = None,
        keywords: list[str] | None = None,
    ) -> AnalysisSession:
        """Create a pending analysis session.

        Raises:
            AnalysisSessionValidationError: If too many competitor URLs are given
        """
        competitor_urls = list(dict.fromkeys(competitor_urls or []))
        if len(competitor_urls) > MAX_COMPETITOR_URLS:
            logger.warning(
                "Validation failed: too many competitor URLs",
                extra={
                    "field": "competitor_urls",
                    "rejected_value": len(competitor_urls),
                    "max_allowed": MAX_COMPETITOR_URLS,
                },
            )
            raise AnalysisSessionValidationError(
                "competitor_urls",
                len(competitor_urls),
                f"At most {MAX_COMPETITOR_URLS} competitor URLs are allowed",
            )

        return await self.sessions.create(
            website_url=website_url,
            user_id=user_id,
            target_location=target_location,
            competitor_urls=competitor_urls,
            keywords=keywords,
        )

    async def get_session(self, session_id: str) -> AnalysisSession:
        """Raises AnalysisSessionNotFoundError when missing."""
        analysis_session = await self.sessions.get_by_id(session_id)
        if analysis_session is None:
            raise AnalysisSessionNotFoundError(session_id)
        return analysis_session

    async def get_session_details(self, session_id: str) -> AnalysisSessionDetails:
        analysis_session = await self.get_session(session_id)
        details = AnalysisSessionDetails(session=analysis_session)
        if analysis_session.status != AnalysisStatus.COMPLETED.value:
            return details

        details.website_analyses = await WebsiteAnalysisRepository(
            self.session
        ).get_by_session(session_id)
        details.competitor_analyses = await CompetitorAnalysisRepository(
            self.session
        ).get_by_session(session_id)
        details.targeting_recommendations = await TargetingRecommendationRepository(
            self.session
        ).get_by_session(session_id)
        return details
