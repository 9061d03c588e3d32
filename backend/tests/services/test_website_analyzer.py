"""Tests for WebsiteAnalyzerService."""

import pytest
from conftest import FakeExtractor
from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.repositories.analysis_session import AnalysisSessionRepository
from adsintel.services.content_extraction import ContentExtractionError, WebsiteContent
from adsintel.services.website_analyzer import WebsiteAnalyzerService


class TestAnalyzeWebsite:
    async def test_persists_classification(
        self,
        db_session: AsyncSession,
        fake_extractor: FakeExtractor,
        saas_content: WebsiteContent,
    ) -> None:
        analysis_session = await AnalysisSessionRepository(db_session).create(
            website_url=saas_content.url
        )
        service = WebsiteAnalyzerService(db_session, fake_extractor)

        analysis = await service.analyze_website(analysis_session.id, saas_content.url)

        assert analysis.id is not None
        assert analysis.session_id == analysis_session.id
        assert analysis.business_model == "B2B SaaS"
        assert analysis.value_propositions[0]["text"] == "Analytics software for growing teams"
        assert analysis.target_audience["pain_points"] is None
        assert analysis.technical_metadata["headings"] == list(saas_content.headings)
        assert "url" not in analysis.technical_metadata
        assert analysis.technical_metadata["business_model_details"]["confidence"] == 0.8

    async def test_extraction_failure_propagates(self, db_session: AsyncSession) -> None:
        analysis_session = await AnalysisSessionRepository(db_session).create(
            website_url="https://down.example"
        )
        service = WebsiteAnalyzerService(db_session, FakeExtractor())

        with pytest.raises(ContentExtractionError):
            await service.analyze_website(analysis_session.id, "https://down.example")

        assert await service.get_analyses_by_session(analysis_session.id) == []
