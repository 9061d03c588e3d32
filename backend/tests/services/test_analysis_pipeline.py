"""Tests for AnalysisPipeline status handling and step ordering."""

import logging
from typing import Any

import pytest
from conftest import SAAS_CONTENT_FIELDS, FakeClaudeClient, FakeExtractor, make_content
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adsintel.models.analysis_session import AnalysisStatus
from adsintel.repositories.analysis_session import AnalysisSessionRepository
from adsintel.repositories.competitor_analysis import CompetitorAnalysisRepository
from adsintel.repositories.targeting_recommendation import (
    TargetingRecommendationRepository,
)
from adsintel.repositories.website_analysis import WebsiteAnalysisRepository
from adsintel.services import analysis_pipeline as analysis_pipeline_module
from adsintel.services.ai_reasoning import AIReasoningEngine
from adsintel.services.analysis_pipeline import GENERIC_FAILURE_MESSAGE, AnalysisPipeline
from adsintel.services.analysis_session import AnalysisSessionNotFoundError
from adsintel.services.targeting import NoAnalysisFoundError

SITE_URL = "https://acme.example"
RIVAL_URL = "https://rival.example"
DOWN_URL = "https://down.example"


async def create_committed_session(
    factory: async_sessionmaker[AsyncSession], website_url: str, **kwargs
) -> str:
    async with factory() as session:
        created = await AnalysisSessionRepository(session).create(
            website_url=website_url, **kwargs
        )
        await session.commit()
        return created.id


def make_pipeline(
    factory: async_sessionmaker[AsyncSession], extractor: FakeExtractor
) -> AnalysisPipeline:
    return AnalysisPipeline(
        factory,
        ai_engine=AIReasoningEngine(FakeClaudeClient(available=False)),
        extractor=extractor,
    )


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor(
        {
            SITE_URL: make_content(SITE_URL, **SAAS_CONTENT_FIELDS),
            RIVAL_URL: make_content(RIVAL_URL, title="Rival", headings=["Pricing plans"]),
        }
    )


class TestPipelineRun:
    async def test_completed_run(
        self,
        async_session_factory: async_sessionmaker[AsyncSession],
        extractor: FakeExtractor,
    ) -> None:
        session_id = await create_committed_session(
            async_session_factory,
            SITE_URL,
            competitor_urls=[RIVAL_URL, DOWN_URL],
            keywords=["dashboard"],
        )
        pipeline = make_pipeline(async_session_factory, extractor)

        await pipeline.start(session_id)
        status = await pipeline.run(session_id)

        assert status is AnalysisStatus.COMPLETED
        assert extractor.calls == [SITE_URL, RIVAL_URL, DOWN_URL]

        async with async_session_factory() as session:
            stored = await AnalysisSessionRepository(session).get_by_id(session_id)
            assert stored is not None
            assert stored.status == "completed"
            assert stored.completed_at is not None
            assert stored.error_message is None

            websites = await WebsiteAnalysisRepository(session).get_by_session(session_id)
            competitors = await CompetitorAnalysisRepository(session).get_by_session(session_id)
            recommendations = await TargetingRecommendationRepository(
                session
            ).get_by_session(session_id)

        assert len(websites) == 1
        assert [c.competitor_url for c in competitors] == [RIVAL_URL]
        assert sorted(r.platform for r in recommendations) == ["google", "meta"]
        meta = next(r for r in recommendations if r.platform == "meta")
        assert meta.targeting_data["interests"][0]["category"] == "Keyword focus"

    async def test_no_competitors_skips_competitor_step(
        self,
        async_session_factory: async_sessionmaker[AsyncSession],
        extractor: FakeExtractor,
    ) -> None:
        session_id = await create_committed_session(async_session_factory, SITE_URL)
        pipeline = make_pipeline(async_session_factory, extractor)

        status = await pipeline.run(session_id)

        assert status is AnalysisStatus.COMPLETED
        assert extractor.calls == [SITE_URL]

    async def test_extraction_failure_marks_failed(
        self,
        async_session_factory: async_sessionmaker[AsyncSession],
        extractor: FakeExtractor,
    ) -> None:
        session_id = await create_committed_session(async_session_factory, DOWN_URL)
        pipeline = make_pipeline(async_session_factory, extractor)

        await pipeline.start(session_id)
        status = await pipeline.run(session_id)

        assert status is AnalysisStatus.FAILED
        async with async_session_factory() as session:
            stored = await AnalysisSessionRepository(session).get_by_id(session_id)
            assert stored is not None
            assert stored.status == "failed"
            assert stored.error_message == GENERIC_FAILURE_MESSAGE
            assert "Connection refused" not in stored.error_message
            assert await WebsiteAnalysisRepository(session).get_by_session(session_id) == []
            assert (
                await TargetingRecommendationRepository(session).get_by_session(session_id)
                == []
            )

    async def test_missing_website_analysis_marks_failed(
        self,
        async_session_factory: async_sessionmaker[AsyncSession],
        extractor: FakeExtractor,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        class NothingStoredAnalyzer:
            def __init__(self, *args: Any) -> None:
                pass

            async def analyze_website(self, session_id: str, url: str) -> None:
                return None

        monkeypatch.setattr(
            analysis_pipeline_module, "WebsiteAnalyzerService", NothingStoredAnalyzer
        )
        session_id = await create_committed_session(async_session_factory, SITE_URL)
        pipeline = make_pipeline(async_session_factory, extractor)

        await pipeline.start(session_id)
        with caplog.at_level(logging.ERROR, logger="adsintel.services.analysis_pipeline"):
            status = await pipeline.run(session_id)

        assert status is AnalysisStatus.FAILED
        failures = [r for r in caplog.records if r.message == "Analysis pipeline failed"]
        assert [r.error_type for r in failures] == [NoAnalysisFoundError.__name__]
        async with async_session_factory() as session:
            stored = await AnalysisSessionRepository(session).get_by_id(session_id)
            assert stored is not None
            assert stored.status == "failed"
            assert (
                await TargetingRecommendationRepository(session).get_by_session(session_id)
                == []
            )

    async def test_unknown_session_run_fails_quietly(
        self,
        async_session_factory: async_sessionmaker[AsyncSession],
        extractor: FakeExtractor,
    ) -> None:
        pipeline = make_pipeline(async_session_factory, extractor)

        assert await pipeline.run("00000000-0000-0000-0000-000000000999") is (
            AnalysisStatus.FAILED
        )
        assert extractor.calls == []


class TestPipelineStart:
    async def test_start_marks_processing(
        self,
        async_session_factory: async_sessionmaker[AsyncSession],
        extractor: FakeExtractor,
    ) -> None:
        session_id = await create_committed_session(async_session_factory, SITE_URL)

        await make_pipeline(async_session_factory, extractor).start(session_id)

        async with async_session_factory() as session:
            stored = await AnalysisSessionRepository(session).get_by_id(session_id)
            assert stored is not None
            assert stored.status == "processing"
            assert stored.completed_at is None

    async def test_start_unknown_session_raises(
        self,
        async_session_factory: async_sessionmaker[AsyncSession],
        extractor: FakeExtractor,
    ) -> None:
        with pytest.raises(AnalysisSessionNotFoundError):
            await make_pipeline(async_session_factory, extractor).start("missing")
