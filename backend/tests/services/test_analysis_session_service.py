"""Tests for AnalysisSessionService."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.models.analysis_session import GUEST_USER_ID, AnalysisStatus
from adsintel.repositories.analysis_session import AnalysisSessionRepository
from adsintel.services.analysis_session import (
    AnalysisSessionNotFoundError,
    AnalysisSessionService,
    AnalysisSessionValidationError,
)


class TestCreateSession:
    async def test_creates_pending_guest_session(self, db_session: AsyncSession) -> None:
        service = AnalysisSessionService(db_session)

        created = await service.create_session(
            "https://acme.example",
            target_location="Canada",
            keywords=["crm"],
        )

        assert created.status == AnalysisStatus.PENDING.value
        assert created.user_id == GUEST_USER_ID
        assert created.target_location == "Canada"
        assert created.keywords == ["crm"]
        assert created.competitor_urls == []

    async def test_duplicate_competitors_collapsed(self, db_session: AsyncSession) -> None:
        service = AnalysisSessionService(db_session)

        created = await service.create_session(
            "https://acme.example",
            competitor_urls=["https://a.example", "https://b.example", "https://a.example"],
        )

        assert created.competitor_urls == ["https://a.example", "https://b.example"]

    async def test_too_many_competitors_rejected(self, db_session: AsyncSession) -> None:
        service = AnalysisSessionService(db_session)
        urls = [f"https://rival-{i}.example" for i in range(6)]

        with pytest.raises(AnalysisSessionValidationError) as exc_info:
            await service.create_session("https://acme.example", competitor_urls=urls)

        assert exc_info.value.field == "competitor_urls"
        assert exc_info.value.value == 6


class TestGetSession:
    async def test_missing_session(self, db_session: AsyncSession) -> None:
        service = AnalysisSessionService(db_session)

        with pytest.raises(AnalysisSessionNotFoundError):
            await service.get_session("00000000-0000-0000-0000-000000000999")

    async def test_details_empty_until_completed(self, db_session: AsyncSession) -> None:
        service = AnalysisSessionService(db_session)
        created = await service.create_session("https://acme.example")

        details = await service.get_session_details(created.id)

        assert details.session.id == created.id
        assert details.website_analyses == []
        assert details.targeting_recommendations == []

    async def test_terminal_status_sets_completed_at(self, db_session: AsyncSession) -> None:
        service = AnalysisSessionService(db_session)
        created = await service.create_session("https://acme.example")
        repository = AnalysisSessionRepository(db_session)

        processing = await repository.update_status(created.id, AnalysisStatus.PROCESSING)
        assert processing is not None
        assert processing.completed_at is None

        failed = await repository.update_status(created.id, "failed", "Analysis failed")
        assert failed is not None
        assert failed.status == "failed"
        assert failed.error_message == "Analysis failed"
        assert failed.completed_at is not None
