"""Integration tests for the analysis API endpoints.

Tests cover:
- POST /api/v1/analysis/analyze (202, background pipeline run)
- GET /api/v1/analysis/sessions/{id} (results once completed, 404)
- POST /api/v1/analysis/classify
- Structured validation errors
"""

from collections.abc import AsyncGenerator

import pytest
from conftest import SAAS_CONTENT_FIELDS, FakeClaudeClient, FakeExtractor
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from adsintel.api.v1.endpoints.analysis import get_pipeline
from adsintel.services.ai_reasoning import AIReasoningEngine
from adsintel.services.analysis_pipeline import GENERIC_FAILURE_MESSAGE, AnalysisPipeline

ANALYZE_URL = "/api/v1/analysis/analyze"
SESSIONS_URL = "/api/v1/analysis/sessions"
CLASSIFY_URL = "/api/v1/analysis/classify"


@pytest.fixture
async def client(
    app,
    async_client: AsyncClient,
    async_session_factory: async_sessionmaker[AsyncSession],
    fake_extractor: FakeExtractor,
) -> AsyncGenerator[AsyncClient, None]:
    """Async client whose pipeline uses the fake extractor and no AI."""
    app.dependency_overrides[get_pipeline] = lambda: AnalysisPipeline(
        async_session_factory,
        ai_engine=AIReasoningEngine(FakeClaudeClient(available=False)),
        extractor=fake_extractor,
    )
    yield async_client


class TestAnalyze:
    async def test_analyze_runs_pipeline(self, client: AsyncClient) -> None:
        response = await client.post(
            ANALYZE_URL,
            json={"website_url": "acme.example", "target_location": "Canada"},
        )

        assert response.status_code == 202
        body = response.json()
        assert body["status"] == "processing"
        session_id = body["session_id"]

        # Background tasks finish before the ASGI transport returns
        detail = await client.get(f"{SESSIONS_URL}/{session_id}")
        assert detail.status_code == 200
        data = detail.json()
        assert data["status"] == "completed"
        assert data["website_url"] == "https://acme.example"
        assert data["completed_at"] is not None
        assert len(data["website_analyses"]) == 1
        assert data["website_analyses"][0]["business_model"] == "B2B SaaS"
        assert data["competitor_analyses"] == []
        platforms = sorted(r["platform"] for r in data["targeting_recommendations"])
        assert platforms == ["google", "meta"]
        meta = next(r for r in data["targeting_recommendations"] if r["platform"] == "meta")
        locations = meta["targeting_data"]["demographics"]["locations"]
        assert locations[0]["name"] == "Canada"

    async def test_unreachable_site_fails_session(self, client: AsyncClient) -> None:
        response = await client.post(
            ANALYZE_URL, json={"website_url": "https://down.example"}
        )
        assert response.status_code == 202

        detail = await client.get(f"{SESSIONS_URL}/{response.json()['session_id']}")
        data = detail.json()

        assert data["status"] == "failed"
        assert data["error_message"] == GENERIC_FAILURE_MESSAGE
        assert data["website_analyses"] == []
        assert data["targeting_recommendations"] == []

    async def test_invalid_url_rejected(self, client: AsyncClient) -> None:
        response = await client.post(ANALYZE_URL, json={"website_url": "ftp://acme.example"})

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "website_url" in body["error"]
        assert body["request_id"] == response.headers["X-Request-ID"]

    async def test_too_many_competitors_rejected(self, client: AsyncClient) -> None:
        response = await client.post(
            ANALYZE_URL,
            json={
                "website_url": "https://acme.example",
                "competitor_urls": [f"https://rival-{i}.example" for i in range(6)],
            },
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestGetSession:
    async def test_not_found(self, client: AsyncClient) -> None:
        response = await client.get(
            f"{SESSIONS_URL}/00000000-0000-0000-0000-000000000999",
            headers={"X-Request-ID": "req-404"},
        )

        assert response.status_code == 404
        assert response.json() == {
            "error": "Analysis session not found: 00000000-0000-0000-0000-000000000999",
            "code": "NOT_FOUND",
            "request_id": "req-404",
        }


class TestClassify:
    async def test_classify_content(self, client: AsyncClient) -> None:
        response = await client.post(
            CLASSIFY_URL, json={"url": "https://acme.example", **SAAS_CONTENT_FIELDS}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["business_model"]["type"] == "B2B SaaS"
        assert data["business_model"]["confidence"] == 0.8
        assert 0.0 <= data["confidence"] <= 1.0
        assert data["value_propositions"][0]["strength"] == 1.0

    async def test_empty_content(self, client: AsyncClient) -> None:
        response = await client.post(CLASSIFY_URL, json={"url": "https://blank.example"})

        assert response.status_code == 200
        data = response.json()
        assert data["business_model"]["type"] == "Service Business"
        assert data["confidence"] == 0.0
        assert data["audience_signals"]["pain_points"] is None
