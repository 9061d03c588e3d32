"""Tests for TargetingService.

Tests cover:
- NoAnalysisFoundError when a session has no website analysis
- Rule-based fallback for every business model (minimum item counts)
- AI path mapping (source "ai") and fallback on AI failure
- Keyword focus and negative keyword filtering
- Funnel labels, confidence rounding and explanations
- Target location placed first
"""

import json
from typing import Any

import pytest
from conftest import SAAS_CONTENT_FIELDS, FakeClaudeClient, FakeExtractor, make_content
from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.models.analysis_session import AnalysisSession
from adsintel.models.website_analysis import WebsiteAnalysis
from adsintel.repositories.analysis_session import AnalysisSessionRepository
from adsintel.repositories.targeting_recommendation import (
    TargetingRecommendationRepository,
)
from adsintel.repositories.website_analysis import WebsiteAnalysisRepository
from adsintel.services.ai_reasoning import AIReasoningEngine
from adsintel.services.targeting import (
    NoAnalysisFoundError,
    TargetingService,
    clean_keywords,
    normalize_genders,
    parse_age_ranges,
)
from adsintel.services.website_analyzer import WebsiteAnalyzerService
from adsintel.utils.classification_rules import BUSINESS_MODEL_TYPES
from adsintel.utils.funnel import assess_confidence

SITE_URL = "https://acme.example"

META_REPLY: dict[str, Any] = {
    "demographics": {"age_ranges": ["25-34", "35-44"], "genders": ["all"], "locations": ["United States"]},
    "interests": [
        {
            "category": "Business",
            "specific_interests": ["Small business", "SaaS"],
            "reasoning": "Buyers run companies",
            "confidence": 0.9,
        },
        {"category": "Technology", "interests": ["Cloud computing"], "confidence": 0.6},
    ],
    "behaviors": [{"behavior": "Small business owners", "confidence": 85}],
    "confidence_score": 0.8,
}

GOOGLE_REPLY: dict[str, Any] = {
    "keyword_clusters": [
        {
            "intent": "Purchase",
            "keywords": [
                {"keyword": "crm pricing", "match_type": "exact", "estimated_volume": "high"},
                "crm demo",
            ],
            "confidence": 0.9,
        }
    ],
    "negative_keywords": "jobs, free",
}


def unconfigured_engine() -> AIReasoningEngine:
    return AIReasoningEngine(FakeClaudeClient(available=False))


async def create_session(
    db_session: AsyncSession, target_location: str | None = None
) -> AnalysisSession:
    return await AnalysisSessionRepository(db_session).create(
        website_url=SITE_URL, target_location=target_location
    )


async def analyze_saas_site(
    db_session: AsyncSession, target_location: str | None = None
) -> tuple[AnalysisSession, WebsiteAnalysis]:
    analysis_session = await create_session(db_session, target_location)
    extractor = FakeExtractor({SITE_URL: make_content(SITE_URL, **SAAS_CONTENT_FIELDS)})
    analysis = await WebsiteAnalyzerService(db_session, extractor).analyze_website(
        analysis_session.id, SITE_URL
    )
    return analysis_session, analysis


def assert_funnel_labels(items: list[dict[str, Any]]) -> None:
    for item in items:
        assessment = assess_confidence(item["confidence"])
        assert item["funnel_stage"] == assessment.stage.value
        assert item["recommendation"] == assessment.recommendation.value
        assert item["why_this_converts"]


# =============================================================================
# HELPERS
# =============================================================================


class TestHelpers:
    def test_clean_keywords(self) -> None:
        assert clean_keywords(["  crm  software ", "CRM software", "", "sales"]) == [
            "crm software",
            "sales",
        ]
        assert clean_keywords(None) == []

    def test_parse_age_ranges(self) -> None:
        assert parse_age_ranges(["25-34", "35-44"]) == (25, 44)
        assert parse_age_ranges(["55+"]) == (55, 65)
        assert parse_age_ranges(["13-17"]) == (18, 18)
        assert parse_age_ranges(["adults"]) is None

    def test_normalize_genders(self) -> None:
        assert normalize_genders(["Women"]) == ["female"]
        assert normalize_genders(["male", "female"]) == ["all"]
        assert normalize_genders(["all"]) == ["all"]
        assert normalize_genders([]) == ["all"]


# =============================================================================
# MISSING ANALYSIS
# =============================================================================


class TestNoAnalysis:
    async def test_meta_raises_without_analysis(self, db_session: AsyncSession) -> None:
        analysis_session = await create_session(db_session)
        service = TargetingService(db_session, unconfigured_engine())

        with pytest.raises(NoAnalysisFoundError) as exc_info:
            await service.generate_meta_targeting(analysis_session.id)

        assert exc_info.value.session_id == analysis_session.id

    async def test_google_raises_for_unknown_session(self, db_session: AsyncSession) -> None:
        service = TargetingService(db_session, unconfigured_engine())

        with pytest.raises(NoAnalysisFoundError):
            await service.generate_google_targeting("missing-session")

    async def test_nothing_persisted_on_error(self, db_session: AsyncSession) -> None:
        analysis_session = await create_session(db_session)
        service = TargetingService(db_session, unconfigured_engine())

        with pytest.raises(NoAnalysisFoundError):
            await service.generate_meta_targeting(analysis_session.id)

        rows = await TargetingRecommendationRepository(db_session).get_by_session(
            analysis_session.id
        )
        assert rows == []


# =============================================================================
# FALLBACK
# =============================================================================


class TestFallback:
    @pytest.mark.parametrize("business_model", BUSINESS_MODEL_TYPES)
    async def test_fallback_is_complete_for_every_business_model(
        self, db_session: AsyncSession, business_model: str
    ) -> None:
        analysis_session = await create_session(db_session)
        await WebsiteAnalysisRepository(db_session).create(
            session_id=analysis_session.id,
            url=SITE_URL,
            business_model=business_model,
            value_propositions=[],
            target_audience={},
            content_themes=[],
            technical_metadata={"headings": ["Welcome"]},
        )
        service = TargetingService(db_session, unconfigured_engine())

        meta = await service.generate_meta_targeting(analysis_session.id)
        google = await service.generate_google_targeting(analysis_session.id)

        assert meta.targeting_data["source"] == "fallback"
        assert len(meta.targeting_data["interests"]) >= 2
        assert len(meta.targeting_data["behaviors"]) >= 2
        assert google.targeting_data["source"] == "fallback"
        assert len(google.targeting_data["keywords"]) >= 1
        assert google.targeting_data["audiences"][-1]["name"] == "All website visitors"

    async def test_unknown_business_model_uses_generic_vocabulary(
        self, db_session: AsyncSession
    ) -> None:
        analysis_session = await create_session(db_session)
        await WebsiteAnalysisRepository(db_session).create(
            session_id=analysis_session.id,
            url=SITE_URL,
            business_model=None,
            value_propositions=[],
            target_audience={},
            content_themes=[],
            technical_metadata={},
        )
        service = TargetingService(db_session, unconfigured_engine())

        meta = await service.generate_meta_targeting(analysis_session.id)

        assert len(meta.targeting_data["interests"]) >= 2

    async def test_meta_fallback_shape(self, db_session: AsyncSession) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        service = TargetingService(db_session, unconfigured_engine())

        rec = await service.generate_meta_targeting(analysis_session.id, analysis)
        data = rec.targeting_data

        assert rec.platform == "meta"
        assert rec.session_id == analysis_session.id
        assert data["interests"][0]["category"] == "Technology"
        assert_funnel_labels(data["interests"])
        assert_funnel_labels(data["behaviors"])
        assert [a["type"] for a in data["custom_audiences"]] == [
            "website_visitors",
            "engagement",
            "customer_list",
        ]
        assert [lal["percentage"] for lal in data["lookalike_audiences"]] == [1, 3, 5]
        assert data["demographics"]["locations"][0]["name"] == "United States"

    async def test_confidences_rounded(self, db_session: AsyncSession) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        service = TargetingService(db_session, unconfigured_engine())

        rec = await service.generate_google_targeting(analysis_session.id, analysis)

        for cluster in rec.targeting_data["keywords"]:
            assert round(cluster["confidence"], 2) == cluster["confidence"]
            assert 0.0 <= cluster["confidence"] <= 0.95
        for score in rec.confidence_scores:
            assert round(score["score"], 2) == score["score"]
        assert [s["category"] for s in rec.confidence_scores] == [
            "Demographics",
            "Keywords",
            "Audiences",
            "Overall Targeting",
        ]

    async def test_target_location_comes_first(self, db_session: AsyncSession) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session, "Australia")
        service = TargetingService(db_session, unconfigured_engine())

        rec = await service.generate_meta_targeting(analysis_session.id, analysis)

        locations = [loc["name"] for loc in rec.targeting_data["demographics"]["locations"]]
        assert locations[0] == "Australia"
        assert locations.count("Australia") == 1
        demographics_score = rec.confidence_scores[0]
        assert demographics_score["score"] == 0.8
        assert "Target location Australia requested" in demographics_score["factors"]

    async def test_each_call_persists_a_new_row(self, db_session: AsyncSession) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        service = TargetingService(db_session, unconfigured_engine())

        first = await service.generate_meta_targeting(analysis_session.id, analysis)
        second = await service.generate_meta_targeting(analysis_session.id, analysis)

        assert first.id != second.id
        assert first.targeting_data == second.targeting_data


# =============================================================================
# KEYWORDS
# =============================================================================


class TestKeywordFocus:
    async def test_meta_keyword_interest_first(self, db_session: AsyncSession) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        service = TargetingService(db_session, unconfigured_engine())

        rec = await service.generate_meta_targeting(
            analysis_session.id, analysis, keywords=["dashboard", " Dashboard "]
        )
        first = rec.targeting_data["interests"][0]

        assert first["category"] == "Keyword focus"
        assert first["interests"] == ["dashboard"]
        # 0.75 base plus one matching cue
        assert first["confidence"] == 0.8

    async def test_google_keyword_cluster_and_negatives(
        self, db_session: AsyncSession
    ) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        service = TargetingService(db_session, unconfigured_engine())

        rec = await service.generate_google_targeting(
            analysis_session.id, analysis, keywords=["jobs board software"]
        )
        data = rec.targeting_data

        assert data["keywords"][0]["intent"] == "Keyword focus"
        assert data["keywords"][0]["keywords"] == ["jobs board software"]
        assert "jobs" not in data["negative_keywords"]
        assert "crack" in data["negative_keywords"]


# =============================================================================
# AI PATH
# =============================================================================


class TestAIPath:
    async def test_meta_from_ai(
        self, db_session: AsyncSession, fake_claude: FakeClaudeClient
    ) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        fake_claude.queue_text(json.dumps({"pain_points": ["Manual reporting"]}))
        fake_claude.queue_text("```json\n" + json.dumps(META_REPLY) + "\n```")
        service = TargetingService(db_session, AIReasoningEngine(fake_claude))

        rec = await service.generate_meta_targeting(analysis_session.id, analysis)
        data = rec.targeting_data

        assert data["source"] == "ai"
        assert data["demographics"]["age_min"] == 25
        assert data["demographics"]["age_max"] == 44
        assert [i["category"] for i in data["interests"]] == ["Business", "Technology"]
        assert data["interests"][0]["funnel_stage"] == "BOF"
        assert data["interests"][0]["recommendation"] == "scale"
        assert data["interests"][1]["funnel_stage"] == "TOF"
        assert data["behaviors"][0]["confidence"] == 0.85
        assert len(data["lookalike_audiences"]) == 3
        assert len(fake_claude.prompts) == 2

    async def test_google_from_ai(
        self, db_session: AsyncSession, fake_claude: FakeClaudeClient
    ) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        fake_claude.queue_text(json.dumps({}))
        fake_claude.queue_text(json.dumps(GOOGLE_REPLY))
        service = TargetingService(db_session, AIReasoningEngine(fake_claude))

        rec = await service.generate_google_targeting(analysis_session.id, analysis)
        data = rec.targeting_data
        cluster = data["keywords"][0]

        assert data["source"] == "ai"
        assert cluster["keywords"] == ["crm pricing", "crm demo"]
        assert cluster["search_volume"] == 11000
        assert cluster["match_type"] == "exact"
        assert cluster["recommendation"] == "scale"
        assert data["negative_keywords"] == ["jobs", "free"]
        assert data["audiences"][-1]["name"] == "All website visitors"

    async def test_invalid_ai_targeting_falls_back(
        self, db_session: AsyncSession, fake_claude: FakeClaudeClient
    ) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        fake_claude.queue_text(json.dumps({}))
        fake_claude.queue_text(json.dumps({"interests": [], "behaviors": []}))
        service = TargetingService(db_session, AIReasoningEngine(fake_claude))

        rec = await service.generate_meta_targeting(analysis_session.id, analysis)

        assert rec.targeting_data["source"] == "fallback"
        assert len(rec.targeting_data["interests"]) >= 2

    async def test_insights_failure_falls_back(
        self, db_session: AsyncSession
    ) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        client = FakeClaudeClient([RuntimeError("connection reset")])
        service = TargetingService(db_session, AIReasoningEngine(client))

        rec = await service.generate_google_targeting(analysis_session.id, analysis)

        assert rec.targeting_data["source"] == "fallback"
        assert len(client.prompts) == 1

    async def test_keywords_reach_the_prompt(
        self, db_session: AsyncSession, fake_claude: FakeClaudeClient
    ) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        fake_claude.queue_text(json.dumps({}))
        fake_claude.queue_text(json.dumps(GOOGLE_REPLY))
        service = TargetingService(db_session, AIReasoningEngine(fake_claude))

        await service.generate_google_targeting(
            analysis_session.id, analysis, keywords=["crm for startups"]
        )

        assert "crm for startups" in fake_claude.prompts[1]

    async def test_ai_confidences_rounded(
        self, db_session: AsyncSession, fake_claude: FakeClaudeClient
    ) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        reply = {
            **META_REPLY,
            "interests": [{"category": "Business", "confidence": 0.8333}],
            "behaviors": [{"behavior": "Small business owners"}],
            "confidence_score": 0.6666,
        }
        fake_claude.queue_text(json.dumps({}))
        fake_claude.queue_text(json.dumps(reply))
        fake_claude.queue_text(json.dumps({}))
        fake_claude.queue_text(
            json.dumps(
                {
                    **GOOGLE_REPLY,
                    "keyword_clusters": [{"intent": "Purchase", "keywords": ["crm"], "confidence": 0.7149}],
                }
            )
        )
        service = TargetingService(db_session, AIReasoningEngine(fake_claude))

        meta = await service.generate_meta_targeting(analysis_session.id, analysis)
        google = await service.generate_google_targeting(analysis_session.id, analysis)

        assert meta.targeting_data["source"] == "ai"
        assert meta.targeting_data["interests"][0]["confidence"] == 0.83
        assert meta.targeting_data["behaviors"][0]["confidence"] == 0.67
        assert google.targeting_data["source"] == "ai"
        assert google.targeting_data["keywords"][0]["confidence"] == 0.71


# =============================================================================
# EXPLANATIONS
# =============================================================================


class TestExplanations:
    async def test_meta_explanations_follow_interests(
        self, db_session: AsyncSession
    ) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        service = TargetingService(db_session, unconfigured_engine())

        rec = await service.generate_meta_targeting(analysis_session.id, analysis)
        interests = rec.targeting_data["interests"]

        assert len(rec.explanations) == len(interests)
        first = rec.explanations[0]
        assert first["recommendation_id"] == "meta-interest-0"
        assert first["recommendation_type"] == "interest"
        assert first["supporting_data"]["funnel_stage"] == interests[0]["funnel_stage"]
        assert first["why_it_matters"] == interests[0]["why_this_converts"]

    async def test_google_explanations_follow_clusters(
        self, db_session: AsyncSession
    ) -> None:
        analysis_session, analysis = await analyze_saas_site(db_session)
        service = TargetingService(db_session, unconfigured_engine())

        rec = await service.generate_google_targeting(analysis_session.id, analysis)

        ids = [e["recommendation_id"] for e in rec.explanations]
        assert ids == [f"google-keyword-{i}" for i in range(len(rec.targeting_data["keywords"]))]
