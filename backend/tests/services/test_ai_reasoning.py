"""Tests for the AI reasoning adapter.

Tests cover:
- JSON extraction from fenced and bare model output
- Successful structured responses (confidence, reasoning, tokens)
- Failure envelopes for transport, parsing and validation errors
- Unconfigured client short-circuit
- Keyword-focused prompt selection
"""

import json

import pytest
from conftest import FakeClaudeClient, make_content

from adsintel.integrations.claude import CompletionResult
from adsintel.schemas.ai_responses import (
    AIBusinessModelAnalysis,
    AIGoogleTargeting,
    AIMetaTargeting,
)
from adsintel.services.ai_reasoning import AIReasoningEngine, extract_json

META_REPLY = {
    "demographics": {"age_ranges": ["25-34"], "locations": ["United States"]},
    "interests": [
        {
            "category": "Business",
            "specific_interests": ["Small business", "Entrepreneurship"],
            "reasoning": "Owners run the product",
            "confidence": 0.8,
        }
    ],
    "behaviors": [{"behavior": "Small business owners", "confidence": 85}],
    "confidence_score": 0.75,
    "overall_reasoning": "B2B audience",
}


# =============================================================================
# JSON EXTRACTION
# =============================================================================


class TestExtractJson:
    def test_fenced_json(self) -> None:
        text = 'Here you go:\n```json\n{"type": "Agency"}\n```\nThanks'
        assert extract_json(text) == {"type": "Agency"}

    def test_plain_fence(self) -> None:
        assert extract_json('```\n{"type": "Agency"}\n```') == {"type": "Agency"}

    def test_bare_object_with_prose(self) -> None:
        text = 'The answer is {"type": "Retail", "confidence": 0.5} as requested.'
        assert extract_json(text) == {"type": "Retail", "confidence": 0.5}

    def test_no_object_raises(self) -> None:
        with pytest.raises(ValueError):
            extract_json("I cannot help with that.")

    def test_top_level_array_rejected(self) -> None:
        with pytest.raises(ValueError):
            extract_json("[1, 2, 3]")


# =============================================================================
# INVOKE
# =============================================================================


class TestInvoke:
    async def test_success(self, fake_claude: FakeClaudeClient) -> None:
        fake_claude.queue_text(
            "```json\n"
            + json.dumps({"type": "Agency", "confidence": 0.9, "reasoning": "Portfolio"})
            + "\n```"
        )
        engine = AIReasoningEngine(fake_claude)

        result = await engine.invoke("prompt", None, AIBusinessModelAnalysis)

        assert result.success is True
        assert isinstance(result.data, AIBusinessModelAnalysis)
        assert result.data.type == "Agency"
        assert result.confidence == 0.9
        assert result.reasoning == "Portfolio"
        assert result.tokens_used == 30
        assert result.error is None

    async def test_meta_targeting_confidence_from_score(
        self, fake_claude: FakeClaudeClient
    ) -> None:
        fake_claude.queue_text(json.dumps(META_REPLY))
        engine = AIReasoningEngine(fake_claude)

        result = await engine.invoke("prompt", None, AIMetaTargeting)

        assert result.success is True
        assert result.confidence == 0.75
        assert result.reasoning == "B2B audience"
        assert result.data.behaviors[0].confidence == 0.85

    async def test_non_json_reply_fails(self, fake_claude: FakeClaudeClient) -> None:
        fake_claude.queue_text("Sorry, no JSON today.")
        result = await AIReasoningEngine(fake_claude).invoke(
            "prompt", None, AIBusinessModelAnalysis
        )

        assert result.success is False
        assert result.data is None
        assert "No JSON object" in result.error
        assert result.tokens_used == 30

    async def test_schema_mismatch_fails(self, fake_claude: FakeClaudeClient) -> None:
        fake_claude.queue_text(json.dumps({"interests": [], "behaviors": []}))
        result = await AIReasoningEngine(fake_claude).invoke(
            "prompt", None, AIMetaTargeting
        )

        assert result.success is False
        assert "failed validation" in result.error
        assert "interests" in result.error

    @pytest.mark.parametrize(
        "reply,response_model",
        [
            (
                {"interests": [{"category": "x", "confidence": [0.9]}], "behaviors": []},
                AIMetaTargeting,
            ),
            ({"type": "Agency", "confidence": {"value": 0.9}}, AIBusinessModelAnalysis),
            ({"keyword_clusters": [{"intent": "Buy", "keywords": 5}]}, AIGoogleTargeting),
        ],
    )
    async def test_wrongly_typed_values_fail(
        self, fake_claude: FakeClaudeClient, reply: dict, response_model: type
    ) -> None:
        fake_claude.queue_text(json.dumps(reply))

        result = await AIReasoningEngine(fake_claude).invoke("prompt", None, response_model)

        assert result.success is False
        assert result.data is None
        assert "failed validation" in result.error

    async def test_transport_failure(self) -> None:
        client = FakeClaudeClient(
            [CompletionResult(success=False, error="Request timed out", status_code=None)]
        )
        result = await AIReasoningEngine(client).invoke(
            "prompt", None, AIBusinessModelAnalysis
        )

        assert result.success is False
        assert result.error == "Request timed out"
        assert result.tokens_used is None

    async def test_exception_becomes_failure(self) -> None:
        client = FakeClaudeClient([RuntimeError("boom")])
        result = await AIReasoningEngine(client).invoke(
            "prompt", None, AIBusinessModelAnalysis
        )

        assert result.success is False
        assert "boom" in result.error

    async def test_unconfigured_client_skips_call(self) -> None:
        client = FakeClaudeClient(available=False)
        engine = AIReasoningEngine(client)

        result = await engine.invoke("prompt", None, AIBusinessModelAnalysis)

        assert engine.is_configured() is False
        assert result.success is False
        assert result.error == "AI reasoning is not configured"
        assert client.prompts == []


# =============================================================================
# OPERATIONS
# =============================================================================


class TestOperations:
    async def test_analyze_business_model_lists_types(
        self, fake_claude: FakeClaudeClient
    ) -> None:
        fake_claude.queue_text(json.dumps({"type": "B2B SaaS"}))
        result = await AIReasoningEngine(fake_claude).analyze_business_model(
            make_content(title="Acme")
        )

        assert result.success is True
        assert result.data.description == ""
        assert "Freemium Model" in fake_claude.prompts[0]
        assert "Acme" in fake_claude.prompts[0]

    async def test_keyword_prompt_used_when_keywords_given(
        self, fake_claude: FakeClaudeClient
    ) -> None:
        fake_claude.queue_text(json.dumps(META_REPLY))
        fake_claude.queue_text(json.dumps(META_REPLY))
        engine = AIReasoningEngine(fake_claude)
        content = make_content(title="Acme")

        await engine.generate_meta_targeting(content, None)
        await engine.generate_meta_targeting(content, None, keywords=["crm software"])

        assert "crm software" not in fake_claude.prompts[0]
        assert "crm software" in fake_claude.prompts[1]

    async def test_analyze_business_model_with_malformed_confidence(
        self, fake_claude: FakeClaudeClient
    ) -> None:
        fake_claude.queue_text(json.dumps({"type": "B2B SaaS", "confidence": [1, 2]}))

        result = await AIReasoningEngine(fake_claude).analyze_business_model(
            make_content(title="Acme")
        )

        assert result.success is False
        assert "confidence" in result.error
