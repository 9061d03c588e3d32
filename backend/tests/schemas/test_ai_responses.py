"""Tests for AI response schemas: defaults, coercion and clamping."""

import pytest
from pydantic import ValidationError

from adsintel.schemas.ai_responses import (
    AIAudienceInsights,
    AIBusinessModelAnalysis,
    AIGoogleTargeting,
    AIKeywordCluster,
    AILookalike,
    AIMetaTargeting,
)


class TestConfidenceClamping:
    def test_percent_scale_is_normalized(self) -> None:
        analysis = AIBusinessModelAnalysis.model_validate({"type": "Agency", "confidence": 85})
        assert analysis.confidence == pytest.approx(0.85)

    def test_negative_clamped_to_zero(self) -> None:
        analysis = AIBusinessModelAnalysis.model_validate({"type": "Agency", "confidence": -0.4})
        assert analysis.confidence == 0.0

    def test_missing_confidence_is_none(self) -> None:
        analysis = AIBusinessModelAnalysis.model_validate({"type": "Agency"})
        assert analysis.confidence is None

    def test_string_confidence(self) -> None:
        analysis = AIBusinessModelAnalysis.model_validate({"type": "Agency", "confidence": "0.7"})
        assert analysis.confidence == pytest.approx(0.7)

    @pytest.mark.parametrize("raw", [1.5, 150, "250"])
    def test_out_of_scale_values_clamped_to_one(self, raw: object) -> None:
        analysis = AIBusinessModelAnalysis.model_validate({"type": "Agency", "confidence": raw})
        assert analysis.confidence == 1.0

    def test_list_confidence_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AIBusinessModelAnalysis.model_validate({"type": "Agency", "confidence": [0.9]})


class TestBusinessModelAnalysis:
    def test_type_is_required(self) -> None:
        with pytest.raises(ValidationError):
            AIBusinessModelAnalysis.model_validate({"description": "x"})

    def test_extra_fields_ignored(self) -> None:
        analysis = AIBusinessModelAnalysis.model_validate({"type": "Retail", "unexpected": 1})
        assert analysis.type == "Retail"
        assert analysis.description == ""


class TestAudienceInsights:
    def test_empty_object_gets_defaults(self) -> None:
        insights = AIAudienceInsights.model_validate({})
        assert insights.demographics.genders == ["all"]
        assert insights.demographics.age_ranges == []
        assert insights.pain_points == []
        assert insights.psychographics.interests == []

    def test_comma_separated_strings_become_lists(self) -> None:
        insights = AIAudienceInsights.model_validate(
            {"goals": "grow revenue, save time", "demographics": {"locations": "US, Canada"}}
        )
        assert insights.goals == ["grow revenue", "save time"]
        assert insights.demographics.locations == ["US", "Canada"]

    def test_null_nested_objects(self) -> None:
        insights = AIAudienceInsights.model_validate({"demographics": None, "psychographics": None})
        assert insights.demographics.genders == ["all"]


class TestMetaTargeting:
    def test_minimal_valid_response(self) -> None:
        data = AIMetaTargeting.model_validate(
            {
                "interests": [{"category": "CRM", "interests": ["Salesforce"]}],
                "behaviors": [{"behavior": "Small business owners"}],
                "confidence": 0.8,
            }
        )
        assert data.interests[0].specific_interests == ["Salesforce"]
        assert data.interests[0].reasoning == ""
        assert data.confidence_score == pytest.approx(0.8)
        assert data.custom_audiences == []

    def test_empty_interests_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AIMetaTargeting.model_validate({"interests": [], "behaviors": []})

    def test_missing_behaviors_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AIMetaTargeting.model_validate({"interests": [{"category": "CRM"}]})

    @pytest.mark.parametrize("raw,expected", [("3%", 3), (25, 10), (0, 1), (None, 1)])
    def test_lookalike_percentage(self, raw: object, expected: int) -> None:
        assert AILookalike.model_validate({"percentage": raw}).percentage == expected

    def test_lookalike_percentage_must_be_scalar(self) -> None:
        with pytest.raises(ValidationError):
            AILookalike.model_validate({"percentage": [3]})


class TestGoogleTargeting:
    def test_string_keywords_are_coerced(self) -> None:
        cluster = AIKeywordCluster.model_validate({"intent": "Buy", "keywords": ["crm software"]})
        assert cluster.keywords[0].keyword == "crm software"
        assert cluster.keywords[0].match_type == "phrase"
        assert cluster.keywords[0].estimated_volume == "medium"

    def test_clusters_required(self) -> None:
        with pytest.raises(ValidationError):
            AIGoogleTargeting.model_validate({"keyword_clusters": []})

    def test_defaults(self) -> None:
        data = AIGoogleTargeting.model_validate(
            {"keyword_clusters": [{"intent": "Buy", "keywords": ["crm"]}]}
        )
        assert data.audiences == []
        assert data.negative_keywords == []
        assert data.demographics.genders == ["all"]
        assert data.confidence_score is None
