"""Pydantic schemas for persisted targeting data.

targeting_data is stored as JSON on TargetingRecommendation. Interest,
behavior and keyword-cluster items carry a confidence; their funnel_stage,
recommendation and why_this_converts are computed fields derived from it
and cannot be supplied by callers.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from adsintel.utils.funnel import (
    FunnelStage,
    Recommendation,
    assess_confidence,
    why_this_converts,
)

TargetingSource = Literal["ai", "fallback"]


class LocationTarget(BaseModel):
    type: str = "country"
    name: str


class DemographicsTarget(BaseModel):
    age_min: int = Field(..., ge=13, le=65)
    age_max: int = Field(..., ge=13, le=65)
    genders: list[str] = Field(default_factory=lambda: ["all"])
    locations: list[LocationTarget] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=lambda: ["en"])


class FunnelScoredItem(BaseModel):
    """Base for items whose funnel labels derive from confidence."""

    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str = ""

    def _subject(self) -> str:
        return "This segment"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def funnel_stage(self) -> FunnelStage:
        return assess_confidence(self.confidence).stage

    @computed_field  # type: ignore[prop-decorator]
    @property
    def recommendation(self) -> Recommendation:
        return assess_confidence(self.confidence).recommendation

    @computed_field  # type: ignore[prop-decorator]
    @property
    def why_this_converts(self) -> str:
        return why_this_converts(self.confidence, self._subject())


class InterestTarget(FunnelScoredItem):
    category: str
    interests: list[str] = Field(default_factory=list)

    def _subject(self) -> str:
        return f"The {self.category} interest group"


class BehaviorTarget(FunnelScoredItem):
    behavior: str

    def _subject(self) -> str:
        return f"The '{self.behavior}' behavior"


class KeywordClusterTarget(FunnelScoredItem):
    intent: str
    keywords: list[str] = Field(default_factory=list)
    search_volume: int = Field(default=0, ge=0)
    competition_level: str = "medium"
    match_type: str = "phrase"

    def _subject(self) -> str:
        return f"The {self.intent} keyword cluster"


class CustomAudience(BaseModel):
    type: str
    name: str
    description: str = ""


class LookalikeAudience(BaseModel):
    source: str
    percentage: int = Field(..., ge=1, le=10)
    description: str = ""


class GoogleAudienceTarget(BaseModel):
    type: str
    name: str
    description: str = ""


class PlacementTarget(BaseModel):
    type: str
    examples: list[str] = Field(default_factory=list)
    reasoning: str = ""


class MetaTargetingData(BaseModel):
    demographics: DemographicsTarget
    interests: list[InterestTarget]
    behaviors: list[BehaviorTarget]
    custom_audiences: list[CustomAudience] = Field(default_factory=list)
    lookalike_audiences: list[LookalikeAudience] = Field(default_factory=list)
    source: TargetingSource


class GoogleTargetingData(BaseModel):
    keywords: list[KeywordClusterTarget]
    audiences: list[GoogleAudienceTarget]
    demographics: DemographicsTarget
    placements: list[PlacementTarget] = Field(default_factory=list)
    negative_keywords: list[str] = Field(default_factory=list)
    source: TargetingSource


class ConfidenceScore(BaseModel):
    category: str
    score: float = Field(..., ge=0.0, le=1.0)
    factors: list[str] = Field(default_factory=list)


class RecommendationExplanation(BaseModel):
    recommendation_id: str
    recommendation_type: str
    reasoning: str
    supporting_data: dict[str, Any] = Field(default_factory=dict)
    why_it_matters: str


class TargetingRecommendationResponse(BaseModel):
    """API response for a persisted targeting recommendation."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    session_id: str
    platform: str
    targeting_data: dict[str, Any]
    confidence_scores: list[dict[str, Any]] | None = None
    explanations: list[dict[str, Any]] | None = None
    created_at: datetime
