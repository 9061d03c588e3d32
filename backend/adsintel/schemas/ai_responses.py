"""Pydantic schemas for JSON returned by the AI reasoning prompts.

Model output is loosely shaped, so every optional field has an explicit
default here and confidences are clamped to [0, 1]. Nothing downstream of
the AI adapter reads raw model JSON; it only sees these validated models.

Required fields (missing => the AI call is treated as failed):
- AIBusinessModelAnalysis.type
- AIMetaTargeting.interests (non-empty) and AIMetaTargeting.behaviors
- AIGoogleTargeting.keyword_clusters (non-empty)
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Confidences in this range are read as a 0-100 scale; anything else is clamped
PERCENT_SCALE_MIN = 2.0
PERCENT_SCALE_MAX = 100.0


def _require_scalar(value: Any, field: str) -> None:
    if not isinstance(value, (int, float, str)):
        raise ValueError(f"{field} must be a number, got {type(value).__name__}")


def _clamp_confidence(value: Any) -> float | None:
    if value is None or value == "":
        return None
    _require_scalar(value, "confidence")
    number = float(value)
    if PERCENT_SCALE_MIN <= number <= PERCENT_SCALE_MAX:
        number = number / 100.0
    return max(0.0, min(1.0, number))


def _as_string_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class AIBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AIBusinessModelAnalysis(AIBaseModel):
    type: str = Field(..., min_length=1)
    description: str = ""
    confidence: float | None = None
    reasoning: str | None = None
    revenue_model: str | None = None
    target_market: str | None = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> float | None:
        return _clamp_confidence(v)


class AIDemographics(AIBaseModel):
    age_ranges: list[str] = Field(default_factory=list)
    genders: list[str] = Field(default_factory=lambda: ["all"])
    locations: list[str] = Field(default_factory=list)
    job_titles: list[str] = Field(default_factory=list)
    income_level: str | None = None

    @field_validator("age_ranges", "locations", "job_titles", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> Any:
        return _as_string_list(v)

    @field_validator("genders", mode="before")
    @classmethod
    def _genders(cls, v: Any) -> Any:
        values = _as_string_list(v)
        return values or ["all"]


class AIPsychographics(AIBaseModel):
    interests: list[str] = Field(default_factory=list)
    values: list[str] = Field(default_factory=list)
    lifestyle: str | None = None

    @field_validator("interests", "values", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> Any:
        return _as_string_list(v)


class AIAudienceInsights(AIBaseModel):
    demographics: AIDemographics = Field(default_factory=AIDemographics)
    psychographics: AIPsychographics = Field(default_factory=AIPsychographics)
    pain_points: list[str] = Field(default_factory=list)
    goals: list[str] = Field(default_factory=list)
    behaviors: list[str] = Field(default_factory=list)
    reasoning: str | None = None
    confidence: float | None = None

    @field_validator("pain_points", "goals", "behaviors", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> Any:
        return _as_string_list(v)

    @field_validator("demographics", "psychographics", mode="before")
    @classmethod
    def _objects(cls, v: Any) -> Any:
        return v if v is not None else {}

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> float | None:
        return _clamp_confidence(v)


class AIInterest(AIBaseModel):
    category: str = "General"
    specific_interests: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("specific_interests", "interests"),
    )
    reasoning: str = ""
    confidence: float | None = None

    @field_validator("specific_interests", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> Any:
        return _as_string_list(v)

    @field_validator("reasoning", mode="before")
    @classmethod
    def _reasoning(cls, v: Any) -> Any:
        return v or ""

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> float | None:
        return _clamp_confidence(v)


class AIBehavior(AIBaseModel):
    behavior: str = Field(..., min_length=1)
    reasoning: str = ""
    confidence: float | None = None

    @field_validator("reasoning", mode="before")
    @classmethod
    def _reasoning(cls, v: Any) -> Any:
        return v or ""

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> float | None:
        return _clamp_confidence(v)


class AICustomAudience(AIBaseModel):
    type: str = "website_visitors"
    description: str = ""
    reasoning: str = ""


class AILookalike(AIBaseModel):
    source: str = "Website visitors"
    percentage: int = 1
    reasoning: str = ""

    @field_validator("percentage", mode="before")
    @classmethod
    def _percentage(cls, v: Any) -> Any:
        if v is None:
            return 1
        _require_scalar(v, "percentage")
        if isinstance(v, str):
            v = v.strip().rstrip("%") or "1"
        return max(1, min(10, int(float(v))))


class AIMetaTargeting(AIBaseModel):
    demographics: AIDemographics = Field(default_factory=AIDemographics)
    interests: list[AIInterest] = Field(..., min_length=1)
    behaviors: list[AIBehavior]
    custom_audiences: list[AICustomAudience] = Field(default_factory=list)
    lookalike_suggestions: list[AILookalike] = Field(default_factory=list)
    confidence_score: float | None = Field(
        default=None, validation_alias=AliasChoices("confidence_score", "confidence")
    )
    overall_reasoning: str | None = None

    @field_validator("demographics", mode="before")
    @classmethod
    def _objects(cls, v: Any) -> Any:
        return v if v is not None else {}

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> float | None:
        return _clamp_confidence(v)


class AIKeyword(AIBaseModel):
    keyword: str = Field(..., min_length=1)
    match_type: str = "phrase"
    estimated_volume: str = "medium"
    reasoning: str | None = None


class AIKeywordCluster(AIBaseModel):
    intent: str = "General"
    keywords: list[AIKeyword] = Field(default_factory=list)
    reasoning: str = ""
    confidence: float | None = None
    competition: str | None = None
    expected_cpc: str | None = None

    @field_validator("keywords", mode="before")
    @classmethod
    def _keywords(cls, v: Any) -> Any:
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("keywords must be a list")
        return [{"keyword": k} if isinstance(k, str) else k for k in v]

    @field_validator("reasoning", mode="before")
    @classmethod
    def _reasoning(cls, v: Any) -> Any:
        return v or ""

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> float | None:
        return _clamp_confidence(v)


class AIGoogleAudience(AIBaseModel):
    type: str = "affinity"
    name: str = ""
    description: str = ""
    reasoning: str = ""


class AIGoogleDemographics(AIBaseModel):
    age_ranges: list[str] = Field(default_factory=list)
    genders: list[str] = Field(default_factory=lambda: ["all"])
    locations: list[str] = Field(default_factory=list)
    household_income: list[str] = Field(default_factory=list)

    @field_validator("age_ranges", "locations", "household_income", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> Any:
        return _as_string_list(v)

    @field_validator("genders", mode="before")
    @classmethod
    def _genders(cls, v: Any) -> Any:
        values = _as_string_list(v)
        return values or ["all"]


class AIPlacement(AIBaseModel):
    type: str = "website"
    examples: list[str] = Field(default_factory=list)
    reasoning: str = ""

    @field_validator("examples", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> Any:
        return _as_string_list(v)


class AIGoogleTargeting(AIBaseModel):
    keyword_clusters: list[AIKeywordCluster] = Field(..., min_length=1)
    audiences: list[AIGoogleAudience] = Field(default_factory=list)
    demographics: AIGoogleDemographics = Field(default_factory=AIGoogleDemographics)
    placements: list[AIPlacement] = Field(default_factory=list)
    negative_keywords: list[str] = Field(default_factory=list)
    confidence_score: float | None = Field(
        default=None, validation_alias=AliasChoices("confidence_score", "confidence")
    )
    overall_reasoning: str | None = None

    @field_validator("demographics", mode="before")
    @classmethod
    def _objects(cls, v: Any) -> Any:
        return v if v is not None else {}

    @field_validator("negative_keywords", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> Any:
        return _as_string_list(v)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> float | None:
        return _clamp_confidence(v)
