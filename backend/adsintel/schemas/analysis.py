"""Pydantic schemas for the analysis API endpoints.

Schemas for analysis requests and responses:
- AnalyzeRequest: Start a full website analysis
- AnalyzeResponse: Session id and status returned immediately
- AnalysisSessionResponse: Session with its results once completed
- ClassifyRequest / ClassifyResponse: Synchronous business model classification
"""

from datetime import datetime
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from adsintel.schemas.targeting import TargetingRecommendationResponse


def normalize_url(value: str) -> str:
    """Strip whitespace and default the scheme to https."""
    value = value.strip()
    if not value:
        raise ValueError("URL cannot be empty")
    if "://" not in value:
        value = f"https://{value}"
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("URL must be an http(s) address")
    return value


class AnalyzeRequest(BaseModel):
    """Request schema for starting an analysis."""

    website_url: str = Field(
        ...,
        min_length=1,
        max_length=2048,
        description="Website to analyze",
        examples=["https://example.com", "example.com"],
    )
    target_location: str | None = Field(
        None,
        max_length=255,
        description="Country or region to put first in location targeting",
        examples=["United States"],
    )
    competitor_urls: list[str] = Field(
        default_factory=list,
        max_length=5,
        description="Up to 5 competitor websites",
    )
    keywords: list[str] = Field(
        default_factory=list,
        max_length=20,
        description="Seed keywords to focus targeting on",
    )
    user_id: str | None = Field(
        None,
        max_length=255,
        description="Owner of the session; guest sessions use a fixed id",
    )

    @field_validator("website_url")
    @classmethod
    def validate_website_url(cls, v: str) -> str:
        return normalize_url(v)

    @field_validator("competitor_urls")
    @classmethod
    def validate_competitor_urls(cls, v: list[str]) -> list[str]:
        return [normalize_url(url) for url in v]

    @field_validator("keywords")
    @classmethod
    def validate_keywords(cls, v: list[str]) -> list[str]:
        """Drop blank keywords."""
        return [kw.strip() for kw in v if kw and kw.strip()]

    @field_validator("target_location")
    @classmethod
    def validate_target_location(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class AnalyzeResponse(BaseModel):
    """Response returned as soon as the analysis is scheduled."""

    session_id: str = Field(..., description="Analysis session id")
    status: str = Field(..., description="Session status")


class WebsiteAnalysisResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    session_id: str
    url: str
    business_model: str | None = None
    value_propositions: list[dict[str, Any]] = Field(default_factory=list)
    target_audience: dict[str, Any] = Field(default_factory=dict)
    content_themes: list[dict[str, Any]] = Field(default_factory=list)
    technical_metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class CompetitorAnalysisResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    session_id: str
    competitor_url: str
    positioning: dict[str, Any] = Field(default_factory=dict)
    audience_insights: dict[str, Any] = Field(default_factory=dict)
    content_strategy: dict[str, Any] = Field(default_factory=dict)
    market_share_data: dict[str, Any] | None = None
    created_at: datetime


class AnalysisSessionResponse(BaseModel):
    """Session record; result lists are empty until the session completes."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    website_url: str
    target_location: str | None = None
    competitor_urls: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    status: str
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None
    website_analyses: list[WebsiteAnalysisResponse] = Field(default_factory=list)
    competitor_analyses: list[CompetitorAnalysisResponse] = Field(default_factory=list)
    targeting_recommendations: list[TargetingRecommendationResponse] = Field(
        default_factory=list
    )


class ClassifyRequest(BaseModel):
    """Already-extracted website content to classify."""

    url: str = Field(..., min_length=1, max_length=2048)
    title: str | None = None
    description: str | None = None
    headings: list[str] = Field(default_factory=list)
    paragraphs: list[str] = Field(default_factory=list)
    list_items: list[str] = Field(default_factory=list)
    cta_buttons: list[str] = Field(default_factory=list)
    navigation_links: list[str] = Field(default_factory=list)


class ClassifyResponse(BaseModel):
    business_model: dict[str, Any]
    value_propositions: list[dict[str, Any]]
    audience_signals: dict[str, Any]
    content_themes: list[dict[str, Any]]
    confidence: float = Field(..., ge=0.0, le=1.0)
