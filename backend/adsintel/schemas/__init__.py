"""Pydantic schemas for API requests/responses and AI output validation."""

from adsintel.schemas.analysis import (
    AnalysisSessionResponse,
    AnalyzeRequest,
    AnalyzeResponse,
    ClassifyRequest,
    ClassifyResponse,
)
from adsintel.schemas.targeting import (
    ConfidenceScore,
    GoogleTargetingData,
    MetaTargetingData,
    RecommendationExplanation,
    TargetingRecommendationResponse,
)

__all__ = [
    "AnalysisSessionResponse",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "ClassifyRequest",
    "ClassifyResponse",
    "ConfidenceScore",
    "GoogleTargetingData",
    "MetaTargetingData",
    "RecommendationExplanation",
    "TargetingRecommendationResponse",
]
