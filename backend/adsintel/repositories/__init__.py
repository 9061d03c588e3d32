"""Repositories layer - database access for each model."""

from adsintel.repositories.analysis_session import AnalysisSessionRepository
from adsintel.repositories.competitor_analysis import CompetitorAnalysisRepository
from adsintel.repositories.targeting_recommendation import (
    TargetingRecommendationRepository,
)
from adsintel.repositories.website_analysis import WebsiteAnalysisRepository

__all__ = [
    "AnalysisSessionRepository",
    "CompetitorAnalysisRepository",
    "TargetingRecommendationRepository",
    "WebsiteAnalysisRepository",
]
