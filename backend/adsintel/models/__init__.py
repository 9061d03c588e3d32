"""Models layer - SQLAlchemy ORM models.

Models define the database schema and relationships.
All models inherit from the Base class defined in core.database.
"""

from adsintel.core.database import Base
from adsintel.models.analysis_session import (
    GUEST_USER_ID,
    AnalysisSession,
    AnalysisStatus,
)
from adsintel.models.competitor_analysis import CompetitorAnalysis
from adsintel.models.targeting_recommendation import Platform, TargetingRecommendation
from adsintel.models.website_analysis import WebsiteAnalysis

__all__ = [
    "Base",
    "GUEST_USER_ID",
    "AnalysisSession",
    "AnalysisStatus",
    "CompetitorAnalysis",
    "Platform",
    "TargetingRecommendation",
    "WebsiteAnalysis",
]
