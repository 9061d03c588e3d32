"""TargetingRecommendation model for generated ad targeting.

Every generation call inserts a new row; there is no uniqueness on
(session_id, platform), so repeated calls keep their history.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, String, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from adsintel.core.database import Base


class Platform(str, Enum):
    META = "meta"
    GOOGLE = "google"


class TargetingRecommendation(Base):
    """Targeting recommendation model.

    Attributes:
        id: UUID primary key
        session_id: Reference to the parent analysis session
        platform: "meta" or "google"
        targeting_data: MetaTargetingData / GoogleTargetingData as JSON
        confidence_scores: List of {category, score, factors}
        explanations: List of per-item explanations
        created_at: Timestamp when record was created
    """

    __tablename__ = "targeting_recommendations"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
        server_default=text("gen_random_uuid()"),
    )

    session_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("analysis_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    platform: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        index=True,
    )

    targeting_data: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
    )

    confidence_scores: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSONB,
        nullable=True,
    )

    explanations: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSONB,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
    )

    def __repr__(self) -> str:
        return (
            f"<TargetingRecommendation(id={self.id!r}, session_id={self.session_id!r}, "
            f"platform={self.platform!r})>"
        )
