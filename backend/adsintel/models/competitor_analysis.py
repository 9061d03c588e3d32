"""CompetitorAnalysis model for per-competitor positioning summaries."""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Text, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from adsintel.core.database import Base


class CompetitorAnalysis(Base):
    """Competitor analysis model.

    Attributes:
        id: UUID primary key
        session_id: Reference to the parent analysis session
        competitor_url: The analyzed competitor URL
        positioning: Business model, value propositions and pricing guess
        audience_insights: Audience signals detected on the competitor site
        content_strategy: Themes, CTAs and content volume
        market_share_data: Reserved for third-party market data
        created_at: Timestamp when record was created
    """

    __tablename__ = "competitor_analyses"

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

    competitor_url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    positioning: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )

    audience_insights: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )

    content_strategy: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )

    market_share_data: Mapped[dict[str, Any] | None] = mapped_column(
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
        return f"<CompetitorAnalysis(id={self.id!r}, url={self.competitor_url!r})>"
