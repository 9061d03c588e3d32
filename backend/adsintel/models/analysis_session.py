"""AnalysisSession model for one website analysis request.

An analysis session tracks a single run of the targeting pipeline:
- website_url: The site being analyzed
- target_location: Optional country/region to prioritize in demographics
- competitor_urls / keywords: Optional inputs captured at request time
- status: pending -> processing -> completed | failed
- error_message: Generic failure message shown to clients
- Timestamps for auditing
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from adsintel.core.database import Base

GUEST_USER_ID = "00000000-0000-0000-0000-000000000000"


class AnalysisStatus(str, Enum):
    """Lifecycle states of an analysis session."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class AnalysisSession(Base):
    """Analysis session model.

    Attributes:
        id: UUID primary key
        user_id: Owner of the session (guest user when anonymous)
        website_url: URL of the website to analyze
        target_location: Optional location to put first in demographics
        competitor_urls: List of competitor URLs to analyze
        keywords: Optional seed keywords for keyword-focused targeting
        status: One of AnalysisStatus values
        error_message: Generic message when status is failed
        analysis_data: Free-form summary data for the session
        created_at: Timestamp when record was created
        updated_at: Timestamp when record was last updated
        completed_at: When the pipeline finished (completed or failed)
    """

    __tablename__ = "analysis_sessions"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
        server_default=text("gen_random_uuid()"),
    )

    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        nullable=False,
        default=GUEST_USER_ID,
        index=True,
    )

    website_url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    target_location: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    competitor_urls: Mapped[list[str]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        server_default=text("'[]'::jsonb"),
    )

    keywords: Mapped[list[str]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        server_default=text("'[]'::jsonb"),
    )

    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=AnalysisStatus.PENDING.value,
        server_default=text("'pending'"),
        index=True,
    )

    error_message: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    analysis_data: Mapped[dict[str, Any] | None] = mapped_column(
        JSONB,
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
        onupdate=lambda: datetime.now(UTC),
    )

    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<AnalysisSession(id={self.id!r}, url={self.website_url!r}, "
            f"status={self.status!r})>"
        )
