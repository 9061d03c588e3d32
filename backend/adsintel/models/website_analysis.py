"""WebsiteAnalysis model for classified website content.

Stores one analyzed page per row:
- business_model: Classified business model label
- value_propositions / target_audience / content_themes: Classifier output
- technical_metadata: Extracted page content plus classification details

Example technical_metadata structure:
    {
        "title": "Acme - Workflow automation for teams",
        "description": "...",
        "headings": ["..."],
        "paragraphs": ["..."],
        "list_items": ["..."],
        "cta_buttons": ["Start free trial"],
        "navigation_links": ["Pricing", "Docs"],
        "classification_confidence": 0.72,
        "business_model_details": {
            "type": "B2B SaaS",
            "description": "...",
            "confidence": 0.75,
            "matched_keywords": ["teams", "workflow"]
        }
    }
"""

from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from adsintel.core.database import Base


class WebsiteAnalysis(Base):
    __tablename__ = "website_analyses"

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

    url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    business_model: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    value_propositions: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        server_default=text("'[]'::jsonb"),
    )

    target_audience: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )

    content_themes: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        server_default=text("'[]'::jsonb"),
    )

    technical_metadata: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        server_default=text("now()"),
    )

    def __repr__(self) -> str:
        return (
            f"<WebsiteAnalysis(id={self.id!r}, url={self.url!r}, "
            f"business_model={self.business_model!r})>"
        )
