"""Feedback model for items ingested from GitHub, Discord, support tickets, etc."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, text
from sqlmodel import Field, SQLModel

from feedback_intel.models.base import utcnow


class FeedbackBase(SQLModel):
    """Fields supplied by the source system."""

    id: str = Field(primary_key=True, max_length=200)
    source: str = Field(max_length=50, nullable=False)
    title: str = Field(nullable=False)
    content: str = Field(nullable=False)
    label: str | None = Field(default=None)
    author: str | None = Field(default=None)
    created_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=utcnow,
        nullable=False,
        sa_type=DateTime(timezone=True),
    )


class Feedback(FeedbackBase, table=True):
    """A single piece of user feedback, owned upstream and immutable here."""

    __tablename__ = "feedback"
    __table_args__ = (
        Index("idx_feedback_source", "source"),
        Index("idx_feedback_created", "created_at"),
    )

    ingested_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=utcnow,
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )
    raw_metadata: str | None = Field(default=None)  # JSON text from the source API


class FeedbackCreate(FeedbackBase):
    """Schema for ingesting feedback.

    ``raw_metadata`` may be any JSON value; it is stored serialized.
    """

    raw_metadata: Any | None = None


class FeedbackWithClassification(SQLModel):
    """Feedback joined with its current classification (if any)."""

    id: str
    source: str
    title: str
    content: str
    label: str | None = None
    author: str | None = None
    created_at: datetime
    urgency: int | None = None
    sentiment: int | None = None
    impact: int | None = None
    actionability: int | None = None
    route: str | None = None
    reasoning: str | None = None
