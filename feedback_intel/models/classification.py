"""Stored classification results and extracted signals."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, text
from sqlmodel import Field, SQLModel

from feedback_intel.models.base import IntegerIdMixin, utcnow


class Classification(IntegerIdMixin, SQLModel, table=True):
    """Current classification of a feedback item.

    At most one row per feedback_id; reclassification replaces the row.
    """

    __tablename__ = "classifications"
    __table_args__ = (
        CheckConstraint("urgency BETWEEN 1 AND 5", name="ck_classifications_urgency"),
        CheckConstraint("sentiment BETWEEN -2 AND 2", name="ck_classifications_sentiment"),
        CheckConstraint("impact BETWEEN 1 AND 5", name="ck_classifications_impact"),
        CheckConstraint(
            "actionability BETWEEN 1 AND 5", name="ck_classifications_actionability"
        ),
        Index("idx_classifications_route", "route"),
        Index("idx_classifications_urgency", "urgency"),
    )

    feedback_id: str = Field(foreign_key="feedback.id", unique=True, nullable=False)
    urgency: int = Field(nullable=False)
    sentiment: int = Field(nullable=False)
    impact: int = Field(nullable=False)
    actionability: int = Field(nullable=False)
    route: str | None = Field(default=None)
    confidence: float | None = Field(default=None)
    reasoning: str | None = Field(default=None)
    classified_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=utcnow,
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )


class SignalRecord(IntegerIdMixin, SQLModel, table=True):
    """An extracted fact about a feedback item (feature area, user segment, ...)."""

    __tablename__ = "signals"
    __table_args__ = (Index("idx_signals_type", "signal_type"),)

    feedback_id: str = Field(foreign_key="feedback.id", nullable=False, index=True)
    signal_type: str = Field(nullable=False)
    signal_value: str = Field(nullable=False)
    confidence: float | None = Field(default=None)
