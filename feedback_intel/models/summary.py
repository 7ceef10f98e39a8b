"""PM summary model for generated period reports."""

from datetime import datetime
from typing import Any

from sqlalchemy import Column, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from feedback_intel.models.base import CreatedAtMixin, IntegerIdMixin


class Summary(IntegerIdMixin, CreatedAtMixin, SQLModel, table=True):
    """AI-generated narrative summary for a reporting period."""

    __tablename__ = "summaries"

    period_start: datetime = Field(  # type: ignore[call-overload]
        nullable=False, sa_type=DateTime(timezone=True)
    )
    period_end: datetime = Field(  # type: ignore[call-overload]
        nullable=False, sa_type=DateTime(timezone=True)
    )
    summary_type: str = Field(max_length=20, nullable=False)  # "weekly", "adhoc"
    content: str = Field(nullable=False)
    metrics: dict[str, Any] | None = Field(default=None, sa_column=Column(JSONB))
