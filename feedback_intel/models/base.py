from datetime import UTC, datetime

from sqlalchemy import DateTime, text
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


class IntegerIdMixin(SQLModel):
    """Mixin providing an autoincrement integer primary key."""

    id: int | None = Field(default=None, primary_key=True)


class CreatedAtMixin(SQLModel):
    """Mixin providing a timezone-aware created_at timestamp."""

    created_at: datetime = Field(  # type: ignore[call-overload]
        default_factory=utcnow,
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )
