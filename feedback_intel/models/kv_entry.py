"""Key-value entries for configuration, caching and bookkeeping."""

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class KVEntry(SQLModel, table=True):
    """
    A single key-value pair with optional expiry.

    Keys are namespaced by prefix, e.g. ``classification:<feedback_id>``,
    ``prompt:<name>``, ``ratelimit:<key>``, ``sync:<source>``.
    Expired rows are treated as missing on read and overwritten on write.
    """

    __tablename__ = "kv_entries"

    key: str = Field(primary_key=True, max_length=500)
    value: str = Field(nullable=False)
    expires_at: datetime | None = Field(  # type: ignore[call-overload]
        default=None, sa_type=DateTime(timezone=True), index=True
    )
