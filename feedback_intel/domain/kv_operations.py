"""Domain operations for the key-value store."""

from datetime import UTC, datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.models.kv_entry import KVEntry


class KVOperations:
    """
    Get / put-with-TTL / delete over the kv_entries table.

    Note: This doesn't extend BaseOperations because entries are keyed by
    string and expiry is enforced on read.
    """

    def __init__(self) -> None:
        self.model = KVEntry

    async def get(self, db: AsyncSession, key: str) -> str | None:
        """Return the stored value, or None if missing or expired."""
        statement = select(KVEntry).where(KVEntry.key == key)
        result = await db.execute(statement)
        entry = result.scalar_one_or_none()
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= datetime.now(UTC):
            return None
        return entry.value

    async def put(
        self,
        db: AsyncSession,
        key: str,
        value: str,
        ttl_seconds: int | None = None,
    ) -> None:
        """Store a value, replacing any previous one. No TTL means no expiry."""
        expires_at = (
            datetime.now(UTC) + timedelta(seconds=ttl_seconds) if ttl_seconds else None
        )
        stmt = (
            insert(self.model)
            .values(key=key, value=value, expires_at=expires_at)
            .on_conflict_do_update(
                index_elements=["key"],
                set_={"value": value, "expires_at": expires_at},
            )
        )
        await db.execute(stmt)
        await db.flush()

    async def delete(self, db: AsyncSession, key: str) -> None:
        await db.execute(delete(KVEntry).where(KVEntry.key == key))
        await db.flush()

    async def purge_expired(self, db: AsyncSession) -> int:
        """Delete expired entries. Returns the number removed."""
        result = await db.execute(
            delete(KVEntry).where(KVEntry.expires_at <= datetime.now(UTC))  # type: ignore[operator]
        )
        await db.flush()
        return result.rowcount or 0


kv_ops = KVOperations()
