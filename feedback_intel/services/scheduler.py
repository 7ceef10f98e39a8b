"""Background jobs for the feedback pipeline, run by APScheduler in-process.

Each job takes a PostgreSQL advisory lock first, so that when several API
instances are running only one of them does the work on a given tick.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy import text

from feedback_intel.config import settings
from feedback_intel.core.database import direct_session_maker, session_scope

logger = logging.getLogger(__name__)

# One advisory lock key per job
CLASSIFY_LOCK_ID = 734101
KV_PURGE_LOCK_ID = 734102

CLASSIFY_JOB_ID = "classify_pending"
KV_PURGE_JOB_ID = "kv_purge"


@asynccontextmanager
async def advisory_lock(lock_id: int) -> AsyncIterator[bool]:
    """
    Hold a session-level advisory lock for the duration of the block.

    Yields False without waiting when another session owns the key.
    Session-level locks do not survive the transaction pooler, hence the
    direct connection.
    """
    async with direct_session_maker() as session:
        acquired = (
            await session.execute(
                text("SELECT pg_try_advisory_lock(:lock_id)"), {"lock_id": lock_id}
            )
        ).scalar()

        if not acquired:
            yield False
            return

        try:
            yield True
        finally:
            await session.execute(
                text("SELECT pg_advisory_unlock(:lock_id)"), {"lock_id": lock_id}
            )
            await session.commit()


async def _run_locked(label: str, lock_id: int, job: Callable[[], Awaitable[Any]]) -> Any:
    """Run `job` under `lock_id`. Errors are logged and turned into None."""
    async with advisory_lock(lock_id) as acquired:
        if not acquired:
            logger.info(f"[scheduler] {label}: skipped (another instance is running)")
            return None
        try:
            return await job()
        except Exception as e:
            logger.exception(f"[scheduler] {label}: failed with error: {e}")
            return None


async def _classify_pending_job() -> dict[str, Any] | None:
    if not settings.llm_enabled:
        logger.info("[scheduler] Classify: skipped (ANTHROPIC_API_KEY not set)")
        return None

    from feedback_intel.services.classification_runner import ClassificationRunner

    logger.info("[scheduler] Classify: starting")
    async with session_scope(direct_session_maker) as db:
        report = await ClassificationRunner().classify_pending(
            db,
            limit=settings.scheduled_classify_limit,
            skip_failures=True,
        )

    logger.info(
        f"[scheduler] Classify: completed ({report.classified_count} classified, "
        f"{report.fallbacks} fallbacks, {len(report.failed)} failed)"
    )
    return asdict(report)


async def _kv_purge_job() -> int:
    from feedback_intel.domain.kv_operations import kv_ops

    async with session_scope(direct_session_maker) as db:
        removed = await kv_ops.purge_expired(db)

    logger.info(f"[scheduler] KV-purge: removed {removed} expired entries")
    return removed


async def run_scheduled_classification() -> dict[str, Any] | None:
    """
    Sweep unclassified feedback.

    Items whose model call fails are logged and left for the next sweep.
    Returns the batch report as a dict, or None when skipped or failed.
    """
    return await _run_locked("Classify", CLASSIFY_LOCK_ID, _classify_pending_job)


async def run_kv_purge() -> int | None:
    """Delete expired key-value rows. Returns the number removed."""
    return await _run_locked("KV-purge", KV_PURGE_LOCK_ID, _kv_purge_job)


JOBS: dict[str, Callable[[], Awaitable[Any]]] = {
    CLASSIFY_JOB_ID: run_scheduled_classification,
    KV_PURGE_JOB_ID: run_kv_purge,
}


class Scheduler:
    """Owns the AsyncIOScheduler and its job registrations."""

    def __init__(self) -> None:
        self._scheduler: AsyncIOScheduler | None = None

    def start(self) -> None:
        if not settings.scheduler_enabled:
            logger.info("[scheduler] Disabled via SCHEDULER_ENABLED=false")
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            run_scheduled_classification,
            trigger=IntervalTrigger(minutes=settings.classify_interval_minutes),
            id=CLASSIFY_JOB_ID,
            name="Classify pending feedback",
            replace_existing=True,
        )
        # Expired KV rows are already ignored on read; this reclaims space
        self._scheduler.add_job(
            run_kv_purge,
            trigger=IntervalTrigger(hours=1),
            id=KV_PURGE_JOB_ID,
            name="Purge expired KV entries",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            f"[scheduler] Started: classify every {settings.classify_interval_minutes} min, "
            f"kv-purge hourly"
        )

    def stop(self) -> None:
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("[scheduler] Stopped")

    async def trigger_now(self, job_id: str) -> Any:
        """Run a registered job immediately. Returns None for unknown ids."""
        job = JOBS.get(job_id)
        if job is None:
            return None
        return await job()


scheduler = Scheduler()
