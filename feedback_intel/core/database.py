from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from feedback_intel.config import settings

# Pooled connection for short request/response work (ingest, listings, config).
# The transaction pooler rejects prepared statements, so asyncpg's caches are off.
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug and settings.db_echo,
    future=True,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
    pool_recycle=300,
    pool_timeout=30,
    connect_args={
        "statement_cache_size": 0,
        "prepared_statement_cache_size": 0,
        "command_timeout": settings.db_command_timeout_seconds,
    },
)

# Direct connection for DDL, advisory locks and LLM-bound work: a session
# stays open across sequential model calls, which can outlast the pooler's
# statement timeout.
direct_engine = create_async_engine(
    settings.database_url_direct,
    echo=settings.debug and settings.db_echo,
    future=True,
    pool_pre_ping=True,
    pool_size=3,
    max_overflow=5,
    connect_args={
        "command_timeout": settings.db_long_command_timeout_seconds,
    },
)


def _session_maker(bind: AsyncEngine) -> sessionmaker:
    return sessionmaker(  # type: ignore[call-overload]
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async_session_maker = _session_maker(engine)
direct_session_maker = _session_maker(direct_engine)


@asynccontextmanager
async def session_scope(maker: sessionmaker) -> AsyncIterator[AsyncSession]:
    """Session that commits on success, rolls back and re-raises on any error."""
    async with maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields a pooled session."""
    async with session_scope(async_session_maker) as session:
        yield session


async def get_direct_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields a direct session for endpoints that call the LLM.

    Classification batches and summaries hold the session across one or
    more model calls; the direct connection has a longer command timeout.
    """
    async with session_scope(direct_session_maker) as session:
        yield session


async def init_db() -> None:
    """Create all tables (for development only - use Alembic in production)."""
    async with direct_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
