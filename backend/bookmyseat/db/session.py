"""
Async engine and per-request session dependency.

Every request gets its own AsyncSession and therefore its own transaction:
committed when the handler returns, rolled back when anything raises.
The ledger relies on this so that a reservation's ticket update and booking
insert land together or not at all.
"""

from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from bookmyseat.core.config import Settings, get_settings


def use_immediate_transactions(engine: AsyncEngine) -> None:
    """
    SQLite only: start every transaction with BEGIN IMMEDIATE so concurrent
    writers queue on the database lock instead of failing with
    "database is locked" when a read lock cannot be upgraded.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(settings: Settings, **overrides) -> AsyncEngine:
    url = overrides.pop("url", settings.DATABASE_URL)
    kwargs = {"echo": settings.DEBUG, "pool_pre_ping": True}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"timeout": 30}
    else:
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )
    kwargs.update(overrides)

    engine = create_async_engine(url, **kwargs)
    if url.startswith("sqlite"):
        use_immediate_transactions(engine)
    return engine


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(get_settings())
AsyncSessionLocal = build_sessionmaker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
