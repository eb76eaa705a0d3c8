"""
db/session.py
-------------
Async SQLAlchemy engine and session factory.

Design decisions:
  - AsyncEngine with asyncpg driver for non-blocking I/O in deployments;
    aiosqlite is accepted for local runs and tests.
  - Connection pool sized for typical workloads:
      pool_size=10, max_overflow=20 → max 30 concurrent DB connections.
  - pool_pre_ping=True: validates connections before checkout to handle
    stale connections after DB restarts or idle timeouts.
  - expire_on_commit=False: avoids lazy-load errors after commit in async
    context (attributes are already loaded, no implicit SELECT needed).
  - Engine and factory are built from Settings by the app factory and passed
    into each store/service; there is no module-level engine.
"""

from typing import Any, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from accounts.core.config import Settings

SessionFactory = async_sessionmaker[AsyncSession]


def _pool_options(database_url: str) -> Dict[str, Any]:
    # SQLite in-memory databases use a StaticPool, which takes no sizing options
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_recycle": 3600,  # Recycle connections every hour
    }


def create_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,  # Log SQL in development
        pool_pre_ping=True,
        **_pool_options(settings.DATABASE_URL),
    )


def create_session_factory(engine: AsyncEngine) -> SessionFactory:
    """
    Session factory shared by every store and service.

    Usage:
        async with sessions() as session:          # read-only unit of work
            ...
        async with sessions.begin() as session:    # commits on exit,
            ...                                     # rolls back on exception
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
