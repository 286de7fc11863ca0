"""
Engine and session-factory helpers.

``DATABASE_URL`` may arrive in the ``postgres://`` form hosting providers
hand out; it is rewritten to the asyncpg driver before an engine is built.
SQLite URLs (tests, local runs) are passed through with aiosqlite.
"""

from __future__ import annotations

import re

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .base import Base

_POSTGRES_SCHEME = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")


def normalize_url(db_url: str) -> str:
    """Point any Postgres URL at ``postgresql+asyncpg://``; other URLs are unchanged."""
    return _POSTGRES_SCHEME.sub("postgresql+asyncpg://", db_url, count=1)


def create_engine(db_url: str) -> AsyncEngine:
    url = normalize_url(db_url)
    if url.startswith("sqlite"):
        return create_async_engine(url, connect_args={"check_same_thread": False})
    return create_async_engine(url, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory whose objects stay readable after ``commit``.

    Services return entities they just committed, so attributes must not
    expire on commit.
    """
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create every table from the model metadata. Used by tests; deployments run Alembic."""
    from . import entities  # noqa: F401  registers every table

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
