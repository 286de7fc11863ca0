"""
Process-wide engine and session factory.

``get_session`` is the FastAPI dependency behind ``SessionDep``; each request
gets its own ``AsyncSession`` that is closed when the response is sent.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from tatvivah.server.core.config import settings

from .utils import create_engine, create_sessionmaker

engine = create_engine(settings.database_url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


async def dispose_engine() -> None:
    """Close every pooled connection. Called on application shutdown."""
    await engine.dispose()
