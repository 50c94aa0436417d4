"""
Database engine and session factories (SQLAlchemy async)
"""

from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from core.config import settings
import logging

logger = logging.getLogger(__name__)


def build_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    """Create an async engine; defaults come from settings"""
    return create_async_engine(
        database_url or settings.DATABASE_URL,
        echo=settings.ENVIRONMENT == "development" if echo is None else echo,
        poolclass=NullPool,
        future=True
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    """
    Session factory used by the sync orchestrator and request handlers.

    expire_on_commit is off so ORM rows stay readable after each
    per-contract commit without another round-trip.
    """
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


engine = build_engine()
async_session_maker = build_session_factory(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session"""
    async with async_session_maker() as session:
        yield session
