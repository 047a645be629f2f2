"""
Async engine and session factories for the warehouse database
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from core.config import settings


def create_engine(database_url: str = settings.DATABASE_URL) -> AsyncEngine:
    # Runs are sequential and infrequent; no pooled connections between them
    return create_async_engine(database_url, echo=False, poolclass=NullPool)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    """Sessions keep loaded rows usable after commit and never autoflush"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


engine = create_engine()
async_session_maker = create_session_maker(engine)
