"""Async SQLAlchemy engine and per-request sessions.

Learn: One engine per process, built from DEBTBOOK_DATABASE_URL. Each
request gets its own AsyncSession through the get_db dependency, and
every RecordStore write commits on that session.

build_engine() knows the two kinds of URL the project meets:
- PostgreSQL (asyncpg) in deployment → pooled connections
- in-memory SQLite in tests → one shared connection (StaticPool), since
  each new connection to ":memory:" would be a brand-new empty database
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from debtbook.config import settings


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with pooling suited to the database."""
    if url.startswith("sqlite"):
        in_memory = url.endswith("://") or ":memory:" in url
        if in_memory:
            return create_async_engine(
                url,
                echo=echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        return create_async_engine(url, echo=echo)
    return create_async_engine(url, echo=echo, pool_size=5, max_overflow=15)


engine = build_engine(settings.database_url, echo=settings.debug)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency — one session per request, closed afterwards."""
    async with async_session_factory() as session:
        yield session
