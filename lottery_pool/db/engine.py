"""Async SQLAlchemy engine and session factory.

PostgreSQL (asyncpg) in deployment; a ``sqlite+aiosqlite`` URL works for
local runs, in which case the pool sizing options are not applied.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from lottery_pool.config import settings


def build_engine(url: str = settings.DATABASE_URL) -> AsyncEngine:
    options = {"echo": settings.DEBUG}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
    return create_async_engine(url, **options)


engine = build_engine()

# cached rows and ORM results are read after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
