"""Dependency injection for FastAPI."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from lottery_pool.cache.orchestrator import ResultOrchestrator
from lottery_pool.db.engine import async_session_factory
from lottery_pool.scoring.processor import DrawProcessor
from lottery_pool.services import results_service


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session for request scope."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_orchestrator() -> ResultOrchestrator:
    return results_service.orchestrator


def get_processor() -> DrawProcessor:
    return results_service.draw_processor
