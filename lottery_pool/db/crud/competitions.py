"""CRUD operations for pools and competitions."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lottery_pool.db.models.competition import Competition
from lottery_pool.db.models.pool import Pool


async def get(session: AsyncSession, competition_id: int) -> Competition | None:
    return await session.get(Competition, competition_id)


async def get_with_pool(session: AsyncSession, competition_id: int) -> Competition | None:
    """Load a competition with its pool's participants and tickets."""
    result = await session.execute(
        select(Competition)
        .where(Competition.id == competition_id)
        .options(
            selectinload(Competition.pool).selectinload(Pool.participants),
            selectinload(Competition.pool).selectinload(Pool.tickets),
        )
    )
    return result.scalar_one_or_none()


async def get_pool(session: AsyncSession, pool_id: int) -> Pool | None:
    return await session.get(Pool, pool_id)


async def create(session: AsyncSession, values: dict) -> Competition:
    competition = Competition(**values)
    session.add(competition)
    await session.flush()
    return competition
