"""CRUD operations for the durable draw-result cache."""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from lottery_pool.db.models.draw_cache import LotteryResultCache
from lottery_pool.db.upsert import upsert as _upsert

KEY_COLUMNS = ["lottery_type", "draw_number"]


async def get(session: AsyncSession, lottery_type: str, draw_number: int) -> LotteryResultCache | None:
    result = await session.execute(
        select(LotteryResultCache).where(
            LotteryResultCache.lottery_type == lottery_type,
            LotteryResultCache.draw_number == draw_number,
        )
    )
    return result.scalar_one_or_none()


async def upsert(session: AsyncSession, row: dict) -> None:
    """Insert or overwrite the row for ``(lottery_type, draw_number)``."""
    await _upsert(session, LotteryResultCache, row, conflict_columns=KEY_COLUMNS)


async def delete_one(session: AsyncSession, lottery_type: str, draw_number: int) -> bool:
    result = await session.execute(
        delete(LotteryResultCache).where(
            LotteryResultCache.lottery_type == lottery_type,
            LotteryResultCache.draw_number == draw_number,
        )
    )
    return result.rowcount > 0


async def delete_if_unchanged(
    session: AsyncSession, lottery_type: str, draw_number: int, fetched_at: datetime
) -> bool:
    """Delete the row only if no writer refreshed it since ``fetched_at`` was read."""
    result = await session.execute(
        delete(LotteryResultCache).where(
            LotteryResultCache.lottery_type == lottery_type,
            LotteryResultCache.draw_number == draw_number,
            LotteryResultCache.fetched_at == fetched_at,
        )
    )
    return result.rowcount > 0


async def scan(session: AsyncSession) -> list[LotteryResultCache]:
    result = await session.execute(
        select(LotteryResultCache).order_by(
            LotteryResultCache.lottery_type, LotteryResultCache.draw_number
        )
    )
    return list(result.scalars().all())
