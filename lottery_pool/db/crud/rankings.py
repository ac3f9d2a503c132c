"""CRUD operations for competition standings."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from lottery_pool.db.models.competition import CompetitionRanking


async def list_for_competition(session: AsyncSession, competition_id: int) -> list[CompetitionRanking]:
    result = await session.execute(
        select(CompetitionRanking)
        .where(CompetitionRanking.competition_id == competition_id)
        .order_by(CompetitionRanking.current_rank, CompetitionRanking.participant_id)
    )
    return list(result.scalars().all())


async def previous_ranks(session: AsyncSession, competition_id: int) -> dict[int, int]:
    result = await session.execute(
        select(CompetitionRanking.participant_id, CompetitionRanking.current_rank).where(
            CompetitionRanking.competition_id == competition_id
        )
    )
    return {participant_id: rank for participant_id, rank in result.all()}


async def replace_all(session: AsyncSession, competition_id: int, rows: list[dict]) -> None:
    """Swap the whole standings table of a competition inside the caller's transaction."""
    await session.execute(
        delete(CompetitionRanking).where(CompetitionRanking.competition_id == competition_id)
    )
    # rows must be visible to the following insert on the same key
    await session.flush()
    session.add_all(CompetitionRanking(**row) for row in rows)
    await session.flush()
