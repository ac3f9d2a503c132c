"""CRUD operations for per-draw participant scores."""

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from lottery_pool.db.models.competition import ParticipantDrawScore
from lottery_pool.db.upsert import upsert as _upsert

KEY_COLUMNS = ["participant_id", "competition_id", "lottery_result_id"]


async def upsert(session: AsyncSession, row: dict) -> None:
    """Insert or re-derive the score for (participant, competition, draw)."""
    await _upsert(session, ParticipantDrawScore, row, conflict_columns=KEY_COLUMNS)


async def list_for_competition(session: AsyncSession, competition_id: int) -> list[ParticipantDrawScore]:
    result = await session.execute(
        select(ParticipantDrawScore)
        .where(ParticipantDrawScore.competition_id == competition_id)
        .order_by(ParticipantDrawScore.participant_id, ParticipantDrawScore.draw_date)
    )
    return list(result.scalars().all())


async def list_for_draw(
    session: AsyncSession, competition_id: int, lottery_result_id: str
) -> list[ParticipantDrawScore]:
    result = await session.execute(
        select(ParticipantDrawScore)
        .where(
            ParticipantDrawScore.competition_id == competition_id,
            ParticipantDrawScore.lottery_result_id == lottery_result_id,
        )
        .order_by(ParticipantDrawScore.participant_id)
    )
    return list(result.scalars().all())


async def history(
    session: AsyncSession, participant_id: int, competition_id: int
) -> list[ParticipantDrawScore]:
    result = await session.execute(
        select(ParticipantDrawScore)
        .where(
            ParticipantDrawScore.participant_id == participant_id,
            ParticipantDrawScore.competition_id == competition_id,
        )
        .order_by(desc(ParticipantDrawScore.draw_date), desc(ParticipantDrawScore.id))
    )
    return list(result.scalars().all())
