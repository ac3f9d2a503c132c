"""Folds a draw result into a competition: score participants, then re-rank."""

import asyncio
from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lottery_pool.db.crud import competitions as competition_crud
from lottery_pool.db.crud import rankings as ranking_crud
from lottery_pool.db.crud import scores as score_crud
from lottery_pool.db.models.competition import CompetitionRanking, ParticipantDrawScore
from lottery_pool.errors import CompetitionNotFound, DrawOutsideCompetition
from lottery_pool.schemas.draw import DrawResult
from lottery_pool.scoring.engine import score_tickets
from lottery_pool.scoring.ranking import recompute_ranking
from lottery_pool.services.draw_calendar import utc_now


@dataclass
class ProcessedDraw:
    competition_id: int
    lottery_result_id: str
    scores: list[ParticipantDrawScore]
    ranking: list[CompetitionRanking]


class DrawProcessor:
    """Serializes draw processing per competition.

    Two runs for the same competition never interleave; runs for different
    competitions proceed concurrently.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session_factory = session_factory
        self._clock = clock
        # competition id -> (lock, runs holding or waiting on it)
        self._locks: dict[int, tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def _lock_for(self, competition_id: int):
        lock, users = self._locks.get(competition_id, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[competition_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[competition_id]
            if users == 1:
                del self._locks[competition_id]
            else:
                self._locks[competition_id] = (lock, users - 1)

    async def process_draw_for_competition(
        self, competition_id: int, draw: DrawResult
    ) -> ProcessedDraw:
        """Upsert one score row per participant for ``draw``, then recompute
        the competition ranking, all in a single transaction.
        """
        async with self._lock_for(competition_id):
            async with self._session_factory() as session:
                try:
                    processed = await self._process(session, competition_id, draw)
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        logger.info(
            "Processed {} for competition {}: {} scores",
            draw.result_id, competition_id, len(processed.scores),
        )
        return processed

    async def _process(
        self, session: AsyncSession, competition_id: int, draw: DrawResult
    ) -> ProcessedDraw:
        competition = await competition_crud.get_with_pool(session, competition_id)
        if competition is None:
            raise CompetitionNotFound(competition_id)
        if competition.lottery_type != draw.lottery_type:
            raise DrawOutsideCompetition(
                f"Competition {competition_id} scores {competition.lottery_type}, "
                f"got a {draw.lottery_type} draw"
            )
        if not competition.start_date <= draw.draw_date <= competition.end_date:
            raise DrawOutsideCompetition(
                f"Draw {draw.result_id} on {draw.draw_date} is outside "
                f"{competition.start_date}..{competition.end_date}"
            )

        pool = competition.pool
        result = score_tickets(
            pool.tickets,
            draw,
            competition.lottery_type,
            base_points_per_hit=competition.points_per_hit,
            bonus_config=competition.bonus_points,
        )
        logger.debug(
            "Competition {} draw {}: {} games, {} hits, {} points",
            competition_id, draw.draw_number,
            result.total_games_played, result.total_hits, result.points_earned,
        )

        for participant in pool.participants:
            await score_crud.upsert(session, {
                "participant_id": participant.id,
                "competition_id": competition_id,
                "lottery_result_id": draw.result_id,
                "total_hits": result.total_hits,
                "hit_breakdown": result.hit_breakdown,
                "total_games_played": result.total_games_played,
                "points_earned": result.points_earned,
                "prize_value": result.prize_value,
                "prize_tier": result.prize_tier,
                "draw_date": draw.draw_date,
            })

        ranking = await recompute_ranking(session, competition_id, self._clock())
        scores = await score_crud.list_for_draw(session, competition_id, draw.result_id)
        return ProcessedDraw(
            competition_id=competition_id,
            lottery_result_id=draw.result_id,
            scores=scores,
            ranking=ranking,
        )

    async def recompute_ranking(self, competition_id: int) -> list[CompetitionRanking]:
        """Standalone full recomputation, e.g. after a score was corrected."""
        async with self._lock_for(competition_id):
            async with self._session_factory() as session:
                try:
                    if await competition_crud.get(session, competition_id) is None:
                        raise CompetitionNotFound(competition_id)
                    ranking = await recompute_ranking(session, competition_id, self._clock())
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        return ranking

    async def get_ranking(self, competition_id: int) -> list[CompetitionRanking]:
        async with self._session_factory() as session:
            return await ranking_crud.list_for_competition(session, competition_id)

    async def get_score_history(
        self, participant_id: int, competition_id: int
    ) -> list[ParticipantDrawScore]:
        async with self._session_factory() as session:
            return await score_crud.history(session, participant_id, competition_id)
