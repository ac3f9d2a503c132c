"""Competition standings: aggregate per-draw scores, rank, track rank change."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from lottery_pool.db.crud import rankings as ranking_crud
from lottery_pool.db.crud import scores as score_crud
from lottery_pool.db.models.competition import CompetitionRanking
from lottery_pool.services.draw_calendar import utc_now


class ScoreLike(Protocol):
    participant_id: int
    total_hits: int
    total_games_played: int
    points_earned: int
    prize_value: Decimal


@dataclass(frozen=True)
class ParticipantTotals:
    participant_id: int
    total_points: int
    total_hits: int
    total_games_played: int
    total_prize_value: Decimal
    draws_participated: int

    @property
    def average_hits_per_draw(self) -> float:
        if not self.draws_participated:
            return 0.0
        return round(self.total_hits / self.draws_participated, 4)


@dataclass(frozen=True)
class RankedParticipant:
    totals: ParticipantTotals
    current_rank: int
    rank_change: int | None


def aggregate_scores(scores: Iterable[ScoreLike]) -> list[ParticipantTotals]:
    """Sum every per-draw row by participant."""
    acc: dict[int, dict] = {}
    for row in scores:
        t = acc.setdefault(row.participant_id, {
            "points": 0, "hits": 0, "games": 0, "prize": Decimal("0"), "draws": 0,
        })
        t["points"] += int(row.points_earned or 0)
        t["hits"] += int(row.total_hits or 0)
        t["games"] += int(row.total_games_played or 0)
        t["prize"] += Decimal(str(row.prize_value or 0))
        t["draws"] += 1

    return [
        ParticipantTotals(
            participant_id=pid,
            total_points=t["points"],
            total_hits=t["hits"],
            total_games_played=t["games"],
            total_prize_value=t["prize"],
            draws_participated=t["draws"],
        )
        for pid, t in acc.items()
    ]


def rank_participants(
    totals: Iterable[ParticipantTotals],
    previous_ranks: dict[int, int] | None = None,
) -> list[RankedParticipant]:
    """Order by points desc, then hits desc; dense 1-based ranks.

    Participants level on both points and hits share a rank and are listed
    by participant id. ``rank_change = previous - current`` (positive means
    moved up); None for participants with no previous rank.
    """
    previous_ranks = previous_ranks or {}
    ordered = sorted(totals, key=lambda t: (-t.total_points, -t.total_hits, t.participant_id))

    ranked: list[RankedParticipant] = []
    rank = 0
    last_key = None
    for t in ordered:
        key = (t.total_points, t.total_hits)
        if key != last_key:
            rank += 1
            last_key = key
        previous = previous_ranks.get(t.participant_id)
        ranked.append(RankedParticipant(
            totals=t,
            current_rank=rank,
            rank_change=None if previous is None else previous - rank,
        ))
    return ranked


def _ranking_row(competition_id: int, r: RankedParticipant, now: datetime) -> dict:
    return {
        "participant_id": r.totals.participant_id,
        "competition_id": competition_id,
        "total_points": r.totals.total_points,
        "total_hits": r.totals.total_hits,
        "total_games_played": r.totals.total_games_played,
        "total_prize_value": r.totals.total_prize_value,
        "current_rank": r.current_rank,
        "rank_change": r.rank_change,
        "average_hits_per_draw": r.totals.average_hits_per_draw,
        "last_updated": now,
    }


async def recompute_ranking(
    session: AsyncSession,
    competition_id: int,
    now: datetime | None = None,
) -> list[CompetitionRanking]:
    """Rebuild the whole standings table of a competition from its scores.

    Runs inside the caller's transaction; the caller commits.
    """
    now = now or utc_now()
    previous = await ranking_crud.previous_ranks(session, competition_id)
    scores = await score_crud.list_for_competition(session, competition_id)
    ranked = rank_participants(aggregate_scores(scores), previous)

    await ranking_crud.replace_all(
        session, competition_id, [_ranking_row(competition_id, r, now) for r in ranked]
    )
    logger.info(
        "Ranking recomputed for competition {}: {} participants from {} score rows",
        competition_id, len(ranked), len(scores),
    )
    return await ranking_crud.list_for_competition(session, competition_id)
