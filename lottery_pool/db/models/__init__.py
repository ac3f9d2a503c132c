"""ORM models package."""

from lottery_pool.db.models.draw_cache import LotteryResultCache
from lottery_pool.db.models.pool import Pool, Participant, Ticket
from lottery_pool.db.models.competition import (
    Competition,
    ParticipantDrawScore,
    CompetitionRanking,
)

__all__ = [
    "LotteryResultCache",
    "Pool",
    "Participant",
    "Ticket",
    "Competition",
    "ParticipantDrawScore",
    "CompetitionRanking",
]
