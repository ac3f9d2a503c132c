"""Pydantic schemas for competitions, scores and rankings."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel


class ScoreSchema(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    participant_id: int
    competition_id: int
    lottery_result_id: str
    total_hits: int
    hit_breakdown: dict[str, int]
    total_games_played: int
    points_earned: int
    prize_value: Decimal
    prize_tier: str | None
    draw_date: date


class RankingSchema(BaseModel):
    model_config = {"from_attributes": True}

    participant_id: int
    competition_id: int
    total_points: int
    total_hits: int
    total_games_played: int
    total_prize_value: Decimal
    current_rank: int
    rank_change: int | None
    average_hits_per_draw: float
    last_updated: datetime


class CompetitionSchema(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    pool_id: int
    name: str
    period: str
    start_date: date
    end_date: date
    lottery_type: str
    status: str
    points_per_hit: int
    bonus_points: dict[str, int] | None


class CreateCompetitionRequest(BaseModel):
    pool_id: int
    period: str = "mensal"


class ProcessDrawRequest(BaseModel):
    draw_number: int


class ProcessDrawResponse(BaseModel):
    competition_id: int
    lottery_result_id: str
    scores: list[ScoreSchema]
    ranking: list[RankingSchema]
