"""Pydantic schemas for draw results and cache entries."""

from datetime import date, datetime, timedelta
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class DrawResult(BaseModel):
    """Canonical, immutable draw result."""

    model_config = ConfigDict(frozen=True)

    lottery_type: str
    draw_number: int
    draw_date: date
    numbers: tuple[int, ...]
    accumulated: bool = False
    winner_count_by_tier: dict[int, int] = Field(default_factory=dict)
    prize_value_by_tier: dict[int, Decimal] = Field(default_factory=dict)
    next_draw_number: int | None = None
    next_draw_date: date | None = None
    next_estimated_prize: Decimal | None = None
    raw: dict = Field(default_factory=dict, repr=False)

    @property
    def result_id(self) -> str:
        return f"{self.lottery_type}-{self.draw_number}"

    @property
    def total_winners(self) -> int:
        return sum(self.winner_count_by_tier.values())


class CacheEntry(BaseModel):
    """A cached draw result with its fetch time and frozen completion flag."""

    model_config = ConfigDict(frozen=True)

    result: DrawResult
    fetched_at: datetime
    is_completed: bool

    def ttl(self, completed_ttl: timedelta, pending_ttl: timedelta) -> timedelta:
        return completed_ttl if self.is_completed else pending_ttl

    def expires_at(self, completed_ttl: timedelta, pending_ttl: timedelta) -> datetime:
        return self.fetched_at + self.ttl(completed_ttl, pending_ttl)

    def is_expired(self, now: datetime, completed_ttl: timedelta, pending_ttl: timedelta) -> bool:
        return (now - self.fetched_at) > self.ttl(completed_ttl, pending_ttl)


class DrawStatus(BaseModel):
    has_occurred: bool
    is_pending: bool
    is_today: bool
    days_until: int
    message: str


class DrawLookup(BaseModel):
    """Result resolved for a target calendar date."""

    result: DrawResult
    status: DrawStatus
    exact_match: bool
