"""Competition, per-draw score and ranking ORM models."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from lottery_pool.db.base import Base


class Competition(Base):
    """A scored window over which a pool's participants accumulate points."""

    __tablename__ = "competitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pool_id: Mapped[int] = mapped_column(ForeignKey("pools.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    period: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    lottery_type: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ativa")
    points_per_hit: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bonus_points: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    pool = relationship("Pool")

    def __repr__(self) -> str:
        return f"<Competition id={self.id} {self.name} {self.start_date}..{self.end_date}>"


class ParticipantDrawScore(Base):
    """One row per (participant, competition, draw)."""

    __tablename__ = "participant_draw_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    participant_id: Mapped[int] = mapped_column(
        ForeignKey("participants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    competition_id: Mapped[int] = mapped_column(
        ForeignKey("competitions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    lottery_result_id: Mapped[str] = mapped_column(String(40), nullable=False)
    total_hits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hit_breakdown: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    total_games_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    prize_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    prize_tier: Mapped[str | None] = mapped_column(String(40), nullable=True)
    draw_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint(
            "participant_id", "competition_id", "lottery_result_id",
            name="uq_participant_draw_scores_key",
        ),
    )


class CompetitionRanking(Base):
    """Derived standings row; recomputed in full on every processed draw."""

    __tablename__ = "competition_rankings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    participant_id: Mapped[int] = mapped_column(
        ForeignKey("participants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    competition_id: Mapped[int] = mapped_column(
        ForeignKey("competitions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_hits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_games_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_prize_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    current_rank: Mapped[int] = mapped_column(Integer, nullable=False)
    rank_change: Mapped[int | None] = mapped_column(Integer, nullable=True)
    average_hits_per_draw: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("participant_id", "competition_id", name="uq_competition_rankings_key"),
    )

    def __repr__(self) -> str:
        return f"<CompetitionRanking comp={self.competition_id} participant={self.participant_id} rank={self.current_rank}>"
