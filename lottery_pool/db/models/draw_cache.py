"""Durable draw-result cache ORM model."""

from datetime import date, datetime

from sqlalchemy import JSON, Boolean, Date, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from lottery_pool.db.base import Base


class LotteryResultCache(Base):
    """One sanitized provider response per (lottery_type, draw_number)."""

    __tablename__ = "lottery_results_cache"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lottery_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    draw_number: Mapped[int] = mapped_column(Integer, nullable=False)
    draw_date: Mapped[date] = mapped_column(Date, nullable=False)
    response: Mapped[dict] = mapped_column(JSON, nullable=False)
    # frozen at write time
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    fetched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("lottery_type", "draw_number", name="uq_lottery_results_cache_key"),
    )

    def __repr__(self) -> str:
        return f"<LotteryResultCache {self.lottery_type}#{self.draw_number} completed={self.is_completed}>"
