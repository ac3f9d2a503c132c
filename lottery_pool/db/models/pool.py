"""Pool, participant and ticket ORM models."""

from datetime import date, datetime

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from lottery_pool.db.base import Base


class Pool(Base):
    __tablename__ = "pools"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    lottery_type: Mapped[str] = mapped_column(String(20), nullable=False)
    draw_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ativo")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    participants: Mapped[list["Participant"]] = relationship(
        back_populates="pool", cascade="all, delete-orphan", order_by="Participant.id"
    )
    tickets: Mapped[list["Ticket"]] = relationship(
        back_populates="pool", cascade="all, delete-orphan", order_by="Ticket.id"
    )

    def __repr__(self) -> str:
        return f"<Pool id={self.id} lottery={self.lottery_type}>"


class Participant(Base):
    __tablename__ = "participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pool_id: Mapped[int] = mapped_column(ForeignKey("pools.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pendente")

    pool: Mapped["Pool"] = relationship(back_populates="participants")


class Ticket(Base):
    """A pool's ticket; ``numbers`` is a flat list split into fixed-size games."""

    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pool_id: Mapped[int] = mapped_column(ForeignKey("pools.id", ondelete="CASCADE"), nullable=False, index=True)
    ticket_number: Mapped[str] = mapped_column(String(50), nullable=False)
    numbers: Mapped[list[int]] = mapped_column(JSON, nullable=False)

    pool: Mapped["Pool"] = relationship(back_populates="tickets")

    def __repr__(self) -> str:
        return f"<Ticket {self.ticket_number} pool={self.pool_id} n={len(self.numbers or [])}>"
