"""Competition creation and period windows."""

import calendar
from datetime import date

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from lottery_pool.db.crud import competitions as crud
from lottery_pool.db.models.competition import Competition
from lottery_pool.lotteries import get_rules

PERIODS = ("mensal", "trimestral", "semestral", "anual")

MONTH_NAMES = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)


def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def period_window(period: str, today: date) -> tuple[date, date, str]:
    """Return ``(start, end, name)`` of the period containing ``today``."""
    year = today.year
    if period == "mensal":
        start = date(year, today.month, 1)
        end = _month_end(year, today.month)
        name = f"Ranking {MONTH_NAMES[today.month - 1]} de {year}"
    elif period == "trimestral":
        quarter = (today.month - 1) // 3
        start = date(year, quarter * 3 + 1, 1)
        end = _month_end(year, quarter * 3 + 3)
        name = f"Ranking Q{quarter + 1}/{year}"
    elif period == "semestral":
        semester = 0 if today.month <= 6 else 1
        start = date(year, semester * 6 + 1, 1)
        end = _month_end(year, semester * 6 + 6)
        name = f"Ranking {semester + 1}º Semestre {year}"
    elif period == "anual":
        start = date(year, 1, 1)
        end = date(year, 12, 31)
        name = f"Ranking {year}"
    else:
        raise ValueError(f"Unknown period: {period}. Valid: {PERIODS}")
    return start, end, name


async def create_competition_for_pool(
    session: AsyncSession,
    pool_id: int,
    period: str,
    today: date,
) -> Competition:
    """Create a competition covering the current ``period`` for a pool.

    Points per hit default to 1 and bonuses to the lottery's defaults.
    """
    pool = await crud.get_pool(session, pool_id)
    if pool is None:
        raise LookupError(f"Pool not found: {pool_id}")
    rules = get_rules(pool.lottery_type)
    start, end, name = period_window(period, today)

    competition = await crud.create(session, {
        "pool_id": pool.id,
        "name": name,
        "description": f"Automatic {period} competition",
        "period": period,
        "start_date": start,
        "end_date": end,
        "lottery_type": rules.key,
        "status": "ativa",
        "points_per_hit": 1,
        "bonus_points": dict(rules.default_bonus),
    })
    logger.info("Competition created: {} ({}) for pool {}", name, competition.id, pool_id)
    return competition
