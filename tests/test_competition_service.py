from datetime import date

import pytest

from lottery_pool.services.competition_service import (
    create_competition_for_pool,
    period_window,
)


@pytest.mark.parametrize("period, today, expected", [
    ("mensal", date(2024, 2, 10), (date(2024, 2, 1), date(2024, 2, 29), "Ranking fevereiro de 2024")),
    ("trimestral", date(2025, 5, 15), (date(2025, 4, 1), date(2025, 6, 30), "Ranking Q2/2025")),
    ("semestral", date(2025, 8, 1), (date(2025, 7, 1), date(2025, 12, 31), "Ranking 2º Semestre 2025")),
    ("anual", date(2025, 3, 3), (date(2025, 1, 1), date(2025, 12, 31), "Ranking 2025")),
])
def test_period_window(period, today, expected):
    assert period_window(period, today) == expected


def test_unknown_period():
    with pytest.raises(ValueError):
        period_window("semanal", date(2025, 1, 1))


async def test_create_competition_for_pool(session_factory, seeded):
    async with session_factory() as session:
        competition = await create_competition_for_pool(
            session, seeded["pool_id"], "trimestral", date(2025, 7, 20)
        )
        await session.commit()

    assert competition.id is not None
    assert competition.lottery_type == "megasena"
    assert competition.start_date == date(2025, 7, 1)
    assert competition.end_date == date(2025, 9, 30)
    assert competition.points_per_hit == 1
    assert competition.bonus_points == {"sena": 1000, "quina": 500, "quadra": 100}


async def test_create_competition_for_missing_pool(session_factory):
    async with session_factory() as session:
        with pytest.raises(LookupError):
            await create_competition_for_pool(session, 404, "mensal", date(2025, 7, 20))
