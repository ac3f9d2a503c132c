from sqlalchemy import text

from lottery_pool.db.engine import build_engine


async def test_sqlite_url_builds_without_pool_options():
    engine = build_engine("sqlite+aiosqlite://")
    try:
        async with engine.connect() as conn:
            assert (await conn.execute(text("select 1"))).scalar() == 1
    finally:
        await engine.dispose()


def test_postgres_url_gets_pool_options():
    engine = build_engine("postgresql+asyncpg://u:p@localhost:5432/db")
    assert engine.pool.size() == 5
