import os

os.environ.setdefault("SCHEDULER_ENABLED", "false")

from datetime import date, datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from lottery_pool.cache.durable import DatabaseTier  # noqa: E402
from lottery_pool.cache.ephemeral import MemoryTier  # noqa: E402
from lottery_pool.cache.orchestrator import ResultOrchestrator  # noqa: E402
from lottery_pool.cache.tiered import TieredCache  # noqa: E402
from lottery_pool.db.base import Base  # noqa: E402
from lottery_pool.db.models import Competition, Participant, Pool, Ticket  # noqa: E402
from lottery_pool.provider.client import DrawResultClient  # noqa: E402
from lottery_pool.provider.retry import RetryPolicy  # noqa: E402
from lottery_pool.scoring.processor import DrawProcessor  # noqa: E402
from tests.fakes import FakeSession, FrozenClock, SleepRecorder  # noqa: E402

BASE_URL = "https://provider.test/api"


@pytest.fixture
def clock():
    # 12:00 in São Paulo
    return FrozenClock(datetime(2025, 7, 20, 15, 0, tzinfo=timezone.utc))


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def client(fake_session, sleeps):
    return DrawResultClient(
        base_url=BASE_URL,
        policy=RetryPolicy(max_retries=2, base_delay=1.0, max_delay=3.0, timeout=5.0),
        session=fake_session,
        sleep=sleeps,
    )


@pytest.fixture
def memory_tier(clock):
    return MemoryTier(ttl_seconds=7200, maxsize=128, clock=clock)


@pytest.fixture
def database_tier(session_factory, clock):
    return DatabaseTier(session_factory, clock=clock)


@pytest.fixture
def cache(memory_tier, database_tier, clock):
    return TieredCache(memory_tier, database_tier, clock=clock, tz_name="America/Sao_Paulo")


@pytest.fixture
def orchestrator(cache, client, clock):
    return ResultOrchestrator(cache, client, clock=clock, match_window_days=7, probe_radius=2)


@pytest.fixture
def processor(session_factory, clock):
    return DrawProcessor(session_factory, clock=clock)


@pytest.fixture
async def seeded(session_factory):
    """A Mega-Sena pool with three participants, one 12-number ticket and a
    July 2025 competition.
    """
    async with session_factory() as session:
        pool = Pool(name="Bolão da firma", lottery_type="megasena", status="ativo")
        pool.participants = [
            Participant(name="Ana", status="confirmado"),
            Participant(name="Bruno", status="confirmado"),
            Participant(name="Carla", status="confirmado"),
        ]
        # game 1 hits 4, 17, 23, 39, 42 (quina); game 2 hits 56 only
        pool.tickets = [
            Ticket(ticket_number="1", numbers=[4, 17, 23, 39, 42, 1, 56, 2, 3, 5, 6, 7]),
        ]
        session.add(pool)
        await session.flush()

        competition = Competition(
            pool_id=pool.id,
            name="Ranking julho de 2025",
            period="mensal",
            start_date=date(2025, 7, 1),
            end_date=date(2025, 7, 31),
            lottery_type="megasena",
            status="ativa",
            points_per_hit=1,
            bonus_points={"sena": 1000, "quina": 500, "quadra": 100},
        )
        session.add(competition)
        await session.commit()
        return {
            "pool_id": pool.id,
            "competition_id": competition.id,
            "participant_ids": [p.id for p in pool.participants],
        }
