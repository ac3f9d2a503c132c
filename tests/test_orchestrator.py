from datetime import date

import pytest

from lottery_pool.cache.base import CacheKey
from lottery_pool.errors import MalformedResponse, ProviderUnavailable
from tests.conftest import BASE_URL
from tests.fakes import FakeResponse, megasena_payload

LATEST_URL = f"{BASE_URL}/megasena/latest"


def draw_url(n: int) -> str:
    return f"{BASE_URL}/megasena/{n}"


async def test_cache_hit_skips_provider(orchestrator, fake_session):
    fake_session.add(draw_url(2900), megasena_payload())
    first = await orchestrator.get_or_fetch("megasena", 2900)
    second = await orchestrator.get_or_fetch("megasena", 2900)

    assert first == second
    assert fake_session.count(draw_url(2900)) == 1


async def test_miss_writes_through_both_tiers(orchestrator, fake_session, memory_tier, database_tier):
    fake_session.add(draw_url(2900), megasena_payload())
    await orchestrator.get_or_fetch("megasena", 2900)

    key = CacheKey("megasena", 2900)
    assert key in memory_tier
    assert await database_tier.get(key) is not None


async def test_latest_is_always_fetched_live(orchestrator, fake_session):
    fake_session.add(LATEST_URL, megasena_payload())

    await orchestrator.get_or_fetch("megasena")
    await orchestrator.get_or_fetch("megasena")
    assert fake_session.count(LATEST_URL) == 2

    # the numbered draw was written through
    await orchestrator.get_or_fetch("megasena", 2900)
    assert fake_session.count(draw_url(2900)) == 0


async def test_provider_outage_raises_and_caches_nothing(orchestrator, fake_session, database_tier):
    fake_session.add(draw_url(2900), FakeResponse(status=500))

    with pytest.raises(ProviderUnavailable):
        await orchestrator.get_or_fetch("megasena", 2900)

    assert await database_tier.scan() == []


async def test_malformed_answer_raises_and_caches_nothing(orchestrator, fake_session, database_tier):
    fake_session.add(draw_url(2900), megasena_payload(dezenas=["01"]))

    with pytest.raises(MalformedResponse):
        await orchestrator.get_or_fetch("megasena", 2900)

    assert await database_tier.scan() == []


async def test_date_near_latest_uses_latest(orchestrator, fake_session):
    fake_session.add(LATEST_URL, megasena_payload())

    lookup = await orchestrator.get_for_date("megasena", date(2025, 7, 15))

    assert lookup.exact_match is True
    assert lookup.result.draw_number == 2900
    assert lookup.status.has_occurred is True
    assert fake_session.calls == [LATEST_URL]


async def test_date_far_in_the_past_probes_estimated_draw(orchestrator, fake_session):
    fake_session.add(LATEST_URL, megasena_payload())
    # 48 days back at three draws a week
    fake_session.add(draw_url(2879), megasena_payload(draw_number=2879, draw_date="31/05/2025"))

    lookup = await orchestrator.get_for_date("megasena", date(2025, 6, 1))

    assert lookup.exact_match is True
    assert lookup.result.draw_number == 2879
    assert lookup.status.days_until == -49
    assert lookup.status.message == "Draw took place 49 days ago"


async def test_date_probe_falls_back_to_latest(orchestrator, fake_session):
    fake_session.add(LATEST_URL, megasena_payload())
    # candidate answers, but with a draw far from the target
    fake_session.add(draw_url(2879), megasena_payload(draw_number=2879, draw_date="01/05/2025"))

    lookup = await orchestrator.get_for_date("megasena", date(2025, 6, 1))

    assert lookup.exact_match is False
    assert lookup.result.draw_number == 2900
    probed = [u for u in fake_session.calls if u != LATEST_URL]
    assert set(probed) == {draw_url(n) for n in (2877, 2878, 2879, 2880, 2881)}


async def test_future_date_reports_pending(orchestrator, fake_session):
    fake_session.add(LATEST_URL, megasena_payload())

    lookup = await orchestrator.get_for_date("megasena", date(2025, 7, 22))

    assert lookup.status.is_pending is True
    assert lookup.status.days_until == 2
    assert lookup.status.message == "Draw in 2 days"
    assert lookup.result.draw_number == 2900
    assert lookup.exact_match is False
    assert fake_session.calls == [LATEST_URL]


async def test_today_matches_only_a_draw_held_today(orchestrator, fake_session):
    fake_session.add(LATEST_URL, megasena_payload(), megasena_payload(draw_number=2901, draw_date="20/07/2025"))

    before = await orchestrator.get_for_date("megasena", date(2025, 7, 20))
    after = await orchestrator.get_for_date("megasena", date(2025, 7, 20))

    assert before.status.is_today is True
    assert before.exact_match is False
    assert before.result.draw_number == 2900
    assert after.exact_match is True
    assert after.result.draw_number == 2901


async def test_date_ten_days_after_latest_resolves_estimate(orchestrator, fake_session, clock):
    # provider still reports the 19/07 draw as latest on 05/08
    clock.advance(days=16)
    fake_session.add(LATEST_URL, megasena_payload())
    fake_session.add(draw_url(2904), megasena_payload(draw_number=2904, draw_date="29/07/2025"))

    lookup = await orchestrator.get_for_date("megasena", date(2025, 7, 29))

    assert lookup.exact_match is True
    assert lookup.result.draw_number == 2904
    assert fake_session.calls == [LATEST_URL, draw_url(2904)]
