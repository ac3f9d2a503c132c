import httpx
import pytest

from lottery_pool.api.deps import get_db, get_orchestrator, get_processor
from lottery_pool.main import app
from tests.conftest import BASE_URL
from tests.fakes import FakeResponse, megasena_payload

LATEST_URL = f"{BASE_URL}/megasena/latest"


@pytest.fixture
async def api(session_factory, orchestrator, processor):
    async def override_db():
        async with session_factory() as session:
            yield session
            await session.commit()

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_processor] = lambda: processor

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def test_latest_result(api, fake_session):
    fake_session.add(LATEST_URL, megasena_payload())

    resp = await api.get("/api/v1/results/megasena/latest")

    assert resp.status_code == 200
    body = resp.json()
    assert body["draw_number"] == 2900
    assert body["numbers"] == [4, 17, 23, 39, 42, 56]
    assert "raw" not in body


async def test_result_by_number_served_from_cache(api, fake_session):
    fake_session.add(f"{BASE_URL}/megasena/2900", megasena_payload())

    assert (await api.get("/api/v1/results/megasena/2900")).status_code == 200
    assert (await api.get("/api/v1/results/megasena/2900")).status_code == 200
    assert fake_session.count(f"{BASE_URL}/megasena/2900") == 1


async def test_unsupported_lottery_is_400(api):
    resp = await api.get("/api/v1/results/keno/latest")
    assert resp.status_code == 400
    assert resp.json()["error"] == "UnsupportedLotteryType"


async def test_provider_outage_is_503(api, fake_session):
    fake_session.add(f"{BASE_URL}/megasena/2901", FakeResponse(status=500))

    resp = await api.get("/api/v1/results/megasena/2901")

    assert resp.status_code == 503
    assert resp.json()["error"] == "ProviderUnavailable"


async def test_malformed_answer_is_502(api, fake_session):
    fake_session.add(f"{BASE_URL}/megasena/2901", megasena_payload(draw_number=2901, dezenas=["99"]))

    resp = await api.get("/api/v1/results/megasena/2901")

    assert resp.status_code == 502


async def test_result_by_date(api, fake_session):
    fake_session.add(LATEST_URL, megasena_payload())

    resp = await api.get("/api/v1/results/megasena/by-date", params={"target": "2025-07-15"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["exact_match"] is True
    assert body["result"]["draw_number"] == 2900
    assert body["status"]["has_occurred"] is True


async def test_cache_maintenance(api, fake_session):
    fake_session.add(f"{BASE_URL}/megasena/2900", megasena_payload())
    await api.get("/api/v1/results/megasena/2900")

    resp = await api.delete("/api/v1/results/cache/megasena/2900")
    assert resp.status_code == 200

    await api.get("/api/v1/results/megasena/2900")
    assert fake_session.count(f"{BASE_URL}/megasena/2900") == 2

    resp = await api.post("/api/v1/results/cache/cleanup")
    assert resp.status_code == 200
    assert resp.json() == {"removed": 0}


async def test_connectivity(api, fake_session):
    fake_session.add(LATEST_URL, megasena_payload())

    resp = await api.get("/api/v1/results/connectivity")

    assert resp.json() == {"lottery_type": "megasena", "reachable": True}


async def test_create_competition(api, seeded):
    resp = await api.post("/api/v1/competitions", json={"pool_id": seeded["pool_id"], "period": "anual"})

    assert resp.status_code == 201
    body = resp.json()
    assert body["lottery_type"] == "megasena"
    assert body["period"] == "anual"
    assert body["start_date"].endswith("-01-01")


async def test_create_competition_errors(api, seeded):
    resp = await api.post("/api/v1/competitions", json={"pool_id": seeded["pool_id"], "period": "semanal"})
    assert resp.status_code == 400

    resp = await api.post("/api/v1/competitions", json={"pool_id": 999})
    assert resp.status_code == 404


async def test_process_draw_and_read_ranking(api, fake_session, seeded):
    comp_id = seeded["competition_id"]
    pid = seeded["participant_ids"][1]
    fake_session.add(f"{BASE_URL}/megasena/2900", megasena_payload())

    resp = await api.post(f"/api/v1/competitions/{comp_id}/draws", json={"draw_number": 2900})

    assert resp.status_code == 200
    body = resp.json()
    assert body["lottery_result_id"] == "megasena-2900"
    assert len(body["scores"]) == 3
    assert body["scores"][0]["points_earned"] == 506

    ranking = (await api.get(f"/api/v1/competitions/{comp_id}/ranking")).json()
    assert [r["current_rank"] for r in ranking] == [1, 1, 1]

    history = (await api.get(f"/api/v1/competitions/{comp_id}/participants/{pid}/scores")).json()
    assert [h["lottery_result_id"] for h in history] == ["megasena-2900"]

    resp = await api.post(f"/api/v1/competitions/{comp_id}/ranking/recompute")
    assert resp.status_code == 200
    assert all(r["rank_change"] == 0 for r in resp.json())


async def test_process_draw_errors(api, fake_session, seeded):
    resp = await api.post("/api/v1/competitions/9999/draws", json={"draw_number": 2900})
    assert resp.status_code == 404

    fake_session.add(
        f"{BASE_URL}/megasena/2910",
        megasena_payload(draw_number=2910, draw_date="09/08/2025"),
    )
    resp = await api.post(
        f"/api/v1/competitions/{seeded['competition_id']}/draws", json={"draw_number": 2910}
    )
    assert resp.status_code == 409


async def test_scheduler_status_without_scheduler(api):
    resp = await api.get("/api/v1/results/scheduler/status")
    assert resp.json() == {"scheduler_jobs": []}


async def test_cached_entry_lookup(api, fake_session):
    resp = await api.get("/api/v1/results/cache/megasena/2900")
    assert resp.status_code == 404
    assert resp.json()["error"] == "ResultNotFound"

    fake_session.add(f"{BASE_URL}/megasena/2900", megasena_payload())
    await api.get("/api/v1/results/megasena/2900")

    resp = await api.get("/api/v1/results/cache/megasena/2900")
    assert resp.status_code == 200
    body = resp.json()
    assert body["is_completed"] is True
    assert body["result"]["draw_number"] == 2900
    assert "raw" not in body["result"]
