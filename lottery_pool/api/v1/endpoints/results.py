"""Draw result API endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from lottery_pool.api.deps import get_orchestrator
from lottery_pool.cache.orchestrator import ResultOrchestrator
from lottery_pool.errors import ResultNotFound
from lottery_pool.lotteries import get_rules
from lottery_pool.scheduler import get_scheduler_status
from lottery_pool.schemas.draw import CacheEntry, DrawLookup, DrawResult

router = APIRouter()

_EXCLUDE_RAW = {"raw"}


@router.get("/connectivity")
async def connectivity(
    lottery_type: str = Query("megasena"),
    orchestrator: ResultOrchestrator = Depends(get_orchestrator),
):
    """Provider reachability probe for diagnostics."""
    get_rules(lottery_type)
    reachable = await orchestrator.client.test_connectivity(lottery_type)
    return {"lottery_type": lottery_type, "reachable": reachable}


@router.get("/scheduler/status")
async def scheduler_status():
    """Cache cleanup job schedule."""
    return {"scheduler_jobs": get_scheduler_status()}


@router.post("/cache/cleanup")
async def cleanup_cache(orchestrator: ResultOrchestrator = Depends(get_orchestrator)):
    """Purge expired cache entries from both tiers."""
    removed = await orchestrator.cache.cleanup()
    return {"removed": removed}


@router.get(
    "/cache/{lottery_type}/{draw_number}",
    response_model=CacheEntry,
    response_model_exclude={"result": _EXCLUDE_RAW},
)
async def get_cached(
    lottery_type: str,
    draw_number: int,
    orchestrator: ResultOrchestrator = Depends(get_orchestrator),
):
    """Cached entry only; never calls the provider."""
    entry = await orchestrator.cache.get(lottery_type, draw_number)
    if entry is None:
        raise ResultNotFound(f"{lottery_type} draw {draw_number} is not cached")
    return entry


@router.delete("/cache/{lottery_type}/{draw_number}")
async def remove_cached(
    lottery_type: str,
    draw_number: int,
    orchestrator: ResultOrchestrator = Depends(get_orchestrator),
):
    """Invalidate one cached draw in both tiers."""
    get_rules(lottery_type)
    await orchestrator.cache.remove(lottery_type, draw_number)
    return {"lottery_type": lottery_type, "draw_number": draw_number, "removed": True}


@router.get("/{lottery_type}/latest", response_model=DrawResult, response_model_exclude=_EXCLUDE_RAW)
async def latest_result(
    lottery_type: str,
    orchestrator: ResultOrchestrator = Depends(get_orchestrator),
):
    """Most recent draw, always fetched live."""
    return await orchestrator.get_or_fetch(lottery_type)


@router.get("/{lottery_type}/by-date", response_model=DrawLookup, response_model_exclude={"result": _EXCLUDE_RAW})
async def result_by_date(
    lottery_type: str,
    target: date = Query(..., description="Scheduled draw date (YYYY-MM-DD)"),
    orchestrator: ResultOrchestrator = Depends(get_orchestrator),
):
    """Draw held on or near a calendar date, with the date's draw status."""
    return await orchestrator.get_for_date(lottery_type, target)


@router.get("/{lottery_type}/{draw_number}", response_model=DrawResult, response_model_exclude=_EXCLUDE_RAW)
async def result_by_number(
    lottery_type: str,
    draw_number: int,
    orchestrator: ResultOrchestrator = Depends(get_orchestrator),
):
    """One draw by number, served from cache when available."""
    return await orchestrator.get_or_fetch(lottery_type, draw_number)
