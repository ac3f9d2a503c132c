"""Competition scoring and ranking API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from lottery_pool.api.deps import get_db, get_orchestrator, get_processor
from lottery_pool.cache.orchestrator import ResultOrchestrator
from lottery_pool.db.crud import competitions as competition_crud
from lottery_pool.errors import CompetitionNotFound
from lottery_pool.schemas.ranking import (
    CompetitionSchema,
    CreateCompetitionRequest,
    ProcessDrawRequest,
    ProcessDrawResponse,
    RankingSchema,
    ScoreSchema,
)
from lottery_pool.scoring.processor import DrawProcessor
from lottery_pool.services.competition_service import PERIODS, create_competition_for_pool
from lottery_pool.services.draw_calendar import local_today
from lottery_pool.services.results_service import process_draw

router = APIRouter()


@router.post("", response_model=CompetitionSchema, status_code=201)
async def create_competition(
    request: CreateCompetitionRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create a competition for the current period of a pool."""
    if request.period not in PERIODS:
        raise HTTPException(status_code=400, detail=f"Invalid period. Valid: {PERIODS}")
    try:
        return await create_competition_for_pool(db, request.pool_id, request.period, local_today())
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{competition_id}/draws", response_model=ProcessDrawResponse)
async def process_competition_draw(
    competition_id: int,
    request: ProcessDrawRequest,
    db: AsyncSession = Depends(get_db),
    orchestrator: ResultOrchestrator = Depends(get_orchestrator),
    processor: DrawProcessor = Depends(get_processor),
):
    """Fold a draw into the competition: score every participant, re-rank."""
    competition = await competition_crud.get(db, competition_id)
    if competition is None:
        raise CompetitionNotFound(competition_id)
    processed = await process_draw(
        orchestrator, processor, competition_id, competition.lottery_type, request.draw_number
    )
    return ProcessDrawResponse(
        competition_id=processed.competition_id,
        lottery_result_id=processed.lottery_result_id,
        scores=[ScoreSchema.model_validate(s) for s in processed.scores],
        ranking=[RankingSchema.model_validate(r) for r in processed.ranking],
    )


@router.post("/{competition_id}/ranking/recompute", response_model=list[RankingSchema])
async def recompute_competition_ranking(
    competition_id: int,
    processor: DrawProcessor = Depends(get_processor),
):
    return await processor.recompute_ranking(competition_id)


@router.get("/{competition_id}/ranking", response_model=list[RankingSchema])
async def competition_ranking(
    competition_id: int,
    processor: DrawProcessor = Depends(get_processor),
):
    """Current standings ordered by rank."""
    return await processor.get_ranking(competition_id)


@router.get(
    "/{competition_id}/participants/{participant_id}/scores",
    response_model=list[ScoreSchema],
)
async def participant_score_history(
    competition_id: int,
    participant_id: int,
    processor: DrawProcessor = Depends(get_processor),
):
    """Per-draw scores of one participant, newest draw first."""
    return await processor.get_score_history(participant_id, competition_id)
