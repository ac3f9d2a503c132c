"""Aggregate API v1 router."""

from fastapi import APIRouter

from lottery_pool.api.v1.endpoints import competitions, results

api_router = APIRouter()

api_router.include_router(results.router, prefix="/results", tags=["results"])
api_router.include_router(competitions.router, prefix="/competitions", tags=["competitions"])
