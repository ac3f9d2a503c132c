"""Map engine exceptions onto HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from lottery_pool.errors import (
    CompetitionNotFound,
    DrawOutsideCompetition,
    MalformedResponse,
    ProviderUnavailable,
    ResultNotFound,
    UnsupportedLotteryType,
)

STATUS_BY_ERROR = {
    UnsupportedLotteryType: 400,
    ResultNotFound: 404,
    CompetitionNotFound: 404,
    DrawOutsideCompetition: 409,
    MalformedResponse: 502,
    ProviderUnavailable: 503,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class, status_code in STATUS_BY_ERROR.items():
        app.add_exception_handler(exc_class, _make_handler(status_code))


def _make_handler(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        if status_code >= 500:
            logger.error("{} {} failed: {!r}", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    return handler
