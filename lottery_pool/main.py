"""FastAPI application entry point."""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from lottery_pool.config import settings

# Configure loguru
logger.remove()
logger.add(sys.stderr, level="DEBUG" if settings.DEBUG else "INFO")
logger.add("logs/app.log", rotation="10 MB", retention="7 days", level="INFO")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("Starting {} ...", settings.APP_NAME)

    from lottery_pool.db.base import Base
    from lottery_pool.db.engine import engine
    import lottery_pool.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # cleanup also runs once at startup
    if settings.SCHEDULER_ENABLED:
        try:
            from lottery_pool.scheduler import start_scheduler
            start_scheduler()
        except Exception as e:
            logger.warning("Failed to start scheduler: {}", e)

    yield

    if settings.SCHEDULER_ENABLED:
        from lottery_pool.scheduler import stop_scheduler
        stop_scheduler()

    await engine.dispose()
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="Lottery pool result acquisition and competition scoring",
    lifespan=lifespan,
)

from lottery_pool.api.errors import register_exception_handlers  # noqa: E402
from lottery_pool.api.v1.router import api_router  # noqa: E402

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok", "app": settings.APP_NAME}
