"""APScheduler job for periodic cache cleanup."""

from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from lottery_pool.config import settings

_scheduler: AsyncIOScheduler | None = None


async def _cleanup_cache():
    from lottery_pool.services.results_service import result_cache

    removed = await result_cache.cleanup()
    logger.info("Scheduled cache cleanup removed {} entries", removed)


def start_scheduler():
    """Start the scheduler; the cleanup job runs immediately and then every N hours."""
    global _scheduler
    if _scheduler is not None:
        return

    _scheduler = AsyncIOScheduler()
    _scheduler.add_job(
        _cleanup_cache, "interval",
        hours=settings.CACHE_CLEANUP_INTERVAL_HOURS,
        next_run_time=datetime.now(),
        id="cache_cleanup",
        max_instances=1,
        coalesce=True,
    )
    _scheduler.start()
    logger.info("Scheduler started with {} jobs", len(_scheduler.get_jobs()))


def stop_scheduler():
    """Shutdown the scheduler."""
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("Scheduler stopped")


def get_scheduler_status() -> list[dict]:
    """Get status of all scheduled jobs."""
    if not _scheduler:
        return []

    return [
        {
            "id": job.id,
            "next_run": str(job.next_run_time) if job.next_run_time else None,
            "trigger": str(job.trigger),
        }
        for job in _scheduler.get_jobs()
    ]
