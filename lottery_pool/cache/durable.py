"""Database-backed cache tier with completion-dependent expiry."""

from collections.abc import Callable
from datetime import datetime, timedelta

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lottery_pool.cache.base import CacheKey, CacheTier
from lottery_pool.config import settings
from lottery_pool.db.crud import draw_cache as crud
from lottery_pool.db.models.draw_cache import LotteryResultCache
from lottery_pool.errors import StorageError
from lottery_pool.provider.normalize import sanitize_payload
from lottery_pool.schemas.draw import CacheEntry, DrawResult
from lottery_pool.services.draw_calendar import as_utc, utc_now


class DatabaseTier(CacheTier):
    """Shared persistent tier.

    Entries for completed draws live ``completed_ttl``; entries written while
    the draw was still pending live ``pending_ttl``. Writes are upserts on
    ``(lottery_type, draw_number)``. Every SQLAlchemy failure surfaces as
    StorageError.
    """

    name = "durable"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        completed_ttl: timedelta | None = None,
        pending_ttl: timedelta | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session_factory = session_factory
        self.completed_ttl = (
            timedelta(seconds=settings.COMPLETED_TTL_SECONDS) if completed_ttl is None else completed_ttl
        )
        self.pending_ttl = (
            timedelta(seconds=settings.PENDING_TTL_SECONDS) if pending_ttl is None else pending_ttl
        )
        self._clock = clock

    def _is_expired(self, row: LotteryResultCache, now: datetime) -> bool:
        ttl = self.completed_ttl if row.is_completed else self.pending_ttl
        return (now - as_utc(row.fetched_at)) > ttl

    @staticmethod
    def _to_entry(row: LotteryResultCache) -> CacheEntry:
        return CacheEntry(
            result=DrawResult.model_validate(row.response),
            fetched_at=as_utc(row.fetched_at),
            is_completed=row.is_completed,
        )

    async def get(self, key: CacheKey) -> CacheEntry | None:
        try:
            async with self._session_factory() as session:
                row = await crud.get(session, key.lottery_type, key.draw_number)
                if row is None:
                    return None
                if self._is_expired(row, self._clock()):
                    logger.debug("Durable cache entry expired: {}", key)
                    await crud.delete_if_unchanged(
                        session, key.lottery_type, key.draw_number, row.fetched_at
                    )
                    await session.commit()
                    return None
                try:
                    return self._to_entry(row)
                except ValidationError as e:
                    logger.warning("Dropping unreadable durable cache row {}: {}", key, e)
                    await crud.delete_one(session, key.lottery_type, key.draw_number)
                    await session.commit()
                    return None
        except SQLAlchemyError as e:
            raise StorageError(f"Durable cache read failed for {key}: {e}") from e

    async def set(self, key: CacheKey, entry: CacheEntry) -> None:
        row = {
            "lottery_type": key.lottery_type,
            "draw_number": key.draw_number,
            "draw_date": entry.result.draw_date,
            "response": sanitize_payload(entry.result.model_dump(mode="json")),
            "is_completed": entry.is_completed,
            "fetched_at": entry.fetched_at,
        }
        try:
            async with self._session_factory() as session:
                await crud.upsert(session, row)
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Durable cache write failed for {key}: {e}") from e

    async def delete(self, key: CacheKey) -> bool:
        try:
            async with self._session_factory() as session:
                deleted = await crud.delete_one(session, key.lottery_type, key.draw_number)
                await session.commit()
                return deleted
        except SQLAlchemyError as e:
            raise StorageError(f"Durable cache delete failed for {key}: {e}") from e

    async def scan(self) -> list[tuple[CacheKey, CacheEntry]]:
        try:
            async with self._session_factory() as session:
                rows = await crud.scan(session)
        except SQLAlchemyError as e:
            raise StorageError(f"Durable cache scan failed: {e}") from e

        entries = []
        for row in rows:
            try:
                entries.append((CacheKey(row.lottery_type, row.draw_number), self._to_entry(row)))
            except ValidationError:
                logger.warning("Skipping unreadable durable cache row {}#{}", row.lottery_type, row.draw_number)
        return entries

    async def cleanup(self) -> int:
        """Delete every expired row, judged by each row's own flag and timestamp.

        A row refreshed by a concurrent writer after the scan keeps its new
        ``fetched_at`` and is left alone.
        """
        now = self._clock()
        removed = 0
        try:
            async with self._session_factory() as session:
                rows = await crud.scan(session)
                for row in rows:
                    if not self._is_expired(row, now):
                        continue
                    if await crud.delete_if_unchanged(
                        session, row.lottery_type, row.draw_number, row.fetched_at
                    ):
                        removed += 1
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Durable cache cleanup failed: {e}") from e

        if removed:
            logger.info("Durable cache cleanup: {} expired entries removed", removed)
        else:
            logger.debug("Durable cache cleanup: nothing expired")
        return removed
