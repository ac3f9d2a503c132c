"""Two-tier draw result cache: ephemeral first, durable second."""

from collections.abc import Callable
from datetime import datetime

from loguru import logger

from lottery_pool.cache.base import CacheKey, CacheTier
from lottery_pool.errors import StorageError
from lottery_pool.lotteries import get_rules
from lottery_pool.schemas.draw import CacheEntry, DrawResult
from lottery_pool.services.draw_calendar import is_draw_completed, utc_now


class TieredCache:
    """Composes an ephemeral and a durable tier.

    Reads check the ephemeral tier, then the durable one, promoting durable
    hits. Writes go to both. A StorageError from either tier is logged and
    treated as a miss (or a skipped write); it never reaches the caller.
    """

    def __init__(
        self,
        ephemeral: CacheTier,
        durable: CacheTier,
        clock: Callable[[], datetime] = utc_now,
        tz_name: str | None = None,
    ):
        self.ephemeral = ephemeral
        self.durable = durable
        self._clock = clock
        self._tz_name = tz_name

    async def _read(self, tier: CacheTier, key: CacheKey) -> CacheEntry | None:
        try:
            return await tier.get(key)
        except StorageError as e:
            logger.warning("{} cache read failed, treating as miss: {}", tier.name, e)
            return None

    async def _write(self, tier: CacheTier, key: CacheKey, entry: CacheEntry) -> None:
        try:
            await tier.set(key, entry)
        except StorageError as e:
            logger.error("{} cache write failed for {}: {}", tier.name, key, e)

    async def get(self, lottery_type: str, draw_number: int) -> CacheEntry | None:
        get_rules(lottery_type)
        key = CacheKey(lottery_type, draw_number)

        entry = await self._read(self.ephemeral, key)
        if entry is not None:
            logger.debug("Ephemeral cache hit: {}", key)
            return entry

        entry = await self._read(self.durable, key)
        if entry is not None:
            logger.debug("Durable cache hit, promoting: {}", key)
            await self._write(self.ephemeral, key, entry)
            return entry

        logger.debug("Cache miss: {}", key)
        return None

    async def set(self, result: DrawResult) -> CacheEntry:
        """Write-through to both tiers. The completion flag is frozen now."""
        now = self._clock()
        entry = CacheEntry(
            result=result,
            fetched_at=now,
            is_completed=is_draw_completed(result.draw_date, now, self._tz_name),
        )
        key = CacheKey(result.lottery_type, result.draw_number)
        await self._write(self.ephemeral, key, entry)
        await self._write(self.durable, key, entry)
        logger.debug("Cached {} (completed={})", key, entry.is_completed)
        return entry

    async def remove(self, lottery_type: str, draw_number: int) -> None:
        key = CacheKey(lottery_type, draw_number)
        await self.ephemeral.delete(key)
        try:
            await self.durable.delete(key)
        except StorageError as e:
            logger.error("Durable cache delete failed for {}: {}", key, e)
        logger.info("Removed {} from cache", key)

    async def cleanup(self) -> int:
        """Purge expired entries from both tiers. Idempotent."""
        removed = await self.ephemeral.cleanup()
        try:
            removed += await self.durable.cleanup()
        except StorageError as e:
            logger.error("Durable cache cleanup failed: {}", e)
        return removed
