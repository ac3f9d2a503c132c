"""Process-local cache tier with a fixed short TTL."""

from collections.abc import Callable
from datetime import datetime, timedelta

from cachetools import TLRUCache
from loguru import logger

from lottery_pool.cache.base import CacheKey, CacheTier
from lottery_pool.config import settings
from lottery_pool.schemas.draw import CacheEntry
from lottery_pool.services.draw_calendar import utc_now


class MemoryTier(CacheTier):
    """In-memory tier. An entry lives ``ttl_seconds`` from the moment it is
    written here, whatever the draw's completion state, but never past the
    expiry it has in the durable tier. Concurrent writers on one key: last
    write wins.
    """

    name = "ephemeral"

    def __init__(
        self,
        ttl_seconds: int | None = None,
        maxsize: int | None = None,
        clock: Callable[[], datetime] = utc_now,
        completed_ttl: timedelta | None = None,
        pending_ttl: timedelta | None = None,
    ):
        self.ttl_seconds = settings.EPHEMERAL_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.completed_ttl = (
            timedelta(seconds=settings.COMPLETED_TTL_SECONDS) if completed_ttl is None else completed_ttl
        )
        self.pending_ttl = (
            timedelta(seconds=settings.PENDING_TTL_SECONDS) if pending_ttl is None else pending_ttl
        )
        self._store: TLRUCache = TLRUCache(
            maxsize=settings.EPHEMERAL_MAX_SIZE if maxsize is None else maxsize,
            ttu=self._time_to_use,
            timer=lambda: clock().timestamp(),
        )

    def _time_to_use(self, key: CacheKey, entry: CacheEntry, now: float) -> float:
        durable_expiry = entry.expires_at(self.completed_ttl, self.pending_ttl).timestamp()
        return min(now + self.ttl_seconds, durable_expiry)

    async def get(self, key: CacheKey) -> CacheEntry | None:
        return self._store.get(key)

    async def set(self, key: CacheKey, entry: CacheEntry) -> None:
        self._store[key] = entry

    async def delete(self, key: CacheKey) -> bool:
        return self._store.pop(key, None) is not None

    async def scan(self) -> list[tuple[CacheKey, CacheEntry]]:
        return list(self._store.items())

    async def cleanup(self) -> int:
        removed = len(self._store.expire())
        if removed:
            logger.debug("Ephemeral cache cleanup: {} entries removed", removed)
        return removed

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._store
