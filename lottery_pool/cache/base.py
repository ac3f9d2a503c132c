"""Cache tier interface shared by the ephemeral and durable layers."""

from abc import ABC, abstractmethod
from typing import NamedTuple

from lottery_pool.schemas.draw import CacheEntry


class CacheKey(NamedTuple):
    lottery_type: str
    draw_number: int

    def __str__(self) -> str:
        return f"lottery_{self.lottery_type}_{self.draw_number}"


class CacheTier(ABC):
    """Key-value store of CacheEntry objects keyed by (lottery_type, draw_number)."""

    name: str = ""

    @abstractmethod
    async def get(self, key: CacheKey) -> CacheEntry | None:
        """Return the live entry for ``key`` or None."""
        ...

    @abstractmethod
    async def set(self, key: CacheKey, entry: CacheEntry) -> None:
        """Write ``entry``, replacing whatever is stored under ``key``."""
        ...

    @abstractmethod
    async def delete(self, key: CacheKey) -> bool:
        ...

    @abstractmethod
    async def scan(self) -> list[tuple[CacheKey, CacheEntry]]:
        """Every stored entry, expired or not."""
        ...

    @abstractmethod
    async def cleanup(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        ...
