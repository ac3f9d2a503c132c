"""Public entry point for draw results: cache first, provider on a miss."""

from collections.abc import Callable
from datetime import date, datetime

from loguru import logger

from lottery_pool.cache.tiered import TieredCache
from lottery_pool.config import settings
from lottery_pool.errors import MalformedResponse, ProviderUnavailable
from lottery_pool.lotteries import get_rules
from lottery_pool.provider.client import DrawResultClient
from lottery_pool.schemas.draw import DrawLookup, DrawResult
from lottery_pool.services.draw_calendar import (
    draw_status,
    estimate_draw_number,
    local_today,
    probe_sequence,
    utc_now,
)


class ResultOrchestrator:
    """Resolves draw results through the tiered cache and the provider.

    "Latest" is never served from cache: its prize estimate and winner
    counts may still change, so it is always fetched live (and the numbered
    result is then written through). Provider errors propagate; nothing is
    ever substituted for a real result.
    """

    def __init__(
        self,
        cache: TieredCache,
        client: DrawResultClient,
        clock: Callable[[], datetime] = utc_now,
        match_window_days: int | None = None,
        probe_radius: int | None = None,
    ):
        self.cache = cache
        self.client = client
        self._clock = clock
        self.match_window_days = (
            settings.DATE_MATCH_WINDOW_DAYS if match_window_days is None else match_window_days
        )
        self.probe_radius = settings.DATE_PROBE_RADIUS if probe_radius is None else probe_radius

    async def fetch_latest(self, lottery_type: str) -> DrawResult:
        get_rules(lottery_type)
        result = await self.client.fetch_latest(lottery_type)
        await self.cache.set(result)
        return result

    async def get_or_fetch(self, lottery_type: str, draw_number: int | None = None) -> DrawResult:
        """Return the draw ``draw_number`` (or the latest draw when omitted)."""
        if draw_number is None:
            return await self.fetch_latest(lottery_type)

        entry = await self.cache.get(lottery_type, draw_number)
        if entry is not None:
            return entry.result

        result = await self.client.fetch_by_draw_number(lottery_type, draw_number)
        await self.cache.set(result)
        return result

    def _within_window(self, result: DrawResult, target_date: date) -> bool:
        return abs((result.draw_date - target_date).days) <= self.match_window_days

    async def get_for_date(self, lottery_type: str, target_date: date) -> DrawLookup:
        """Resolve the draw held on or near ``target_date``.

        For a target today or in the future only the latest draw is
        considered, and it is an exact match only if it was held on the target
        date. For past targets, tries the latest draw first, then probes draw
        numbers estimated from the lottery cadence (estimate, +-1, +-2). Falls
        back to the latest draw when no candidate lands within the match window.
        """
        rules = get_rules(lottery_type)
        status = draw_status(target_date, local_today(self._clock()))

        latest = await self.fetch_latest(lottery_type)
        if not status.has_occurred:
            # a draw held today or later matches only once it is published
            return DrawLookup(
                result=latest, status=status, exact_match=latest.draw_date == target_date
            )
        if self._within_window(latest, target_date):
            return DrawLookup(result=latest, status=status, exact_match=True)

        estimate = estimate_draw_number(latest.draw_number, latest.draw_date, target_date, rules)
        logger.info(
            "Target {} is {} days from latest {} draw {}; probing around {}",
            target_date, (target_date - latest.draw_date).days,
            lottery_type, latest.draw_number, estimate,
        )

        for candidate in probe_sequence(estimate, self.probe_radius):
            if candidate == latest.draw_number:
                continue
            try:
                result = await self.get_or_fetch(lottery_type, candidate)
            except (ProviderUnavailable, MalformedResponse) as e:
                logger.debug("Probe {} draw {} failed: {}", lottery_type, candidate, e)
                continue
            if self._within_window(result, target_date):
                return DrawLookup(result=result, status=status, exact_match=True)

        logger.info("No {} draw found near {}; using latest {}", lottery_type, target_date, latest.draw_number)
        return DrawLookup(result=latest, status=status, exact_match=False)
