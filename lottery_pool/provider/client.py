"""HTTP client for the external draw result provider.

Each call is a GET with a per-attempt timeout, retried with capped
exponential backoff on network errors, timeouts and non-2xx answers.
Malformed bodies are not retried. On failure the client raises; it never
returns placeholder numbers.
"""

import asyncio
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager

import aiohttp
from loguru import logger

from lottery_pool.config import settings
from lottery_pool.errors import (
    MalformedResponse,
    ProviderHTTPError,
    ProviderUnavailable,
)
from lottery_pool.lotteries import get_rules
from lottery_pool.provider.normalize import normalize_response
from lottery_pool.provider.retry import RetryPolicy
from lottery_pool.schemas.draw import DrawResult

LATEST = "latest"

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "lottery-pool/1.0",
}

RETRYABLE_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, ProviderHTTPError)


class DrawResultClient:
    """Fetches and normalizes draw results.

    ``session`` may be supplied to share a connection pool (or a fake in
    tests); the client never closes a session it did not open. ``sleep`` is
    awaited between retries.
    """

    def __init__(
        self,
        base_url: str | None = None,
        policy: RetryPolicy | None = None,
        session: aiohttp.ClientSession | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.base_url = (base_url or settings.PROVIDER_BASE_URL).rstrip("/")
        self.policy = policy or RetryPolicy.from_settings()
        self._session = session
        self._sleep = sleep

    @asynccontextmanager
    async def _open_session(self):
        if self._session is not None:
            yield self._session
            return
        async with aiohttp.ClientSession(headers=DEFAULT_HEADERS) as client:
            yield client

    def _url(self, lottery_type: str, draw: str) -> str:
        rules = get_rules(lottery_type)
        return f"{self.base_url}/{rules.slug}/{draw}"

    async def _get_json(self, client, url: str):
        async with client.get(
            url,
            timeout=aiohttp.ClientTimeout(total=self.policy.timeout),
        ) as resp:
            if not 200 <= resp.status < 300:
                raise ProviderHTTPError(resp.status, url)
            try:
                return await resp.json(content_type=None)
            except ValueError as exc:
                raise MalformedResponse(f"Provider body is not valid JSON: {exc}") from exc

    async def _request(self, url: str, policy: RetryPolicy | None = None):
        policy = policy or self.policy
        last_error: BaseException | None = None

        async with self._open_session() as client:
            for attempt in range(policy.attempts):
                try:
                    return await self._get_json(client, url)
                except RETRYABLE_ERRORS as exc:
                    last_error = exc
                    logger.warning(
                        "Provider attempt {}/{} failed for {}: {!r}",
                        attempt + 1, policy.attempts, url, exc,
                    )
                    if attempt < policy.max_retries:
                        await self._sleep(policy.backoff(attempt))

        raise ProviderUnavailable(
            f"Provider unavailable after {policy.attempts} attempts: {url}",
            last_error=last_error,
            attempts=policy.attempts,
        )

    async def fetch_latest(self, lottery_type: str) -> DrawResult:
        """Fetch the most recent published draw."""
        url = self._url(lottery_type, LATEST)
        logger.debug("Fetching latest {} result", lottery_type)
        payload = await self._request(url)
        return normalize_response(payload, lottery_type)

    async def fetch_by_draw_number(self, lottery_type: str, draw_number: int) -> DrawResult:
        """Fetch one draw by its sequential number."""
        url = self._url(lottery_type, str(draw_number))
        logger.debug("Fetching {} draw {}", lottery_type, draw_number)
        payload = await self._request(url)
        return normalize_response(payload, lottery_type, expected_draw_number=draw_number)

    async def test_connectivity(self, lottery_type: str = "megasena") -> bool:
        """Best-effort single-attempt probe. Never raises."""
        try:
            url = self._url(lottery_type, LATEST)
            await self._request(url, policy=RetryPolicy(max_retries=0, timeout=self.policy.timeout))
            return True
        except Exception as e:
            logger.info("Provider connectivity probe failed: {!r}", e)
            return False
