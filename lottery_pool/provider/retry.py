"""Retry policy for provider calls."""

from dataclasses import dataclass

from lottery_pool.config import Settings, settings as default_settings


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with capped exponential backoff.

    ``max_retries`` counts retries after the first attempt, so the provider is
    hit at most ``max_retries + 1`` times per call.
    """

    max_retries: int = 2
    base_delay: float = 1.0
    max_delay: float = 3.0
    timeout: float = 30.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("backoff delays must be >= 0")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")

    @property
    def attempts(self) -> int:
        return self.max_retries + 1

    def backoff(self, retry_index: int) -> float:
        """Delay before retry number ``retry_index`` (0-based)."""
        return min(self.base_delay * (2 ** retry_index), self.max_delay)

    def worst_case_latency(self) -> float:
        sleeps = sum(self.backoff(i) for i in range(self.max_retries))
        return sleeps + self.attempts * self.timeout

    @classmethod
    def from_settings(cls, s: Settings | None = None) -> "RetryPolicy":
        s = s or default_settings
        return cls(
            max_retries=s.PROVIDER_MAX_RETRIES,
            base_delay=s.PROVIDER_BACKOFF_BASE_SECONDS,
            max_delay=s.PROVIDER_BACKOFF_CAP_SECONDS,
            timeout=s.PROVIDER_TIMEOUT_SECONDS,
        )
