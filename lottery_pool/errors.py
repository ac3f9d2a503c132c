"""Exception taxonomy for result acquisition and competition scoring."""


class LotteryPoolError(Exception):
    """Base class for every error raised by the engine."""


class UnsupportedLotteryType(LotteryPoolError, ValueError):
    def __init__(self, lottery_type: str):
        super().__init__(f"Unsupported lottery type: {lottery_type}")
        self.lottery_type = lottery_type


class MalformedResponse(LotteryPoolError):
    """The provider answered, but the body is structurally invalid.

    Never retried: a malformed body does not become well-formed on retry.
    """

    def __init__(self, message: str, payload: object = None):
        super().__init__(message)
        self.payload = payload


class ProviderUnavailable(LotteryPoolError):
    """Retries exhausted against the draw result provider."""

    def __init__(self, message: str, last_error: BaseException | None = None, attempts: int = 0):
        super().__init__(message)
        self.last_error = last_error
        self.attempts = attempts


class ProviderHTTPError(LotteryPoolError):
    """Non-2xx answer from the provider. Retryable."""

    def __init__(self, status: int, url: str):
        super().__init__(f"Provider returned HTTP {status} for {url}")
        self.status = status
        self.url = url


class StorageError(LotteryPoolError):
    """Durable tier read or write failure."""


class ResultNotFound(LotteryPoolError):
    pass


class CompetitionNotFound(LotteryPoolError):
    def __init__(self, competition_id: int):
        super().__init__(f"Competition not found: {competition_id}")
        self.competition_id = competition_id


class DrawOutsideCompetition(LotteryPoolError):
    pass
