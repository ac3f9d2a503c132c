"""Calendar helpers: local day, draw completion, draw status, draw estimation."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from lottery_pool.config import settings
from lottery_pool.lotteries import LotteryRules
from lottery_pool.schemas.draw import DrawStatus


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_today(now: datetime | None = None, tz_name: str | None = None) -> date:
    """The consumer's calendar day for ``now``."""
    now = as_utc(now or utc_now())
    return now.astimezone(ZoneInfo(tz_name or settings.LOCAL_TIMEZONE)).date()


def is_draw_completed(draw_date: date, now: datetime | None = None, tz_name: str | None = None) -> bool:
    """A draw is completed iff its date is on or before today."""
    return draw_date <= local_today(now, tz_name)


def draw_status(draw_date: date, today: date) -> DrawStatus:
    days_until = (draw_date - today).days
    has_occurred = days_until < 0
    is_today = days_until == 0
    is_pending = days_until > 0

    if has_occurred:
        days = abs(days_until)
        message = f"Draw took place {days} {'day' if days == 1 else 'days'} ago"
    elif is_today:
        message = "Draw takes place today"
    else:
        message = f"Draw in {days_until} {'day' if days_until == 1 else 'days'}"

    return DrawStatus(
        has_occurred=has_occurred,
        is_pending=is_pending,
        is_today=is_today,
        days_until=days_until,
        message=message,
    )


def estimate_draw_number(
    reference_number: int,
    reference_date: date,
    target_date: date,
    rules: LotteryRules,
) -> int:
    """Estimate the draw number held on ``target_date`` from the lottery cadence."""
    days = (target_date - reference_date).days
    offset = round(days * rules.draws_per_week / 7)
    return max(1, reference_number + offset)


def probe_sequence(estimate: int, radius: int) -> list[int]:
    """``estimate, +1, -1, +2, -2, ...`` limited to positive draw numbers."""
    candidates = [estimate]
    for step in range(1, radius + 1):
        candidates.extend((estimate + step, estimate - step))
    return [n for n in candidates if n > 0]
