"""Pure scoring of tickets against a draw result.

No I/O: identical inputs always produce identical scores, which is what
makes reprocessing a draw an idempotent upsert.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Protocol

from lottery_pool.lotteries import LotteryRules, get_rules
from lottery_pool.schemas.draw import DrawResult


class TicketLike(Protocol):
    ticket_number: str
    numbers: Sequence[int]


@dataclass(frozen=True)
class GameScore:
    ticket_number: str
    game_index: int  # 1-based within the ticket
    numbers: tuple[int, ...]
    hits: int
    points: int
    prize_value: Decimal
    prize_tier: str | None

    @property
    def key(self) -> str:
        return f"ticket_{self.ticket_number}_game_{self.game_index}"


@dataclass(frozen=True)
class ScoreResult:
    total_hits: int = 0
    hit_breakdown: dict[str, int] = field(default_factory=dict)
    total_games_played: int = 0
    points_earned: int = 0
    prize_value: Decimal = Decimal("0")
    best_game_hits: int = 0
    prize_tier: str | None = None
    games: tuple[GameScore, ...] = ()


def split_games(numbers: Sequence[int], numbers_per_game: int) -> list[tuple[int, ...]]:
    """Consecutive chunks of ``numbers_per_game``; a trailing partial chunk is dropped."""
    if numbers_per_game <= 0:
        raise ValueError("numbers_per_game must be positive")
    full = len(numbers) - len(numbers) % numbers_per_game
    return [tuple(numbers[i:i + numbers_per_game]) for i in range(0, full, numbers_per_game)]


def count_hits(game: Iterable[int], drawn: Iterable[int]) -> int:
    return len(set(game) & set(drawn))


def calculate_points(
    hits: int,
    rules: LotteryRules,
    base_points_per_hit: int = 1,
    bonus_config: dict[str, int] | None = None,
) -> int:
    """``hits * base_points_per_hit`` plus the bonus of the exact hit tier."""
    return hits * base_points_per_hit + rules.bonus_for_hits(hits, bonus_config)


def prize_tier_for(hits: int, rules: LotteryRules) -> str | None:
    return rules.tier_for_hits(hits)


def _check_draw(draw: DrawResult, rules: LotteryRules) -> None:
    if draw.lottery_type != rules.key:
        raise ValueError(
            f"Draw {draw.result_id} belongs to {draw.lottery_type}, not {rules.key}"
        )


def score_tickets(
    tickets: Iterable[TicketLike],
    draw: DrawResult,
    lottery_type: str,
    base_points_per_hit: int = 1,
    bonus_config: dict[str, int] | None = None,
) -> ScoreResult:
    """Score every game of every ticket and aggregate.

    ``prize_tier`` comes from the single best game (maximum hits in one
    game), never from the summed hits across games.
    """
    rules = get_rules(lottery_type)
    _check_draw(draw, rules)

    games: list[GameScore] = []
    for ticket in tickets:
        for index, game in enumerate(split_games(list(ticket.numbers or []), rules.numbers_per_game), start=1):
            hits = count_hits(game, draw.numbers)
            games.append(GameScore(
                ticket_number=str(ticket.ticket_number),
                game_index=index,
                numbers=game,
                hits=hits,
                points=calculate_points(hits, rules, base_points_per_hit, bonus_config),
                prize_value=draw.prize_value_by_tier.get(hits, Decimal("0")),
                prize_tier=prize_tier_for(hits, rules),
            ))

    if not games:
        return ScoreResult()

    best = max(g.hits for g in games)
    return ScoreResult(
        total_hits=sum(g.hits for g in games),
        hit_breakdown={g.key: g.hits for g in games},
        total_games_played=len(games),
        points_earned=sum(g.points for g in games),
        prize_value=sum((g.prize_value for g in games), Decimal("0")),
        best_game_hits=best,
        prize_tier=prize_tier_for(best, rules),
        games=tuple(games),
    )


def score(ticket: TicketLike, draw: DrawResult, lottery_type: str, **kwargs) -> ScoreResult:
    """Score a single ticket."""
    return score_tickets([ticket], draw, lottery_type, **kwargs)
