from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import pytest

from lottery_pool.lotteries import get_rules
from lottery_pool.schemas.draw import DrawResult
from lottery_pool.scoring.engine import (
    calculate_points,
    count_hits,
    score,
    score_tickets,
    split_games,
)

DRAW = DrawResult(
    lottery_type="megasena",
    draw_number=2900,
    draw_date=date(2025, 7, 19),
    numbers=(4, 17, 23, 39, 42, 56),
    prize_value_by_tier={5: Decimal("52013.46"), 4: Decimal("1139.32")},
)


@dataclass
class FakeTicket:
    ticket_number: str
    numbers: list


def test_split_games_drops_trailing_partial_game():
    games = split_games(list(range(1, 24)), 6)
    assert len(games) == 3
    assert games[-1] == (13, 14, 15, 16, 17, 18)


def test_split_games_rejects_bad_size():
    with pytest.raises(ValueError):
        split_games([1, 2, 3], 0)


def test_count_hits_is_set_intersection():
    assert count_hits([4, 4, 17, 60], DRAW.numbers) == 2


def test_five_hits_with_default_bonus():
    rules = get_rules("megasena")
    assert calculate_points(5, rules) == 505
    assert calculate_points(6, rules) == 1006
    assert calculate_points(3, rules) == 3


def test_bonus_config_overrides_defaults():
    rules = get_rules("megasena")
    assert calculate_points(4, rules, base_points_per_hit=2, bonus_config={"quadra": 50}) == 58
    # unconfigured tiers keep their default
    assert calculate_points(5, rules, bonus_config={"quadra": 50}) == 505


def test_ticket_score_uses_best_game_for_tier():
    ticket = FakeTicket("7", [4, 17, 23, 39, 42, 1, 56, 2, 3, 5, 6, 8])

    result = score(ticket, DRAW, "megasena")

    assert result.total_games_played == 2
    assert result.total_hits == 6
    assert result.hit_breakdown == {"ticket_7_game_1": 5, "ticket_7_game_2": 1}
    assert result.points_earned == 506
    assert result.best_game_hits == 5
    assert result.prize_tier == "quina"
    assert result.prize_value == Decimal("52013.46")


def test_hits_spread_across_games_do_not_make_a_tier():
    # three hits in each game: six in total, but no single game reaches quadra
    ticket = FakeTicket("1", [4, 17, 23, 1, 2, 3, 39, 42, 56, 7, 8, 9])

    result = score(ticket, DRAW, "megasena")

    assert result.total_hits == 6
    assert result.prize_tier is None
    assert result.points_earned == 6


def test_multiple_tickets_are_aggregated():
    tickets = [
        FakeTicket("1", [4, 17, 23, 39, 1, 2]),
        FakeTicket("2", [4, 17, 23, 39, 42, 56]),
    ]

    result = score_tickets(tickets, DRAW, "megasena")

    assert result.total_games_played == 2
    assert result.points_earned == (4 + 100) + (6 + 1000)
    assert result.prize_tier == "sena"


def test_scoring_is_deterministic():
    tickets = [FakeTicket("1", [4, 17, 23, 39, 42, 1, 56, 2, 3, 5, 6, 8])]
    assert score_tickets(tickets, DRAW, "megasena") == score_tickets(tickets, DRAW, "megasena")


def test_no_games_scores_zero():
    result = score_tickets([FakeTicket("1", [1, 2, 3])], DRAW, "megasena")
    assert result.total_games_played == 0
    assert result.points_earned == 0
    assert result.prize_tier is None


def test_draw_of_another_lottery_rejected():
    with pytest.raises(ValueError):
        score(FakeTicket("1", [1, 2, 3, 4, 5]), DRAW, "quina")
