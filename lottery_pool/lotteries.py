"""Per-lottery rule table: number ranges, game sizes, cadence, prize tiers."""

from dataclasses import dataclass, field

from lottery_pool.errors import UnsupportedLotteryType


@dataclass(frozen=True)
class LotteryRules:
    key: str
    display_name: str
    drawn_counts: tuple[int, ...]
    min_number: int
    max_number: int
    numbers_per_game: int
    draws_per_week: float
    # exact hit count -> tier name
    prize_tiers: dict[int, str] = field(default_factory=dict)
    # tier name -> bonus points
    default_bonus: dict[str, int] = field(default_factory=dict)
    provider_slug: str = ""
    # independent draws the provider concatenates into one "dezenas" list
    draws_per_result: int = 1

    @property
    def slug(self) -> str:
        return self.provider_slug or self.key

    def tier_for_hits(self, hits: int) -> str | None:
        return self.prize_tiers.get(hits)

    def hits_for_tier(self, tier: str) -> int | None:
        for hits, name in self.prize_tiers.items():
            if name == tier:
                return hits
        return None

    def bonus_for_hits(self, hits: int, bonus_config: dict[str, int] | None = None) -> int:
        """Bonus for an exact hit count. Tiers never accumulate."""
        tier = self.tier_for_hits(hits)
        if tier is None:
            return 0
        table = {**self.default_bonus, **(bonus_config or {})}
        return int(table.get(tier, 0))

    def is_valid_number(self, number: int) -> bool:
        return self.min_number <= number <= self.max_number


LOTTERIES: dict[str, LotteryRules] = {
    "megasena": LotteryRules(
        key="megasena",
        display_name="Mega-Sena",
        drawn_counts=(6,),
        min_number=1,
        max_number=60,
        numbers_per_game=6,
        draws_per_week=3,  # tue, thu, sat
        prize_tiers={6: "sena", 5: "quina", 4: "quadra"},
        default_bonus={"sena": 1000, "quina": 500, "quadra": 100},
    ),
    "lotofacil": LotteryRules(
        key="lotofacil",
        display_name="Lotofácil",
        drawn_counts=(15,),
        min_number=1,
        max_number=25,
        numbers_per_game=15,
        draws_per_week=6,
        prize_tiers={15: "15 acertos", 14: "14 acertos", 13: "13 acertos", 12: "12 acertos", 11: "11 acertos"},
    ),
    "quina": LotteryRules(
        key="quina",
        display_name="Quina",
        drawn_counts=(5,),
        min_number=1,
        max_number=80,
        numbers_per_game=5,
        draws_per_week=6,
        prize_tiers={5: "quina", 4: "quadra", 3: "terno", 2: "duque"},
    ),
    "lotomania": LotteryRules(
        key="lotomania",
        display_name="Lotomania",
        drawn_counts=(20,),
        min_number=0,
        max_number=99,
        numbers_per_game=50,
        draws_per_week=3,
        prize_tiers={20: "20 acertos", 19: "19 acertos", 18: "18 acertos", 17: "17 acertos",
                     16: "16 acertos", 15: "15 acertos", 0: "0 acertos"},
    ),
    "timemania": LotteryRules(
        key="timemania",
        display_name="Timemania",
        drawn_counts=(7,),
        min_number=1,
        max_number=80,
        numbers_per_game=10,
        draws_per_week=3,
        prize_tiers={7: "7 acertos", 6: "6 acertos", 5: "5 acertos", 4: "4 acertos", 3: "3 acertos"},
    ),
    "duplasena": LotteryRules(
        key="duplasena",
        display_name="Dupla Sena",
        # only the first draw is scored; the second arrives appended to it
        drawn_counts=(6,),
        min_number=1,
        max_number=50,
        numbers_per_game=6,
        draws_per_week=3,
        prize_tiers={6: "sena", 5: "quina", 4: "quadra", 3: "terno"},
        draws_per_result=2,
    ),
}


def get_rules(lottery_type: str) -> LotteryRules:
    """Return the rule set for ``lottery_type`` or fail fast."""
    try:
        return LOTTERIES[lottery_type]
    except KeyError:
        raise UnsupportedLotteryType(lottery_type) from None
