"""Validation and normalization of raw provider payloads into DrawResult.

Provider format (one draw):
    {'loteria': 'megasena', 'concurso': 2763, 'data': '13/07/2025',
     'dezenas': ['04', '17', '23', '39', '42', '56'], 'acumulou': False,
     'premiacoes': [{'descricao': '6 acertos', 'faixa': 1,
                     'ganhadores': 0, 'valorPremio': 0.0}, ...],
     'proximoConcurso': 2764, 'dataProximoConcurso': '15/07/2025',
     'valorEstimadoProximoConcurso': 3500000.0}
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from loguru import logger

from lottery_pool.errors import MalformedResponse
from lottery_pool.lotteries import LotteryRules, get_rules
from lottery_pool.schemas.draw import DrawResult

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_LEADING_INT = re.compile(r"(\d+)")
_LATER_DRAW = re.compile(r"\b[2-9]\s*[ºo°ª]?\s*sorteio", re.IGNORECASE)


def sanitize_payload(value):
    """Strip control characters from every string in a JSON-like structure."""
    if isinstance(value, str):
        return _CONTROL_CHARS.sub("", value)
    if isinstance(value, dict):
        return {sanitize_payload(k): sanitize_payload(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_payload(v) for v in value]
    return value


def parse_provider_date(value) -> date | None:
    """Parse ``DD/MM/YYYY`` or ISO dates. Returns None when unparseable."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    for fmt in ("%d/%m/%Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def parse_money(value) -> Decimal | None:
    """Parse ``1234.5`` or ``'R$ 1.234,50'`` into a Decimal."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        text = value.replace("R$", "").strip()
        if not text:
            return None
        if "," in text:
            text = text.replace(".", "").replace(",", ".")
        try:
            return Decimal(text)
        except InvalidOperation:
            return None
    return None


def _parse_draw_number(value) -> int | None:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _parse_numbers(values, rules: LotteryRules) -> tuple[int, ...]:
    if not isinstance(values, list) or not values:
        raise MalformedResponse("Drawn numbers missing or empty")
    try:
        numbers = tuple(int(str(v).strip()) for v in values)
    except (TypeError, ValueError) as exc:
        raise MalformedResponse(f"Non-numeric drawn number: {exc}") from exc

    accepted = set(rules.drawn_counts)
    if rules.draws_per_result > 1:
        accepted.update(c * rules.draws_per_result for c in rules.drawn_counts)
    if len(numbers) not in accepted:
        raise MalformedResponse(
            f"{rules.key} expects {sorted(accepted)} numbers, got {len(numbers)}"
        )
    out_of_range = [n for n in numbers if not rules.is_valid_number(n)]
    if out_of_range:
        raise MalformedResponse(
            f"{rules.key} numbers out of range {rules.min_number}-{rules.max_number}: {out_of_range}"
        )
    if len(numbers) not in rules.drawn_counts:
        # keep the first draw; later draws are never merged into it
        numbers = numbers[:len(numbers) // rules.draws_per_result]
    return numbers


def _tier_hits(item: dict, rules: LotteryRules) -> int | None:
    label = item.get("descricao") or item.get("acertos")
    if isinstance(label, int):
        return label
    if isinstance(label, str):
        match = _LEADING_INT.search(label)
        if match:
            return int(match.group(1))
        hits = rules.hits_for_tier(label.strip().lower())
        if hits is not None:
            return hits

    faixa = item.get("faixa")
    ordered = sorted(rules.prize_tiers, reverse=True)
    if isinstance(faixa, int) and 1 <= faixa <= len(ordered):
        return ordered[faixa - 1]
    return None


def _parse_prizes(items, rules: LotteryRules) -> tuple[dict[int, int], dict[int, Decimal]]:
    winners: dict[int, int] = {}
    prizes: dict[int, Decimal] = {}
    if not isinstance(items, list):
        return winners, prizes

    for item in items:
        if not isinstance(item, dict):
            continue
        label = item.get("descricao")
        if isinstance(label, str) and _LATER_DRAW.search(label):
            continue
        hits = _tier_hits(item, rules)
        if hits is None:
            logger.debug("Skipping unrecognised prize tier for {}: {}", rules.key, item)
            continue
        if rules.draws_per_result > 1 and hits in winners:
            # first-draw tiers are listed first
            continue
        count = item.get("ganhadores", item.get("vencedores"))
        try:
            winners[hits] = int(count or 0)
        except (TypeError, ValueError):
            winners[hits] = 0
        value = parse_money(item.get("valorPremio", item.get("premio")))
        if value is not None:
            prizes[hits] = value
    return winners, prizes


def normalize_response(
    payload,
    lottery_type: str,
    expected_draw_number: int | None = None,
) -> DrawResult:
    """Validate a provider payload and turn it into a canonical DrawResult.

    Raises MalformedResponse when the body lacks a draw identifier, a draw
    date or a drawn-numbers sequence that fits the lottery's rules.
    """
    rules = get_rules(lottery_type)
    if not isinstance(payload, dict):
        raise MalformedResponse("Provider body is not a JSON object", payload)

    payload = sanitize_payload(payload)

    draw_number = _parse_draw_number(payload.get("concurso"))
    if draw_number is None:
        raise MalformedResponse("Missing or invalid draw identifier", payload)
    if expected_draw_number is not None and draw_number != expected_draw_number:
        raise MalformedResponse(
            f"Asked for draw {expected_draw_number}, provider returned {draw_number}",
            payload,
        )

    draw_date = parse_provider_date(payload.get("data"))
    if draw_date is None:
        raise MalformedResponse("Missing or invalid draw date", payload)

    numbers = _parse_numbers(payload.get("dezenas"), rules)
    winners, prizes = _parse_prizes(payload.get("premiacoes"), rules)

    return DrawResult(
        lottery_type=rules.key,
        draw_number=draw_number,
        draw_date=draw_date,
        numbers=numbers,
        accumulated=bool(payload.get("acumulou", False)),
        winner_count_by_tier=winners,
        prize_value_by_tier=prizes,
        next_draw_number=_parse_draw_number(payload.get("proximoConcurso")),
        next_draw_date=parse_provider_date(payload.get("dataProximoConcurso")),
        next_estimated_prize=parse_money(payload.get("valorEstimadoProximoConcurso")),
        raw=payload,
    )
