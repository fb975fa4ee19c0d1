"""Quantity parsing and serving multipliers."""

import logging
import re

from meal_nutrition.domain.errors import ConfigurationError
from meal_nutrition.domain.foods import QuantityExpr
from meal_nutrition.services.text import fold_fullwidth

_logger = logging.getLogger(__name__)

DEFAULT_STANDARD_QUANTITY = "100g"

COOKING_UNITS: dict[str, str] = {
    "大さじ": "大さじ",
    "大匙": "大さじ",
    "おおさじ": "大さじ",
    "小さじ": "小さじ",
    "小匙": "小さじ",
    "こさじ": "小さじ",
    "カップ": "カップ",
    "杯": "杯",
    "個": "個",
    "切れ": "切れ",
    "枚": "枚",
}

# Rough weights per unit; informational only, never used for multipliers.
GRAMS_PER_UNIT: dict[str, float] = {
    "大さじ": 15,
    "小さじ": 5,
    "カップ": 200,
    "杯": 150,
    "個": 50,
    "切れ": 80,
    "枚": 60,
}

CATEGORY_UNIT_GRAMS: dict[str, dict[str, float]] = {
    "穀類-米": {"杯": 150, "カップ": 150},
    "野菜-葉物": {"束": 80, "株": 100},
    "肉類": {"切れ": 100, "枚": 100},
    "魚介類": {"切れ": 80, "尾": 100, "匹": 100},
}

FRUIT_CATEGORY = "果物"
FRUIT_GRAMS_PER_PIECE: dict[str, float] = {
    "りんご": 200,
    "みかん": 80,
    "バナナ": 100,
}

_KANJI_NUMERALS = {
    "一": 1,
    "二": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
    "七": 7,
    "八": 8,
    "九": 9,
    "十": 10,
}

_NUMERAL_CHARS = "".join(_KANJI_NUMERALS)
_DECIMAL = r"\d+(?:\.\d+)?"
_NUMBER = rf"({_DECIMAL}(?:/{_DECIMAL})?|[{_NUMERAL_CHARS}])"
_UNIT = "|".join(
    re.escape(unit) for unit in sorted(COOKING_UNITS, key=len, reverse=True)
)

_GRAMS = re.compile(r"(?<![\d./])(\d+(?:\.\d+)?)(?:グラム|g|ｇ)", re.IGNORECASE)
_UNIT_THEN_NUMBER = re.compile(rf"({_UNIT}){_NUMBER}(?![\d./{_NUMERAL_CHARS}])")
_NUMBER_THEN_UNIT = re.compile(rf"(?<![\d./{_NUMERAL_CHARS}]){_NUMBER}({_UNIT})")
_GENERIC = re.compile(r"(\d+(?:\.\d+)?)([^\d\s]+)")


def parse_quantity(text: str | None) -> QuantityExpr | None:
    """Parse a gram or cooking-unit quantity, or None if neither is present."""
    if not text:
        return None
    prepared = _prepare(text)
    grams = _find_grams(prepared)
    if grams is not None:
        return QuantityExpr(grams=grams)
    found = _find_cooking_unit(prepared)
    if found is not None:
        unit, amount = found
        return QuantityExpr(unit=unit, amount=amount)
    return None


def parse_standard_quantity(text: str | None) -> QuantityExpr:
    """Parse a reference food's standard quantity.

    Accepts any "<number><unit>" form ("1人前") on top of what
    parse_quantity understands. Missing values default to 100g.
    """
    raw = text or DEFAULT_STANDARD_QUANTITY
    parsed = parse_quantity(raw)
    if parsed is not None:
        return parsed
    match = _GENERIC.search(_prepare(raw))
    if match is None:
        raise ConfigurationError(f"Unparsable standard quantity: {raw!r}")
    return QuantityExpr(unit=match.group(2), amount=float(match.group(1)))


def estimate_multiplier(
    input_quantity: str, standard_quantity: str | QuantityExpr
) -> float:
    """Return how many standard servings the input quantity represents.

    Gram ratios take priority, then same-unit cooking measures. Anything
    else counts as one standard serving. A typed standard quantity is used
    as is rather than re-parsed.
    """
    prepared_input = _prepare(input_quantity or "")
    input_grams = _find_grams(prepared_input)
    input_unit = _find_cooking_unit(prepared_input)
    if isinstance(standard_quantity, QuantityExpr):
        standard_grams = standard_quantity.grams
        standard_unit = (
            None
            if standard_quantity.is_grams
            else (standard_quantity.unit, standard_quantity.amount)
        )
    else:
        prepared_standard = _prepare(standard_quantity or "")
        standard_grams = _find_grams(prepared_standard)
        standard_unit = _find_cooking_unit(prepared_standard)

    if input_grams is not None and standard_grams is not None:
        return input_grams / standard_grams

    if (
        input_unit is not None
        and standard_unit is not None
        and input_unit[0] == standard_unit[0]
    ):
        return input_unit[1] / standard_unit[1]

    _logger.debug(
        "Quantity fallback to one serving: input=%r standard=%r",
        input_quantity,
        standard_quantity,
    )
    return 1.0


def approximate_grams(
    quantity: QuantityExpr,
    category: str | None = None,
    food_name: str | None = None,
) -> float | None:
    """Estimate the weight of a quantity, if its unit has a known weight.

    Category weights ("1切れ" of meat is heavier than of fish) take priority
    over the generic per-unit table. Fruit pieces are weighed by name.
    """
    if quantity.grams is not None:
        return quantity.grams
    unit = quantity.unit or ""
    if category == FRUIT_CATEGORY and unit == "個" and food_name:
        for fruit, grams in FRUIT_GRAMS_PER_PIECE.items():
            if fruit in food_name:
                return quantity.amount * grams
    grams_per_unit = CATEGORY_UNIT_GRAMS.get(category or "", {}).get(unit)
    if grams_per_unit is None:
        grams_per_unit = GRAMS_PER_UNIT.get(unit)
    if grams_per_unit is None:
        return None
    return quantity.amount * grams_per_unit


def _prepare(text: str) -> str:
    return re.sub(r"\s+", "", fold_fullwidth(text))


def _find_grams(text: str) -> float | None:
    for match in _GRAMS.finditer(text):
        value = float(match.group(1))
        if value > 0:
            return value
    return None


def _find_cooking_unit(text: str) -> tuple[str, float] | None:
    candidates: list[tuple[int, str, str]] = []
    for match in _UNIT_THEN_NUMBER.finditer(text):
        candidates.append((match.start(), match.group(1), match.group(2)))
    for match in _NUMBER_THEN_UNIT.finditer(text):
        candidates.append((match.start(), match.group(2), match.group(1)))

    for _, unit_text, number_text in sorted(candidates):
        amount = _to_amount(number_text)
        if amount > 0:
            return COOKING_UNITS[unit_text], amount
    return None


def _to_amount(number_text: str) -> float:
    if number_text in _KANJI_NUMERALS:
        return float(_KANJI_NUMERALS[number_text])
    if "/" in number_text:
        numerator, denominator = number_text.split("/")
        if float(denominator) == 0:
            return 0.0
        return float(numerator) / float(denominator)
    return float(number_text)
