"""Nutrition result domain models."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from meal_nutrition.domain.foods import MatchResult, RecognizedItem

TRACKED_NUTRIENTS: tuple[str, ...] = (
    "calories",
    "protein",
    "iron",
    "folic_acid",
    "calcium",
    "vitamin_d",
)

NutrientTotals = dict[str, float]


@dataclass(frozen=True)
class ItemContribution:
    """How one recognized item contributed to a meal's totals."""

    item: RecognizedItem
    match: MatchResult | None
    multiplier: float
    contribution: Mapping[str, float]
    estimated_grams: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "contribution", _freeze(self.contribution))

    @property
    def resolved(self) -> bool:
        return self.match is not None


@dataclass(frozen=True)
class NutritionResult:
    """Aggregated nutrients and confidence for a meal."""

    totals: Mapping[str, float]
    confidence: float
    per_item: tuple[ItemContribution, ...]
    degraded: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "totals", _freeze(self.totals))

    @property
    def unresolved(self) -> list[str]:
        """Names of items that matched no reference food."""
        return [entry.item.name for entry in self.per_item if not entry.resolved]


@dataclass(frozen=True)
class DeficiencyEntry:
    """A nutrient below its fulfillment threshold."""

    nutrient_code: str
    current_value: float
    target_value: float
    fulfillment_ratio: float


@dataclass(frozen=True)
class BalanceReport:
    """Balance score with deficient and sufficient nutrients."""

    score: float
    deficient: list[DeficiencyEntry]
    sufficient: list[str]

    @property
    def score_percent(self) -> int:
        """Score on the 0-100 scale used for display."""
        return max(0, min(100, round(self.score * 100)))


@dataclass(frozen=True)
class NutritionTarget:
    """Daily nutrient targets for a pregnancy trimester."""

    trimester: int
    values: dict[str, float]


def _freeze(values: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType(dict(values))
