"""Aggregation of matched food nutrients into meal totals."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from meal_nutrition.domain.foods import MatchResult, RecognizedItem
from meal_nutrition.domain.nutrition import (
    TRACKED_NUTRIENTS,
    ItemContribution,
    NutrientTotals,
    NutritionResult,
)
from meal_nutrition.services.matching import FoodMatcher
from meal_nutrition.services.quantity import (
    approximate_grams,
    estimate_multiplier,
    parse_quantity,
)
from meal_nutrition.services.reference import ReferenceSnapshot

_logger = logging.getLogger(__name__)


@dataclass
class NutritionAggregator:
    """Combines per-item contributions into a single nutrition result."""

    matcher: FoodMatcher
    nutrient_codes: tuple[str, ...] = TRACKED_NUTRIENTS
    debug: bool = False

    def aggregate(self, items: Sequence[RecognizedItem]) -> NutritionResult:
        """Match, scale and sum nutrients for every recognized item.

        Unmatched items stay in ``per_item`` with a zero contribution and
        mark the result as degraded. When nothing matches, totals are all
        zero and confidence is 0.
        """
        if not items:
            return NutritionResult(
                totals=self._zero(), confidence=0.0, per_item=(), degraded=False
            )

        snapshot = self.matcher.catalog.snapshot()
        per_item = tuple(self._contribution(item, snapshot) for item in items)
        totals = merge_totals(
            self._zero(), *(entry.contribution for entry in per_item)
        )
        degraded = any(not entry.resolved for entry in per_item)
        result = NutritionResult(
            totals=totals,
            confidence=_weighted_confidence(per_item),
            per_item=per_item,
            degraded=degraded,
        )
        if self.debug:
            _logger.info(
                "Aggregated items=%s resolved=%s confidence=%.3f",
                len(per_item),
                len(per_item) - len(result.unresolved),
                result.confidence,
            )
        return result

    def _contribution(
        self, item: RecognizedItem, snapshot: ReferenceSnapshot
    ) -> ItemContribution:
        match = self.matcher.best_match(item.name, snapshot=snapshot)
        if match is None:
            if self.debug:
                _logger.info("Unresolved food item: name=%s", item.name)
            return ItemContribution(
                item=item, match=None, multiplier=0.0, contribution=self._zero()
            )

        food = match.food
        multiplier = estimate_multiplier(item.quantity, food.standard_quantity)
        contribution = self._zero()
        for code, value in food.nutrients.items():
            contribution[code] = contribution.get(code, 0.0) + value * multiplier
        return ItemContribution(
            item=item,
            match=match,
            multiplier=multiplier,
            contribution=contribution,
            estimated_grams=_estimate_grams(item, match, multiplier),
        )

    def _zero(self) -> NutrientTotals:
        return dict.fromkeys(self.nutrient_codes, 0.0)


def merge_totals(*totals: Mapping[str, float]) -> NutrientTotals:
    """Sum nutrient maps per code; missing codes count as zero."""
    merged: NutrientTotals = {}
    for partial in totals:
        for code, value in partial.items():
            merged[code] = merged.get(code, 0.0) + value
    return merged


def _weighted_confidence(per_item: Iterable[ItemContribution]) -> float:
    """Average item confidence weighted by match similarity."""
    weighted_sum = 0.0
    total_weight = 0.0
    for entry in per_item:
        if entry.match is None:
            continue
        weighted_sum += entry.item.confidence * entry.match.similarity
        total_weight += entry.match.similarity
    if total_weight <= 0:
        return 0.0
    return max(0.0, min(1.0, weighted_sum / total_weight))


def _estimate_grams(
    item: RecognizedItem, match: MatchResult, multiplier: float
) -> float | None:
    food = match.food
    parsed = parse_quantity(item.quantity)
    if parsed is not None:
        grams = approximate_grams(parsed, food.category, food.name)
        if grams is not None:
            return grams
    standard_grams = approximate_grams(
        food.standard_quantity, food.category, food.name
    )
    if standard_grams is None:
        return None
    return standard_grams * multiplier
