"""Entry points for nutrition calculation and balance evaluation."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from pydantic import ValidationError

from meal_nutrition.domain.errors import ConfigurationError, InvalidInputError
from meal_nutrition.domain.foods import RecognizedItem, RecognizedMeal
from meal_nutrition.domain.nutrition import BalanceReport, NutritionResult
from meal_nutrition.services.aggregation import NutritionAggregator
from meal_nutrition.services.balance import BalanceEvaluator
from meal_nutrition.services.targets import TargetService

_logger = logging.getLogger(__name__)


@dataclass
class NutritionService:
    """Computes nutrition profiles for recognized meals."""

    aggregator: NutritionAggregator
    evaluator: BalanceEvaluator
    target_service: TargetService | None = None
    debug: bool = False

    def calculate_nutrition(self, items: Sequence[RecognizedItem]) -> NutritionResult:
        """Aggregate nutrients for a non-empty list of recognized items."""
        if not items:
            raise InvalidInputError("At least one food item is required")
        result = self.aggregator.aggregate(items)
        if result.degraded:
            _logger.info(
                "Nutrition calculated with unresolved items: %s", result.unresolved
            )
        return result

    def calculate_from_payload(self, payload: Mapping[str, object]) -> NutritionResult:
        """Validate an untyped recognition payload and calculate nutrition."""
        try:
            meal = RecognizedMeal.model_validate(payload)
        except ValidationError as exc:
            raise InvalidInputError(f"Malformed recognition payload: {exc}") from exc
        return self.calculate_nutrition(meal.items)

    def evaluate_balance(
        self,
        totals: Mapping[str, float],
        targets: Mapping[str, float],
        threshold: float | None = None,
    ) -> BalanceReport:
        """Score totals against explicit targets."""
        report = self.evaluator.evaluate(totals, targets, threshold)
        if self.debug:
            _logger.info(
                "Balance evaluated: score=%.3f deficient=%s",
                report.score,
                [entry.nutrient_code for entry in report.deficient],
            )
        return report

    def evaluate_for_trimester(
        self,
        totals: Mapping[str, float],
        trimester: int,
        threshold: float | None = None,
    ) -> BalanceReport:
        """Score totals against the targets configured for a trimester."""
        if self.target_service is None:
            raise ConfigurationError("No target service configured")
        targets = self.target_service.get_targets(trimester)
        return self.evaluate_balance(totals, targets, threshold)
