"""Nutrient balance scoring against targets."""

from collections.abc import Mapping
from dataclasses import dataclass

from meal_nutrition.domain.errors import ConfigurationError
from meal_nutrition.domain.nutrition import BalanceReport, DeficiencyEntry

DEFAULT_DEFICIENCY_THRESHOLD = 0.8


def evaluate(
    totals: Mapping[str, float],
    targets: Mapping[str, float],
    threshold: float = DEFAULT_DEFICIENCY_THRESHOLD,
) -> BalanceReport:
    """Score totals against targets.

    Each nutrient's fulfillment ratio is capped at 1 for the score, so a
    surplus in one nutrient cannot hide a shortfall in another. Nutrients
    below ``threshold`` are reported most deficient first.
    """
    _validate(targets, threshold)

    capped_sum = 0.0
    deficient: list[DeficiencyEntry] = []
    sufficient: list[str] = []
    for code, target in targets.items():
        current = float(totals.get(code, 0.0))
        ratio = max(0.0, current / target)
        capped_sum += min(ratio, 1.0)
        if ratio < threshold:
            deficient.append(
                DeficiencyEntry(
                    nutrient_code=code,
                    current_value=current,
                    target_value=float(target),
                    fulfillment_ratio=ratio,
                )
            )
        else:
            sufficient.append(code)

    deficient.sort(key=lambda entry: (entry.fulfillment_ratio, entry.nutrient_code))
    return BalanceReport(
        score=capped_sum / len(targets),
        deficient=deficient,
        sufficient=sorted(sufficient),
    )


@dataclass
class BalanceEvaluator:
    """Evaluates balance with a configured default threshold."""

    threshold: float = DEFAULT_DEFICIENCY_THRESHOLD

    def evaluate(
        self,
        totals: Mapping[str, float],
        targets: Mapping[str, float],
        threshold: float | None = None,
    ) -> BalanceReport:
        return evaluate(
            totals, targets, self.threshold if threshold is None else threshold
        )


def _validate(targets: Mapping[str, float], threshold: float) -> None:
    if threshold <= 0:
        raise ConfigurationError(f"Deficiency threshold must be positive: {threshold}")
    if not targets:
        raise ConfigurationError("No nutrient targets configured")
    for code, target in targets.items():
        if target is None or target <= 0:
            raise ConfigurationError(f"Target for {code} must be positive: {target}")
