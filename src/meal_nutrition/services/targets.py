"""Trimester nutrient target lookups."""

import logging
from dataclasses import dataclass
from typing import Protocol

from meal_nutrition.domain.errors import InvalidInputError, TargetsUnavailableError
from meal_nutrition.domain.nutrition import NutritionTarget
from meal_nutrition.services.cache import Cache

TRIMESTERS = (1, 2, 3)

_logger = logging.getLogger(__name__)


class TargetRepository(Protocol):
    """Persistence interface for nutrient targets."""

    def get_by_trimester(self, trimester: int) -> NutritionTarget | None:
        """Return targets for a trimester, if configured."""


@dataclass
class TargetService:
    """Resolves nutrient targets with caching."""

    repository: TargetRepository
    cache: Cache
    ttl_seconds: int = 3600

    def get_targets(self, trimester: int) -> dict[str, float]:
        """Return the target values for a trimester."""
        if trimester not in TRIMESTERS:
            raise InvalidInputError(f"Trimester must be 1, 2 or 3: {trimester}")

        cache_key = f"targets:trimester:{trimester}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, NutritionTarget):
            return dict(cached.values)

        target = self.repository.get_by_trimester(trimester)
        if target is None or not target.values:
            raise TargetsUnavailableError(
                f"No nutrient targets for trimester {trimester}"
            )
        self.cache.set(cache_key, target, ttl_seconds=self.ttl_seconds)
        _logger.info(
            "Targets loaded: trimester=%s nutrients=%s", trimester, len(target.values)
        )
        return dict(target.values)
