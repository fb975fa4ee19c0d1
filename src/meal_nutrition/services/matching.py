"""Fuzzy matching of free-text food names against reference foods."""

from dataclasses import dataclass
from enum import Enum

from meal_nutrition.domain.foods import MatchResult
from meal_nutrition.services.reference import ReferenceCatalog, ReferenceSnapshot
from meal_nutrition.services.similarity import similarity
from meal_nutrition.services.text import normalize_text

SIMILARITY_FLOOR = 0.3
DEFAULT_MATCH_LIMIT = 5


class ConfidenceLevel(str, Enum):
    """Display bands for match confidence."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    VERY_LOW = "very_low"


_CONFIDENCE_BANDS = (
    (0.85, ConfidenceLevel.HIGH),
    (0.7, ConfidenceLevel.MEDIUM),
    (0.5, ConfidenceLevel.LOW),
    (0.35, ConfidenceLevel.VERY_LOW),
)


def confidence_level(score: float) -> ConfidenceLevel | None:
    """Map a similarity to its display band, or None below the lowest band."""
    for lower_bound, level in _CONFIDENCE_BANDS:
        if score >= lower_bound:
            return level
    return None


@dataclass
class FoodMatcher:
    """Ranks reference foods by similarity to a recognized name."""

    catalog: ReferenceCatalog
    similarity_floor: float = SIMILARITY_FLOOR
    limit: int = DEFAULT_MATCH_LIMIT

    def find_matches(
        self,
        name: str,
        limit: int | None = None,
        snapshot: ReferenceSnapshot | None = None,
    ) -> list[MatchResult]:
        """Return matches at or above the floor, best first.

        An empty list means the name could not be resolved.
        """
        resolved_limit = self.limit if limit is None else limit
        query = normalize_text(name)
        if not query or resolved_limit <= 0:
            return []
        current = snapshot if snapshot is not None else self.catalog.snapshot()

        results: list[MatchResult] = []
        for entry in current.entries:
            score = max((similarity(query, key) for key in entry.keys), default=0.0)
            if score >= self.similarity_floor:
                results.append(MatchResult(food=entry.food, similarity=score))
        results.sort(key=lambda result: (-result.similarity, result.food.id))
        return results[:resolved_limit]

    def best_match(
        self, name: str, snapshot: ReferenceSnapshot | None = None
    ) -> MatchResult | None:
        """Return the top match, if any."""
        matches = self.find_matches(name, limit=1, snapshot=snapshot)
        return matches[0] if matches else None
