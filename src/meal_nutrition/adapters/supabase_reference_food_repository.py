"""Supabase repository for reference foods."""

import logging
from collections import defaultdict
from dataclasses import dataclass

from supabase import Client

from meal_nutrition.domain.errors import ConfigurationError
from meal_nutrition.domain.foods import ReferenceFood
from meal_nutrition.domain.nutrition import TRACKED_NUTRIENTS
from meal_nutrition.services.quantity import parse_standard_quantity
from meal_nutrition.services.reference import ReferenceFoodSource

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseReferenceFoodRepository(ReferenceFoodSource):
    """Loads reference foods and their aliases from Supabase."""

    client: Client
    nutrient_columns: tuple[str, ...] = TRACKED_NUTRIENTS

    def get_all(self) -> list[ReferenceFood]:
        """Return every food item with its aliases attached."""
        foods_response = self.client.table("food_items").select("*").execute()
        rows = foods_response.data or []
        if not rows:
            return []

        alias_response = (
            self.client.table("food_aliases").select("food_id, alias").execute()
        )
        aliases: dict[str, set[str]] = defaultdict(set)
        for row in alias_response.data or []:
            alias = row.get("alias")
            if row.get("food_id") is not None and alias:
                aliases[str(row["food_id"])].add(str(alias))

        foods: list[ReferenceFood] = []
        for row in rows:
            food_id = str(row.get("id"))
            try:
                foods.append(
                    _parse_food(row, aliases.get(food_id, set()), self.nutrient_columns)
                )
            except (ConfigurationError, KeyError, TypeError, ValueError) as exc:
                _logger.warning(
                    "Skipping malformed food row: id=%s error=%s", food_id, exc
                )
        return foods


def _parse_food(
    row: dict[str, object], aliases: set[str], nutrient_columns: tuple[str, ...]
) -> ReferenceFood:
    """Parse a food_items row into a domain model."""
    nutrients = {
        column: float(row.get(column) or 0.0) for column in nutrient_columns
    }
    standard_quantity = row.get("standard_quantity")
    return ReferenceFood(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        standard_quantity=parse_standard_quantity(
            str(standard_quantity) if standard_quantity else None
        ),
        nutrients=nutrients,
        aliases=frozenset(aliases),
        category=row.get("category"),
    )
