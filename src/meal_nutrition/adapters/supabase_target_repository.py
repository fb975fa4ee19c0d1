"""Supabase repository for trimester nutrient targets."""

from dataclasses import dataclass

from supabase import Client

from meal_nutrition.domain.nutrition import TRACKED_NUTRIENTS, NutritionTarget
from meal_nutrition.services.targets import TargetRepository


@dataclass
class SupabaseTargetRepository(TargetRepository):
    """Supabase implementation for nutrient target lookups."""

    client: Client
    nutrient_columns: tuple[str, ...] = TRACKED_NUTRIENTS

    def get_by_trimester(self, trimester: int) -> NutritionTarget | None:
        """Return targets for a trimester, if a row exists."""
        response = (
            self.client.table("nutrition_targets")
            .select("*")
            .eq("trimester", trimester)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        values = {
            column: float(row[column])
            for column in self.nutrient_columns
            if isinstance(row.get(column), int | float)
        }
        return NutritionTarget(trimester=trimester, values=values)
