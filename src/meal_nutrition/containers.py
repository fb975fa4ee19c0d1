"""Dependency container wiring for the nutrition core."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from supabase import Client, create_client

from meal_nutrition.adapters.httpx_reference_food_source import (
    HttpxReferenceFoodSource,
)
from meal_nutrition.adapters.supabase_reference_food_repository import (
    SupabaseReferenceFoodRepository,
)
from meal_nutrition.adapters.supabase_target_repository import (
    SupabaseTargetRepository,
)
from meal_nutrition.app_logging import configure_logging
from meal_nutrition.config import Settings
from meal_nutrition.domain.errors import ConfigurationError
from meal_nutrition.services.aggregation import NutritionAggregator
from meal_nutrition.services.balance import BalanceEvaluator
from meal_nutrition.services.cache import InMemoryCache
from meal_nutrition.services.matching import FoodMatcher
from meal_nutrition.services.nutrition import NutritionService
from meal_nutrition.services.reference import ReferenceCatalog, ReferenceFoodSource
from meal_nutrition.services.targets import TargetService


@dataclass
class AppContainer:
    """Holds process-wide dependencies."""

    settings: Settings
    reference_catalog: ReferenceCatalog
    food_matcher: FoodMatcher
    nutrition_service: NutritionService
    target_service: TargetService | None
    close_resources: Callable[[], None]


def build_container(
    settings: Settings | None = None, supabase_client: Client | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(logging.DEBUG if resolved_settings.debug else logging.INFO)
    client = (
        supabase_client
        if supabase_client is not None
        else _create_supabase_client(resolved_settings)
    )
    if client is None and not resolved_settings.reference_json_url:
        raise ConfigurationError(
            "Configure Supabase credentials or a reference JSON URL"
        )

    json_source: HttpxReferenceFoodSource | None = None
    reference_source: ReferenceFoodSource
    if resolved_settings.reference_json_url:
        json_source = HttpxReferenceFoodSource.create(
            resolved_settings.reference_json_url
        )
        reference_source = json_source
    else:
        reference_source = SupabaseReferenceFoodRepository(client)

    reference_catalog = ReferenceCatalog(
        source=reference_source,
        ttl_seconds=resolved_settings.reference_ttl_seconds,
    )
    food_matcher = FoodMatcher(
        catalog=reference_catalog,
        similarity_floor=resolved_settings.similarity_floor,
        limit=resolved_settings.match_limit,
    )
    target_service: TargetService | None = None
    if client is not None:
        target_service = TargetService(
            repository=SupabaseTargetRepository(client),
            cache=InMemoryCache(),
            ttl_seconds=resolved_settings.target_ttl_seconds,
        )
    nutrition_service = NutritionService(
        aggregator=NutritionAggregator(
            matcher=food_matcher, debug=resolved_settings.debug
        ),
        evaluator=BalanceEvaluator(threshold=resolved_settings.deficiency_threshold),
        target_service=target_service,
        debug=resolved_settings.debug,
    )

    def close_resources() -> None:
        if json_source is not None:
            json_source.close()

    return AppContainer(
        settings=resolved_settings,
        reference_catalog=reference_catalog,
        food_matcher=food_matcher,
        nutrition_service=nutrition_service,
        target_service=target_service,
        close_resources=close_resources,
    )


def _create_supabase_client(settings: Settings) -> Client | None:
    if not settings.supabase_url or not settings.supabase_service_key:
        return None
    return create_client(settings.supabase_url, settings.supabase_service_key)
