"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from meal_nutrition.config import Settings
from meal_nutrition.domain.foods import QuantityExpr, ReferenceFood
from meal_nutrition.domain.nutrition import NutritionTarget
from meal_nutrition.services.aggregation import NutritionAggregator
from meal_nutrition.services.balance import BalanceEvaluator
from meal_nutrition.services.cache import InMemoryCache
from meal_nutrition.services.matching import FoodMatcher
from meal_nutrition.services.nutrition import NutritionService
from meal_nutrition.services.reference import ReferenceCatalog, ReferenceFoodSource
from meal_nutrition.services.targets import TargetRepository, TargetService


def make_food(  # noqa: PLR0913
    food_id: str,
    name: str,
    nutrients: dict[str, float],
    *,
    grams: float | None = None,
    unit: str | None = None,
    amount: float | None = None,
    aliases: tuple[str, ...] = (),
    category: str | None = None,
) -> ReferenceFood:
    if grams is None and unit is None:
        grams = 100
    quantity = (
        QuantityExpr(grams=grams)
        if grams is not None
        else QuantityExpr(unit=unit, amount=amount)
    )
    return ReferenceFood(
        id=food_id,
        name=name,
        standard_quantity=quantity,
        nutrients=nutrients,
        aliases=frozenset(aliases),
        category=category,
    )


@dataclass
class InMemoryReferenceFoodSource(ReferenceFoodSource):
    """In-memory reference food source for tests."""

    foods: list[ReferenceFood] = field(default_factory=list)
    calls: int = 0

    def get_all(self) -> list[ReferenceFood]:
        self.calls += 1
        return list(self.foods)


@dataclass
class FailingReferenceFoodSource(ReferenceFoodSource):
    """Reference source whose backing store is unreachable."""

    def get_all(self) -> list[ReferenceFood]:
        raise ConnectionError("database offline")


@dataclass
class InMemoryTargetRepository(TargetRepository):
    """In-memory target repository for tests."""

    targets: dict[int, NutritionTarget] = field(default_factory=dict)
    calls: int = 0

    def get_by_trimester(self, trimester: int) -> NutritionTarget | None:
        self.calls += 1
        return self.targets.get(trimester)


@pytest.fixture
def reference_foods() -> list[ReferenceFood]:
    return [
        make_food(
            "rice-white",
            "ご飯",
            {"calories": 250, "protein": 3.8, "iron": 0.2, "calcium": 5},
            unit="杯",
            amount=1,
            aliases=("白米", "ごはん", "ライス"),
        ),
        make_food(
            "spinach",
            "ほうれん草",
            {"calories": 20, "iron": 2.0, "folic_acid": 210, "calcium": 49},
            grams=100,
        ),
        make_food(
            "milk",
            "牛乳",
            {"calories": 134, "protein": 6.6, "calcium": 220, "vitamin_d": 0.6},
            unit="カップ",
            amount=1,
            aliases=("ミルク",),
        ),
        make_food(
            "miso",
            "味噌",
            {"calories": 38, "protein": 2.3, "iron": 0.8},
            unit="大さじ",
            amount=1,
            aliases=("みそ",),
        ),
        make_food(
            "egg",
            "卵",
            {"calories": 76, "protein": 6.2, "iron": 0.9, "vitamin_d": 1.9},
            unit="個",
            amount=1,
            aliases=("たまご", "玉子"),
        ),
    ]


@pytest.fixture
def reference_source(reference_foods) -> InMemoryReferenceFoodSource:
    return InMemoryReferenceFoodSource(foods=reference_foods)


@pytest.fixture
def catalog(reference_source) -> ReferenceCatalog:
    return ReferenceCatalog(source=reference_source)


@pytest.fixture
def matcher(catalog) -> FoodMatcher:
    return FoodMatcher(catalog=catalog)


@pytest.fixture
def aggregator(matcher) -> NutritionAggregator:
    return NutritionAggregator(matcher=matcher)


@pytest.fixture
def target_repository() -> InMemoryTargetRepository:
    return InMemoryTargetRepository(
        targets={
            2: NutritionTarget(
                trimester=2,
                values={
                    "calories": 2300,
                    "protein": 55,
                    "iron": 21.5,
                    "folic_acid": 480,
                    "calcium": 650,
                    "vitamin_d": 8.5,
                },
            )
        }
    )


@pytest.fixture
def target_service(target_repository) -> TargetService:
    return TargetService(repository=target_repository, cache=InMemoryCache())


@pytest.fixture
def nutrition_service(aggregator, target_service) -> NutritionService:
    return NutritionService(
        aggregator=aggregator,
        evaluator=BalanceEvaluator(),
        target_service=target_service,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    """Chainable stand-in for a Supabase table query."""

    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": []}
    )
    last_columns: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue.setdefault(action, []).append(data)

    def select(self, columns: str = "*") -> "FakeTable":
        self._action = "select"
        self.last_columns = columns
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]
