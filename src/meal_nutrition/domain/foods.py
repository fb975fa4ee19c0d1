"""Reference food and recognition domain models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from meal_nutrition.domain.errors import ConfigurationError

# Units written before their amount ("大さじ2"); all others follow it ("2個").
PREFIX_UNITS = frozenset({"大さじ", "小さじ"})


@dataclass(frozen=True)
class QuantityExpr:
    """A parsed quantity: either a gram weight or an amount of a unit."""

    grams: float | None = None
    unit: str | None = None
    amount: float | None = None

    def __post_init__(self) -> None:
        has_grams = self.grams is not None
        has_unit = self.unit is not None or self.amount is not None
        if has_grams == has_unit:
            raise ConfigurationError(
                "QuantityExpr needs exactly one of grams or unit/amount"
            )
        if has_grams:
            if self.grams <= 0:
                raise ConfigurationError(f"Grams must be positive: {self.grams}")
            return
        if not self.unit or self.amount is None:
            raise ConfigurationError("Unit quantity needs both unit and amount")
        if self.amount <= 0:
            raise ConfigurationError(f"Unit amount must be positive: {self.amount}")

    @property
    def is_grams(self) -> bool:
        return self.grams is not None

    def __str__(self) -> str:
        if self.grams is not None:
            return f"{_format_number(self.grams)}g"
        amount = _format_number(self.amount)
        if self.unit in PREFIX_UNITS:
            return f"{self.unit}{amount}"
        return f"{amount}{self.unit}"


@dataclass(frozen=True)
class ReferenceFood:
    """Canonical nutrient values for one standard quantity of a food."""

    id: str
    name: str
    standard_quantity: QuantityExpr
    nutrients: Mapping[str, float]
    aliases: frozenset[str] = field(default_factory=frozenset)
    category: str | None = None

    def __post_init__(self) -> None:
        for code, value in self.nutrients.items():
            if value < 0:
                raise ConfigurationError(
                    f"Negative nutrient value for {self.id}: {code}={value}"
                )
        object.__setattr__(self, "aliases", frozenset(self.aliases))
        object.__setattr__(
            self,
            "nutrients",
            MappingProxyType({code: float(v) for code, v in self.nutrients.items()}),
        )


@dataclass(frozen=True)
class MatchResult:
    """A reference food paired with its name similarity."""

    food: ReferenceFood
    similarity: float


class RecognizedItem(BaseModel):
    """A food item produced by upstream recognition."""

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: str = ""
    confidence: float = Field(ge=0.0, le=1.0)


class RecognizedMeal(BaseModel):
    """Untyped recognition payload validated at the core boundary."""

    items: list[RecognizedItem]


def _format_number(value: float) -> str:
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text
