"""Reference foods loaded from a JSON nutrition database over HTTP."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from meal_nutrition.domain.errors import ConfigurationError
from meal_nutrition.domain.foods import ReferenceFood
from meal_nutrition.services.quantity import parse_standard_quantity
from meal_nutrition.services.reference import ReferenceFoodSource

_logger = logging.getLogger(__name__)


class FoodDocument(BaseModel):
    """One food entry of the JSON database.

    Nutrient values sit beside the descriptive fields; every extra numeric
    field is treated as a nutrient code.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    category: str | None = None
    aliases: list[str] = Field(default_factory=list)
    standard_quantity: str | None = None
    confidence: float | None = None

    def to_reference_food(self) -> ReferenceFood:
        return ReferenceFood(
            id=self.id,
            name=self.name,
            standard_quantity=parse_standard_quantity(self.standard_quantity),
            nutrients=self.nutrients(),
            aliases=frozenset(self.aliases),
            category=self.category,
        )

    def nutrients(self) -> dict[str, float]:
        return {
            code: float(value)
            for code, value in (self.model_extra or {}).items()
            if isinstance(value, int | float) and not isinstance(value, bool)
        }


class FoodDatabaseDocument(BaseModel):
    """Top-level JSON document keyed by food id.

    Entries are validated one at a time by the source.
    """

    foods: dict[str, dict[str, Any]]


@dataclass
class HttpxReferenceFoodSource(ReferenceFoodSource):
    """HTTPX-backed loader for a JSON food database."""

    url: str
    http_client: httpx.Client
    timeout: float = 15

    @classmethod
    def create(cls, url: str) -> "HttpxReferenceFoodSource":
        """Create a source with a managed httpx session."""
        return cls(url=url, http_client=httpx.Client())

    def get_all(self) -> list[ReferenceFood]:
        """Download and parse the food database."""
        response = self.http_client.get(self.url, timeout=self.timeout)
        response.raise_for_status()
        document = FoodDatabaseDocument.model_validate(response.json())
        foods: list[ReferenceFood] = []
        for key, raw in document.foods.items():
            try:
                foods.append(FoodDocument.model_validate(raw).to_reference_food())
            except (ConfigurationError, ValidationError) as exc:
                _logger.warning(
                    "Skipping malformed food entry: key=%s error=%s", key, exc
                )
        return foods

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.http_client.close()
