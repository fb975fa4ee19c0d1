"""Reference food catalog with atomically swapped snapshots."""

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from meal_nutrition.domain.errors import ReferenceDataUnavailableError
from meal_nutrition.domain.foods import ReferenceFood
from meal_nutrition.services.text import normalize_text

_logger = logging.getLogger(__name__)


class ReferenceFoodSource(Protocol):
    """Lookup interface for the external nutrition database."""

    def get_all(self) -> list[ReferenceFood]:
        """Return every reference food."""


@dataclass(frozen=True)
class IndexedFood:
    """A reference food with its normalized match keys."""

    food: ReferenceFood
    keys: tuple[str, ...]


@dataclass(frozen=True)
class ReferenceSnapshot:
    """Immutable view of the reference food set at load time."""

    entries: tuple[IndexedFood, ...]
    loaded_at: datetime

    @classmethod
    def build(cls, foods: Iterable[ReferenceFood]) -> "ReferenceSnapshot":
        """Index foods by normalized name and aliases."""
        entries = tuple(
            IndexedFood(food=food, keys=_match_keys(food))
            for food in sorted(foods, key=lambda food: food.id)
        )
        return cls(entries=entries, loaded_at=datetime.now(tz=UTC))

    @property
    def foods(self) -> list[ReferenceFood]:
        return [entry.food for entry in self.entries]

    def get(self, food_id: str) -> ReferenceFood | None:
        """Return a food by id, if present."""
        for entry in self.entries:
            if entry.food.id == food_id:
                return entry.food
        return None

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class ReferenceCatalog:
    """Holds the current reference snapshot for the food matcher.

    Reads never lock. Loads are serialized and publish a new snapshot by
    rebinding a single attribute, so callers holding an older snapshot keep
    a consistent view until they finish.
    """

    source: ReferenceFoodSource
    ttl_seconds: int = 1800
    _snapshot: ReferenceSnapshot | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def snapshot(self) -> ReferenceSnapshot:
        """Return the current snapshot, loading it on first use or expiry."""
        current = self._snapshot
        if current is not None and not self._is_stale(current):
            return current
        with self._lock:
            current = self._snapshot
            if current is not None and not self._is_stale(current):
                return current
            return self._load()

    def refresh(self) -> ReferenceSnapshot:
        """Reload from the source and swap in the new snapshot."""
        with self._lock:
            return self._load()

    def replace(self, foods: Iterable[ReferenceFood]) -> ReferenceSnapshot:
        """Swap in a snapshot built from the given foods."""
        snapshot = ReferenceSnapshot.build(foods)
        with self._lock:
            self._snapshot = snapshot
        return snapshot

    def _is_stale(self, snapshot: ReferenceSnapshot) -> bool:
        if self.ttl_seconds <= 0:
            return False
        expires_at = snapshot.loaded_at + timedelta(seconds=self.ttl_seconds)
        return datetime.now(tz=UTC) >= expires_at

    def _load(self) -> ReferenceSnapshot:
        try:
            foods = self.source.get_all()
        except Exception as exc:
            _logger.warning("Reference food load failed: %s", exc)
            raise ReferenceDataUnavailableError(
                "Failed to load reference foods"
            ) from exc
        if not foods:
            raise ReferenceDataUnavailableError(
                "Reference food source returned no foods"
            )
        snapshot = ReferenceSnapshot.build(foods)
        self._snapshot = snapshot
        _logger.info("Reference foods loaded: count=%s", len(snapshot))
        return snapshot


def _match_keys(food: ReferenceFood) -> tuple[str, ...]:
    keys: list[str] = []
    for text in (food.name, *sorted(food.aliases)):
        key = normalize_text(text)
        if key and key not in keys:
            keys.append(key)
    return tuple(keys)
