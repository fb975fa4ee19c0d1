"""Tests for target lookups and caching."""

import pytest

from meal_nutrition.domain.errors import InvalidInputError, TargetsUnavailableError
from meal_nutrition.services.cache import InMemoryCache


def test_targets_are_cached(target_service, target_repository) -> None:
    first = target_service.get_targets(2)
    second = target_service.get_targets(2)

    assert first == second
    assert first["iron"] == 21.5
    assert target_repository.calls == 1


def test_returned_targets_are_copies(target_service) -> None:
    targets = target_service.get_targets(2)
    targets["iron"] = 0.0

    assert target_service.get_targets(2)["iron"] == 21.5


def test_invalid_trimester(target_service, target_repository) -> None:
    with pytest.raises(InvalidInputError):
        target_service.get_targets(4)
    assert target_repository.calls == 0


def test_missing_targets(target_service) -> None:
    with pytest.raises(TargetsUnavailableError):
        target_service.get_targets(1)


def test_cache_expiry_and_invalidate() -> None:
    cache = InMemoryCache()

    cache.set("expired", 1, ttl_seconds=0)
    cache.set("kept", 2, ttl_seconds=60)

    assert cache.get("expired") is None
    assert cache.get("kept") == 2

    cache.invalidate("kept")
    assert cache.get("kept") is None
