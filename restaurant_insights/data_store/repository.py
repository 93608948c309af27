from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol

from .models import GuideEntry, RestaurantRecord


class RestaurantRepository(Protocol):
    """Read-only collections the insight components consume."""

    @property
    def version(self) -> int: ...

    def restaurants(
        self, city: str | None = None, state: str | None = None
    ) -> list[RestaurantRecord]: ...

    def restaurant(self, restaurant_id: str) -> RestaurantRecord | None: ...

    def guide_entries(self) -> list[GuideEntry]: ...

    def photo_counts(self) -> dict[str, int]: ...


class InMemoryRepository:
    """An immutable snapshot held in memory. Also used as a test fixture."""

    def __init__(
        self,
        restaurants: Iterable[RestaurantRecord] = (),
        guide_entries: Iterable[GuideEntry] = (),
        photo_counts: Mapping[str, int] | None = None,
        version: int = 1,
    ) -> None:
        self._restaurants = tuple(restaurants)
        self._guide_entries = tuple(guide_entries)
        self._photo_counts = dict(photo_counts or {})
        self._by_id = {r.id: r for r in self._restaurants}
        self._version = version

    @property
    def version(self) -> int:
        return self._version

    def restaurants(
        self, city: str | None = None, state: str | None = None
    ) -> list[RestaurantRecord]:
        return [
            r
            for r in self._restaurants
            if (city is None or r.city == city) and (state is None or r.state == state)
        ]

    def restaurant(self, restaurant_id: str) -> RestaurantRecord | None:
        return self._by_id.get(restaurant_id)

    def guide_entries(self) -> list[GuideEntry]:
        return list(self._guide_entries)

    def photo_counts(self) -> dict[str, int]:
        return dict(self._photo_counts)
