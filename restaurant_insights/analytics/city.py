from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping

from ..data_store.models import AwardTier, RestaurantRecord
from ..matching.models import MatchedPair
from .models import CityRef, CitySummary, TopRestaurant


def _fold(value: str) -> str:
    return value.strip().casefold()


def _in_place(record: RestaurantRecord, city: str, state: str | None) -> bool:
    if _fold(record.city) != _fold(city):
        return False
    return state is None or _fold(record.state) == _fold(state)


def city_summary(
    restaurants: Iterable[RestaurantRecord],
    matched_pairs: Iterable[MatchedPair],
    city: str,
    state: str | None = None,
) -> CitySummary:
    """
    Average rating, restaurant count and guide coverage for a city.

    City and state are compared after trimming and case-folding.
    """
    members: dict[str, RestaurantRecord] = {}
    for r in restaurants:
        if r.id not in members and _in_place(r, city, state):
            members[r.id] = r

    if not members:
        return CitySummary(city=city, state=state)

    awards: set[tuple[str, AwardTier]] = set()
    for pair in matched_pairs:
        if pair.restaurant.id in members:
            awards.add((pair.restaurant.id, pair.guide.award))

    breakdown: Counter[str] = Counter(award.value for _, award in awards)

    return CitySummary(
        city=city,
        state=state,
        avg_rating=sum(r.rating for r in members.values()) / len(members),
        total_restaurants=len(members),
        total_guide_restaurants=len({rid for rid, _ in awards}),
        award_breakdown=dict(breakdown),
    )


def top_restaurants(
    restaurants: Iterable[RestaurantRecord],
    city: str,
    state: str | None = None,
    min_rating: float = 0.0,
    min_review_count: int = 0,
    limit: int = 20,
    awards: Mapping[str, AwardTier] | None = None,
) -> list[TopRestaurant]:
    """Best-rated restaurants in *city*, most reviewed first among equal ratings."""
    awards = awards or {}
    seen: set[str] = set()
    candidates: list[RestaurantRecord] = []
    for r in restaurants:
        if r.id in seen:
            continue
        seen.add(r.id)
        if r.city != city or (state is not None and r.state != state):
            continue
        if r.rating >= min_rating and r.review_count >= min_review_count:
            candidates.append(r)

    candidates.sort(key=lambda r: (-r.rating, -r.review_count, r.id))
    return [
        TopRestaurant(
            restaurant_id=r.id,
            name=r.name,
            address=r.address,
            city=r.city,
            state=r.state,
            rating=r.rating,
            review_count=r.review_count,
            award=awards.get(r.id),
        )
        for r in candidates[:limit]
    ]


def list_cities(restaurants: Iterable[RestaurantRecord]) -> list[CityRef]:
    pairs = {
        (_fold(r.city), _fold(r.state))
        for r in restaurants
        if r.city.strip() and r.state.strip()
    }
    return [CityRef(city=c, state=s) for c, s in sorted(pairs)]
