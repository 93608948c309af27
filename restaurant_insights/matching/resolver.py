from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Iterable

from ..data_store.models import GuideEntry, RestaurantRecord
from ..geo.distance import distance_km
from .config import DEFAULT_MATCHING_CONFIG
from .models import MatchedPair

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Trim surrounding whitespace and case-fold."""
    return name.strip().casefold()


def _pair_sort_key(pair: MatchedPair) -> tuple:
    return (
        pair.restaurant.id,
        normalize_name(pair.guide.name),
        pair.guide.address,
        pair.guide.award.rank,
        pair.distance_km,
        pair.guide.latitude,
        pair.guide.longitude,
        pair.guide.price or "",
        pair.guide.green_star,
        pair.guide.description or "",
    )


def resolve_matches(
    guide_entries: Iterable[GuideEntry],
    restaurants: Iterable[RestaurantRecord],
    proximity_threshold_km: float | None = None,
) -> list[MatchedPair]:
    """
    Pair guide entries with crowd-review restaurants.

    A pair is emitted when the normalised names are equal and both sides
    have coordinates no more than *proximity_threshold_km* apart. Entries
    missing coordinates on either side never match. Every qualifying pair
    is returned, so one restaurant may pair with several guide entries.
    """
    if proximity_threshold_km is None:
        proximity_threshold_km = DEFAULT_MATCHING_CONFIG.proximity_threshold_km
    if not math.isfinite(proximity_threshold_km) or proximity_threshold_km < 0:
        raise ValueError(f"proximity_threshold_km must be >= 0, got {proximity_threshold_km}")

    by_name: dict[str, list[RestaurantRecord]] = defaultdict(list)
    for restaurant in restaurants:
        if restaurant.coordinates is not None:
            by_name[normalize_name(restaurant.name)].append(restaurant)

    pairs: list[MatchedPair] = []
    for entry in guide_entries:
        guide_point = entry.coordinates
        if guide_point is None:
            continue
        for restaurant in by_name.get(normalize_name(entry.name), ()):
            dist = distance_km(guide_point, restaurant.coordinates)
            if dist <= proximity_threshold_km:
                pairs.append(MatchedPair(restaurant=restaurant, guide=entry, distance_km=dist))

    pairs.sort(key=_pair_sort_key)
    logger.debug("Resolved %d guide/restaurant pairs within %.3f km", len(pairs), proximity_threshold_km)
    return pairs


def best_matches(pairs: Iterable[MatchedPair]) -> dict[str, MatchedPair]:
    """Keep the tightest-distance pair per restaurant id (higher award wins ties)."""
    best: dict[str, MatchedPair] = {}
    for pair in pairs:
        current = best.get(pair.restaurant.id)
        if current is None or (pair.distance_km, -pair.guide.award.rank) < (
            current.distance_km, -current.guide.award.rank,
        ):
            best[pair.restaurant.id] = pair
    return best


def matched_restaurant_ids(pairs: Iterable[MatchedPair]) -> set[str]:
    return {pair.restaurant.id for pair in pairs}
