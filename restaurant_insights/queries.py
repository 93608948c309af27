"""
Query orchestration for the presentation layer.

Each function reads one snapshot from the repository, runs the relevant
components and returns serialisable models. Peer groups go through the
TTL cache; everything else is recomputed per call.
"""
from __future__ import annotations

import logging
import time

from .analytics.city import city_summary, list_cities, top_restaurants
from .analytics.engagement import engagement_stats
from .analytics.models import (
    CityRef,
    CitySummary,
    EngagementStats,
    GuideAward,
    RestaurantDetail,
    TopRestaurant,
)
from .data_store.repository import RestaurantRepository
from .geo.distance import Coordinate
from .matching.models import MatchedPair
from .matching.resolver import best_matches, resolve_matches
from .peers.aggregator import aggregate, make_key
from .peers.cache import cache_get, cache_set
from .peers.classifier import classify, classify_restaurant
from .peers.models import ClassificationResult, PeerGroup
from .ranking.config import DEFAULT_RANKING_CONFIG
from .ranking.models import DistanceResult, MapRestaurant, QualityGate
from .ranking.nearby import nearby
from .scan import ScanGuard

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.time() - start) * 1000, 1)


def guide_matches(
    repository: RestaurantRepository,
    proximity_threshold_km: float | None = None,
) -> list[MatchedPair]:
    start = time.time()
    pairs = resolve_matches(
        repository.guide_entries(), repository.restaurants(), proximity_threshold_km,
    )
    logger.info("guide_matches: %d pairs in %sms", len(pairs), _elapsed_ms(start))
    return pairs


def peer_group(
    repository: RestaurantRepository,
    city: str,
    category: str | None = None,
    *,
    state: str | None = None,
    min_rating: float = 0.0,
    max_review_count: int | None = None,
    guard: ScanGuard | None = None,
) -> PeerGroup:
    """Return the (possibly cached) peer group for a cohort."""
    key = make_key(city, category, state, min_rating, max_review_count)
    cached = cache_get(key, repository.version)
    if cached is not None:
        return cached

    start = time.time()
    group = aggregate(repository.restaurants(city=city, state=state), key, guard=guard)
    cache_set(key, repository.version, group)
    logger.info(
        "peer_group: city=%r category=%r size=%d in %sms",
        city, key.category, group.sample_size, _elapsed_ms(start),
    )
    return group


def hidden_gems(
    repository: RestaurantRepository,
    city: str,
    category: str | None = None,
    *,
    state: str | None = None,
    min_rating: float = 0.0,
    max_review_count: int | None = None,
    guard: ScanGuard | None = None,
) -> list[ClassificationResult]:
    group = peer_group(
        repository, city, category,
        state=state, min_rating=min_rating, max_review_count=max_review_count, guard=guard,
    )
    return classify(repository.restaurants(city=city, state=state), group)


def nearby_restaurants(
    repository: RestaurantRepository,
    origin: Coordinate,
    radius_km: float,
    quality: bool = False,
    limit: int | None = None,
    guard: ScanGuard | None = None,
) -> list[DistanceResult]:
    start = time.time()
    gate = QualityGate() if quality else None
    results = nearby(repository.restaurants(), origin, radius_km, gate, limit=limit, guard=guard)
    logger.info(
        "nearby_restaurants: %d results within %.2f km (quality=%s) in %sms",
        len(results), radius_km, quality, _elapsed_ms(start),
    )
    return results


def map_restaurants(
    repository: RestaurantRepository,
    origin: Coordinate,
    radius_km: float,
    limit: int = DEFAULT_RANKING_CONFIG.map_limit,
    guard: ScanGuard | None = None,
) -> list[MapRestaurant]:
    """
    Nearby restaurants annotated with their city-wide peer label and the
    best-matching guide award.
    """
    start = time.time()
    found = nearby(repository.restaurants(), origin, radius_km, limit=limit, guard=guard)

    groups: dict[str, PeerGroup] = {}
    for item in found:
        city = item.restaurant.city
        if city not in groups:
            groups[city] = peer_group(repository, city, guard=guard)

    located = [item.restaurant for item in found]
    awards = best_matches(resolve_matches(repository.guide_entries(), located))

    entries: list[MapRestaurant] = []
    for item in found:
        group = groups[item.restaurant.city]
        match = awards.get(item.restaurant_id)
        entries.append(MapRestaurant(
            restaurant_id=item.restaurant_id,
            distance_km=item.distance_km,
            restaurant=item.restaurant,
            status=None if group.is_empty else classify_restaurant(item.restaurant, group),
            award=match.guide.award if match else None,
        ))

    logger.info("map_restaurants: %d entries in %sms", len(entries), _elapsed_ms(start))
    return entries


def city_stats(
    repository: RestaurantRepository,
    city: str,
    state: str | None = None,
) -> CitySummary:
    restaurants = repository.restaurants()
    pairs = resolve_matches(repository.guide_entries(), restaurants)
    return city_summary(restaurants, pairs, city, state)


def city_top_restaurants(
    repository: RestaurantRepository,
    city: str,
    state: str | None = None,
    min_rating: float = 0.0,
    min_review_count: int = 0,
    limit: int = 20,
) -> list[TopRestaurant]:
    restaurants = repository.restaurants(city=city, state=state)
    matches = best_matches(resolve_matches(repository.guide_entries(), restaurants))
    awards = {rid: pair.guide.award for rid, pair in matches.items()}
    return top_restaurants(restaurants, city, state, min_rating, min_review_count, limit, awards)


def restaurant_detail(
    repository: RestaurantRepository,
    restaurant_id: str,
) -> RestaurantDetail | None:
    """Look up one restaurant and its closest guide listing. ``None`` if the id is unknown."""
    record = repository.restaurant(restaurant_id)
    if record is None:
        return None

    match = best_matches(resolve_matches(repository.guide_entries(), [record])).get(record.id)
    guide = None
    if match is not None:
        guide = GuideAward(
            award=match.guide.award,
            price=match.guide.price,
            green_star=match.guide.green_star,
            description=match.guide.description,
            distance_km=match.distance_km,
        )
    return RestaurantDetail(restaurant=record, categories=sorted(record.categories), guide=guide)


def guide_engagement(repository: RestaurantRepository) -> list[EngagementStats]:
    restaurants = repository.restaurants()
    pairs = resolve_matches(repository.guide_entries(), restaurants)
    return engagement_stats(restaurants, repository.photo_counts(), pairs)


def cities(repository: RestaurantRepository) -> list[CityRef]:
    return list_cities(repository.restaurants())
