from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..data_store.models import RestaurantRecord
from ..matching.models import MatchedPair
from ..matching.resolver import matched_restaurant_ids
from .models import EngagementStats

MATCHED = "matched"
UNMATCHED = "unmatched"


def _partition_stats(
    partition: str,
    members: list[RestaurantRecord],
    photo_counts: Mapping[str, int],
) -> EngagementStats:
    ratios: list[float] = []
    for r in members:
        if r.review_count > 0:
            ratios.append(photo_counts.get(r.id, 0) / r.review_count)
    return EngagementStats(
        partition=partition,
        restaurant_count=len(members),
        ratio_sample_size=len(ratios),
        mean_photos_per_review=sum(ratios) / len(ratios) if ratios else None,
    )


def engagement_stats(
    restaurants: Iterable[RestaurantRecord],
    photo_counts: Mapping[str, int],
    matched_pairs: Iterable[MatchedPair],
) -> list[EngagementStats]:
    """
    Mean photos-per-review for guide-matched vs unmatched restaurants.

    Restaurants with no reviews count toward ``restaurant_count`` but not
    toward the mean. Restaurants absent from *photo_counts* have 0 photos.
    """
    for business_id, count in photo_counts.items():
        if count < 0:
            raise ValueError(f"Negative photo count for {business_id}: {count}")

    matched_ids = matched_restaurant_ids(matched_pairs)
    partitions: dict[str, list[RestaurantRecord]] = {MATCHED: [], UNMATCHED: []}
    seen: set[str] = set()
    for r in restaurants:
        if r.id in seen:
            continue
        seen.add(r.id)
        partitions[MATCHED if r.id in matched_ids else UNMATCHED].append(r)

    return [_partition_stats(name, members, photo_counts) for name, members in partitions.items()]
