from __future__ import annotations

import pytest

from restaurant_insights.analytics.engagement import engagement_stats
from restaurant_insights.data_store.models import GuideEntry, RestaurantRecord
from restaurant_insights.matching.resolver import resolve_matches


def _restaurant(rid: str, name: str, reviews: int, lat: float = 45.0, lon: float = -120.0) -> RestaurantRecord:
    return RestaurantRecord(id=rid, name=name, latitude=lat, longitude=lon, rating=4.0, review_count=reviews)


def _stats_by_partition(stats):
    return {s.partition: s for s in stats}


def test_partitions_by_guide_match():
    restaurants = [
        _restaurant("m1", "Starred", 100),
        _restaurant("m2", "Bib Place", 50, lat=46.0),
        _restaurant("u1", "Corner Diner", 200),
        _restaurant("u2", "Food Truck", 0),
    ]
    guide = [
        GuideEntry(name="Starred", latitude=45.0, longitude=-120.0, award="2 Stars"),
        GuideEntry(name="bib place", latitude=46.0, longitude=-120.0, award="Bib Gourmand"),
    ]
    photos = {"m1": 50, "m2": 10, "u1": 20, "u2": 7}

    stats = engagement_stats(restaurants, photos, resolve_matches(guide, restaurants, 0.05))
    by_part = _stats_by_partition(stats)

    assert [s.partition for s in stats] == ["matched", "unmatched"]
    assert by_part["matched"].restaurant_count == 2
    assert by_part["matched"].ratio_sample_size == 2
    assert by_part["matched"].mean_photos_per_review == pytest.approx((0.5 + 0.2) / 2)

    # zero-review restaurant counted in the partition but not in the mean
    assert by_part["unmatched"].restaurant_count == 2
    assert by_part["unmatched"].ratio_sample_size == 1
    assert by_part["unmatched"].mean_photos_per_review == pytest.approx(0.1)


def test_missing_photo_counts_are_zero():
    stats = engagement_stats([_restaurant("a", "A", 10)], {}, [])
    unmatched = _stats_by_partition(stats)["unmatched"]
    assert unmatched.mean_photos_per_review == 0.0


def test_empty_partition_has_absent_mean():
    stats = engagement_stats([_restaurant("a", "A", 0)], {"a": 3}, [])
    by_part = _stats_by_partition(stats)
    assert by_part["matched"].restaurant_count == 0
    assert by_part["matched"].mean_photos_per_review is None
    assert by_part["unmatched"].restaurant_count == 1
    assert by_part["unmatched"].ratio_sample_size == 0
    assert by_part["unmatched"].mean_photos_per_review is None


def test_duplicate_restaurant_counted_once():
    r = _restaurant("a", "A", 10)
    stats = engagement_stats([r, r], {"a": 5}, [])
    assert _stats_by_partition(stats)["unmatched"].restaurant_count == 1


def test_negative_photo_count_rejected():
    with pytest.raises(ValueError):
        engagement_stats([_restaurant("a", "A", 10)], {"a": -1}, [])
