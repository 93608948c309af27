from __future__ import annotations

import random

import pytest

from restaurant_insights.data_store.models import AwardTier, GuideEntry, RestaurantRecord
from restaurant_insights.matching.resolver import (
    best_matches,
    matched_restaurant_ids,
    normalize_name,
    resolve_matches,
)


def _restaurant(rid: str, name: str, lat: float | None, lon: float | None, **extra) -> RestaurantRecord:
    return RestaurantRecord(
        id=rid, name=name, latitude=lat, longitude=lon,
        rating=extra.pop("rating", 4.0), review_count=extra.pop("review_count", 100), **extra,
    )


def _guide(name: str, lat: float | None, lon: float | None, award: str = "1 Star", **extra) -> GuideEntry:
    return GuideEntry(name=name, latitude=lat, longitude=lon, award=award, **extra)


# ── Name normalisation ───────────────────────────────────────────────────


def test_normalize_name_trims_and_casefolds():
    assert normalize_name("  Chez Paul ") == "chez paul"
    assert normalize_name("STRASSE") == normalize_name("straße")


# ── Matching ─────────────────────────────────────────────────────────────


def test_chez_paul_scenario_yields_one_pair():
    guide = [_guide("Chez Paul", 40.7128, -74.0060, award="1 Star")]
    restaurants = [_restaurant("r1", "chez paul", 40.71285, -74.00598, rating=4.6, review_count=120)]

    pairs = resolve_matches(guide, restaurants, 0.1)

    assert len(pairs) == 1
    assert pairs[0].restaurant.id == "r1"
    assert pairs[0].guide.award is AwardTier.one_star
    assert pairs[0].distance_km < 0.01


def test_name_mismatch_never_matches():
    guide = [_guide("Chez Paul", 40.7128, -74.0060)]
    restaurants = [_restaurant("r1", "Chez Pauline", 40.7128, -74.0060)]
    assert resolve_matches(guide, restaurants, 0.1) == []


def test_same_name_too_far_does_not_match():
    guide = [_guide("Luigi's", 40.7128, -74.0060)]
    # ~0.11 km north
    restaurants = [_restaurant("r1", "Luigi's", 40.7138, -74.0060)]
    assert resolve_matches(guide, restaurants, 0.05) == []
    assert len(resolve_matches(guide, restaurants, 0.2)) == 1


def test_missing_coordinates_are_excluded_not_errors():
    guide = [_guide("Noma", None, None), _guide("Noma", 55.6831, 12.6105)]
    restaurants = [
        _restaurant("r1", "Noma", None, 12.6105),
        _restaurant("r2", "Noma", 55.6831, 12.6105),
    ]
    pairs = resolve_matches(guide, restaurants, 0.05)
    assert [(p.restaurant.id, p.guide.latitude) for p in pairs] == [("r2", 55.6831)]


def test_duplicate_guide_entries_all_returned():
    guide = [
        _guide("Le Bistro", 48.8566, 2.3522, award="Bib Gourmand", address="1 Rue A"),
        _guide("Le Bistro", 48.85662, 2.35222, award="Selected Restaurants", address="1 Rue A bis"),
    ]
    restaurants = [_restaurant("r1", "le bistro", 48.8566, 2.3522)]

    pairs = resolve_matches(guide, restaurants, 0.05)

    assert len(pairs) == 2
    best = best_matches(pairs)
    assert best["r1"].guide.award is AwardTier.bib


def test_best_match_prefers_higher_award_on_equal_distance():
    guide = [
        _guide("Twin", 10.0, 10.0, award="Selected Restaurants", address="a"),
        _guide("Twin", 10.0, 10.0, award="2 Stars", address="b"),
    ]
    pairs = resolve_matches(guide, [_restaurant("r1", "Twin", 10.0, 10.0)], 0.05)
    assert best_matches(pairs)["r1"].guide.award is AwardTier.two_star


def test_matching_is_order_independent():
    rng = random.Random(7)
    guide = [
        _guide("Alpha", 40.0, -74.0, address="1"),
        _guide("Beta", 40.1, -74.1, award="2 Stars", address="2"),
        _guide("alpha", 40.00001, -74.00001, award="Bib Gourmand", address="3"),
        _guide("Gamma", None, None),
    ]
    restaurants = [
        _restaurant("r1", "ALPHA", 40.0, -74.0),
        _restaurant("r2", "Beta ", 40.1001, -74.1),
        _restaurant("r3", "Alpha", 41.0, -74.0),
        _restaurant("r4", "Gamma", 40.2, -74.2),
    ]
    expected = resolve_matches(guide, restaurants, 0.05)
    assert len(expected) == 3

    for _ in range(10):
        g = guide[:]
        r = restaurants[:]
        rng.shuffle(g)
        rng.shuffle(r)
        shuffled = resolve_matches(g, r, 0.05)
        assert shuffled == expected
        assert set(shuffled) == set(expected)


def test_entries_differing_only_in_price_or_green_star_have_stable_order():
    guide = [
        _guide("Twin", 10.0, 10.0, price="$$$", green_star=True),
        _guide("Twin", 10.0, 10.0, price="$$$", green_star=False),
        _guide("Twin", 10.0, 10.0, price="$$"),
    ]
    restaurants = [_restaurant("r1", "Twin", 10.0, 10.0)]

    forward = resolve_matches(guide, restaurants)
    backward = resolve_matches(list(reversed(guide)), restaurants)

    assert forward == backward
    assert [(p.guide.price, p.guide.green_star) for p in forward] == [
        ("$$", False), ("$$$", False), ("$$$", True),
    ]


def test_matched_restaurant_ids():
    guide = [_guide("A", 1.0, 1.0), _guide("B", 2.0, 2.0)]
    restaurants = [_restaurant("x", "A", 1.0, 1.0), _restaurant("y", "C", 2.0, 2.0)]
    assert matched_restaurant_ids(resolve_matches(guide, restaurants, 0.05)) == {"x"}


@pytest.mark.parametrize("threshold", [-0.01, float("nan"), float("inf")])
def test_bad_threshold_rejected(threshold):
    with pytest.raises(ValueError):
        resolve_matches([], [], threshold)


def test_default_threshold_is_fifty_metres():
    guide = [_guide("Cafe", 0.0, 0.0)]
    # 0.0004 deg latitude ~ 44 m; 0.0006 deg ~ 67 m
    near = _restaurant("near", "Cafe", 0.0004, 0.0)
    far = _restaurant("far", "Cafe", 0.0006, 0.0)
    assert [p.restaurant.id for p in resolve_matches(guide, [near, far])] == ["near"]
