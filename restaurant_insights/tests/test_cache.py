from __future__ import annotations

from unittest.mock import patch

from restaurant_insights import queries
from restaurant_insights.data_store.models import RestaurantRecord
from restaurant_insights.data_store.repository import InMemoryRepository
from restaurant_insights.data_store.store import set_repository
from restaurant_insights.peers.aggregator import make_key
from restaurant_insights.peers.cache import cache_get, cache_set, clear_cache, get_cache_stats
from restaurant_insights.peers.models import PeerGroup


def _repo(version: int = 1, rating: float = 4.0) -> InMemoryRepository:
    return InMemoryRepository(
        [RestaurantRecord(id="1", name="A", city="Boise", rating=rating, review_count=10)],
        version=version,
    )


def test_cache_miss_then_hit():
    clear_cache()
    repo = _repo()
    queries.peer_group(repo, "Boise")
    assert get_cache_stats()["misses"] == 1

    queries.peer_group(repo, "Boise")
    stats = get_cache_stats()
    assert stats["hits"] == 1
    assert stats["size"] == 1
    assert stats["hit_rate"] == 50.0


def test_cache_different_cohorts_miss():
    clear_cache()
    repo = _repo()
    queries.peer_group(repo, "Boise")
    queries.peer_group(repo, "Boise", "pizza")
    stats = get_cache_stats()
    assert stats["misses"] == 2
    assert stats["hits"] == 0


def test_new_snapshot_version_is_not_served_stale():
    clear_cache()
    first = queries.peer_group(_repo(version=1, rating=4.0), "Boise")
    second = queries.peer_group(_repo(version=2, rating=2.0), "Boise")
    assert first.mean_rating == 4.0
    assert second.mean_rating == 2.0


def test_set_repository_clears_cache():
    clear_cache()
    queries.peer_group(_repo(), "Boise")
    assert get_cache_stats()["size"] == 1
    set_repository(_repo())
    assert get_cache_stats()["size"] == 0
    set_repository(None)


@patch("restaurant_insights.peers.cache.time.time")
def test_cache_entry_expires(mock_time):
    clear_cache()
    key = make_key("Boise")
    group = PeerGroup(key=key)

    mock_time.return_value = 1000.0
    cache_set(key, 1, group)
    mock_time.return_value = 1000.0 + 299
    assert cache_get(key, 1, ttl=300) == group
    mock_time.return_value = 1000.0 + 301
    assert cache_get(key, 1, ttl=300) is None
    assert get_cache_stats()["size"] == 0
    assert get_cache_stats()["expired"] == 1


def test_stats_describe_cached_cohorts():
    clear_cache()
    queries.peer_group(_repo(version=1), "Boise")
    queries.peer_group(_repo(version=2), "Boise")
    queries.peer_group(_repo(version=2), "Nampa")

    stats = get_cache_stats()
    assert stats["size"] == 3
    assert stats["snapshot_versions"] == [1, 2]
    assert stats["cities"] == ["Boise", "Nampa"]
    assert stats["empty_cohorts"] == 1
    assert stats["ttl_seconds"] > 0

    clear_cache()
    stats = get_cache_stats()
    assert stats["snapshot_versions"] == []
    assert stats["cities"] == []
