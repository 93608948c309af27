from __future__ import annotations

from collections.abc import Iterable

from ..data_store.models import RestaurantRecord
from ..scan import ScanGuard, check_guard
from .config import DEFAULT_PEER_CONFIG
from .models import PeerGroup, PeerGroupKey


def _matches_category(categories: frozenset[str], needle: str) -> bool:
    return any(needle in c.casefold() for c in categories)


def in_cohort(record: RestaurantRecord, key: PeerGroupKey) -> bool:
    """Whether *record* belongs to the cohort described by *key*."""
    if record.city != key.city:
        return False
    if key.state is not None and record.state != key.state:
        return False
    if record.rating < key.min_rating:
        return False
    if key.max_review_count is not None and record.review_count > key.max_review_count:
        return False
    if key.category is not None and not _matches_category(record.categories, key.category.casefold()):
        return False
    return True


def make_key(
    city: str,
    category_filter: str | None = None,
    state: str | None = None,
    min_rating: float = 0.0,
    max_review_count: int | None = None,
) -> PeerGroupKey:
    category = category_filter.strip() if category_filter else None
    return PeerGroupKey(
        city=city,
        category=category or None,
        state=state,
        min_rating=min_rating,
        max_review_count=max_review_count,
    )


def aggregate(
    restaurants: Iterable[RestaurantRecord],
    key: PeerGroupKey,
    guard: ScanGuard | None = None,
    check_interval: int = DEFAULT_PEER_CONFIG.scan_check_interval,
) -> PeerGroup:
    """Compute cohort means over *restaurants*, counting each id once."""
    members: dict[str, RestaurantRecord] = {}
    for i, record in enumerate(restaurants):
        if i % check_interval == 0:
            check_guard(guard)
        if record.id in members or not in_cohort(record, key):
            continue
        members[record.id] = record

    if not members:
        return PeerGroup(key=key)

    n = len(members)
    return PeerGroup(
        key=key,
        mean_rating=sum(r.rating for r in members.values()) / n,
        mean_review_count=sum(r.review_count for r in members.values()) / n,
        sample_size=n,
        member_ids=frozenset(members),
    )


def compute_peer_group(
    restaurants: Iterable[RestaurantRecord],
    city: str,
    category_filter: str | None = None,
    *,
    state: str | None = None,
    min_rating: float = 0.0,
    max_review_count: int | None = None,
    guard: ScanGuard | None = None,
) -> PeerGroup:
    """
    Aggregate the peer group for *city*.

    *city* and *state* must match exactly. *category_filter* keeps records
    with at least one category containing it (case-insensitive). An empty
    cohort yields ``sample_size == 0`` with absent means.
    """
    key = make_key(city, category_filter, state, min_rating, max_review_count)
    return aggregate(restaurants, key, guard=guard)
