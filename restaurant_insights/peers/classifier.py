from __future__ import annotations

from collections.abc import Iterable

from ..data_store.models import RestaurantRecord
from .models import ClassificationResult, Label, PeerGroup

_LABEL_ORDER = {Label.hidden_gem: 0, Label.overrated: 1, Label.typical: 2}


def classify_restaurant(record: RestaurantRecord, peer: PeerGroup) -> Label:
    """Label one restaurant against a non-empty peer group. Ties are typical."""
    if peer.is_empty:
        raise ValueError("Cannot classify against an empty peer group")

    if record.rating > peer.mean_rating and record.review_count < peer.mean_review_count:
        return Label.hidden_gem
    if record.rating < peer.mean_rating and record.review_count > peer.mean_review_count:
        return Label.overrated
    return Label.typical


def classify(
    restaurants: Iterable[RestaurantRecord],
    peer: PeerGroup,
) -> list[ClassificationResult]:
    """
    Label every record in *restaurants* that is a member of *peer*.

    Records outside the group, and repeated ids, are skipped. An empty peer
    group yields an empty list.
    """
    if peer.is_empty:
        return []

    results: dict[str, ClassificationResult] = {}
    for record in restaurants:
        if record.id in results or record.id not in peer.member_ids:
            continue
        results[record.id] = ClassificationResult(
            restaurant_id=record.id,
            name=record.name,
            rating=record.rating,
            review_count=record.review_count,
            label=classify_restaurant(record, peer),
            peer_group=peer,
        )

    return sorted(
        results.values(),
        key=lambda r: (_LABEL_ORDER[r.label], -r.rating, r.restaurant_id),
    )
