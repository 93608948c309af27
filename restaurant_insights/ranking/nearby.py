from __future__ import annotations

import logging
import math
from collections.abc import Iterable

import numpy as np

from ..data_store.models import RestaurantRecord
from ..geo.distance import Coordinate, bounding_box, distances_km, validate_coordinate
from ..scan import ScanGuard, check_guard
from .config import DEFAULT_RANKING_CONFIG
from .models import DistanceResult, QualityGate

logger = logging.getLogger(__name__)


def _within_radius(
    chunk: list[RestaurantRecord],
    origin: Coordinate,
    radius_km: float,
    box: tuple[float, float, float, float],
) -> list[DistanceResult]:
    lats = np.array([r.latitude for r in chunk], dtype=float)
    lons = np.array([r.longitude for r in chunk], dtype=float)

    # Validates every coordinate in the chunk before the box can hide bad ones.
    dists = distances_km(origin, lats, lons)

    lat_min, lat_max, lon_min, lon_max = box
    keep = (
        (lats >= lat_min) & (lats <= lat_max)
        & (lons >= lon_min) & (lons <= lon_max)
        & (dists <= radius_km)
    )
    return [
        DistanceResult(restaurant_id=chunk[i].id, distance_km=float(dists[i]), restaurant=chunk[i])
        for i in np.flatnonzero(keep)
    ]


def nearby(
    restaurants: Iterable[RestaurantRecord],
    origin: Coordinate,
    radius_km: float,
    quality_gate: QualityGate | None = None,
    *,
    limit: int | None = None,
    guard: ScanGuard | None = None,
    chunk_size: int = DEFAULT_RANKING_CONFIG.chunk_size,
) -> list[DistanceResult]:
    """
    Restaurants within *radius_km* of *origin*, nearest first.

    Without a gate results are ordered by distance alone. With a gate only
    admitted restaurants are kept, ordered by distance, then rating and
    review count descending. Restaurants without coordinates are skipped.
    """
    origin = validate_coordinate(origin)
    if not math.isfinite(radius_km) or radius_km < 0:
        raise ValueError(f"radius_km must be a finite value >= 0, got {radius_km}")
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")

    check_guard(guard)
    box = bounding_box(origin, radius_km)
    results: list[DistanceResult] = []
    chunk: list[RestaurantRecord] = []
    scanned = 0

    for record in restaurants:
        if record.coordinates is None:
            continue
        if quality_gate is not None and not quality_gate.admits(record):
            continue
        chunk.append(record)
        if len(chunk) >= chunk_size:
            check_guard(guard)
            results.extend(_within_radius(chunk, origin, radius_km, box))
            scanned += len(chunk)
            chunk = []

    if chunk:
        check_guard(guard)
        results.extend(_within_radius(chunk, origin, radius_km, box))
        scanned += len(chunk)

    if quality_gate is None:
        results.sort(key=lambda d: d.distance_km)
    else:
        results.sort(key=lambda d: (d.distance_km, -d.restaurant.rating, -d.restaurant.review_count))

    logger.debug("nearby: %d of %d located restaurants within %.2f km", len(results), scanned, radius_km)
    if limit is not None:
        results = results[:limit]
    return results
