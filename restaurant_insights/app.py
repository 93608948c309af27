from __future__ import annotations

import logging
import os

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from . import queries
from .analytics.models import CitySummary, EngagementStats, RestaurantDetail, TopRestaurant
from .data_store.store import get_repository
from .geo.distance import InvalidCoordinate
from .matching.models import MatchedPair
from .peers.cache import get_cache_stats
from .peers.models import ClassificationResult, PeerGroup
from .ranking.config import DEFAULT_RANKING_CONFIG
from .ranking.models import DistanceResult, MapRestaurant
from .scan import ScanCancelled, ScanGuard

logger = logging.getLogger(__name__)

SCAN_TIMEOUT_SECONDS = float(os.environ.get("SCAN_TIMEOUT_SECONDS", "5"))

app = FastAPI(title="Restaurant Insights API", version="1.0.0")


def _guard() -> ScanGuard:
    return ScanGuard(timeout=SCAN_TIMEOUT_SECONDS)


@app.exception_handler(InvalidCoordinate)
async def invalid_coordinate_handler(request: Request, exc: InvalidCoordinate) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ScanCancelled)
async def scan_cancelled_handler(request: Request, exc: ScanCancelled) -> JSONResponse:
    logger.warning("Scan abandoned for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    repo = get_repository()
    return {
        "snapshot_version": repo.version,
        "cities": [c.model_dump() for c in queries.cities(repo)],
    }


# ── Guide matching ───────────────────────────────────────────────────────


@app.get("/guide-matches", response_model=list[MatchedPair])
def guide_matches(
    proximity_km: float | None = Query(default=None, ge=0.0, le=10.0),
) -> list[MatchedPair]:
    return queries.guide_matches(get_repository(), proximity_km)


@app.get("/guide-engagement-stats", response_model=list[EngagementStats])
def guide_engagement_stats() -> list[EngagementStats]:
    return queries.guide_engagement(get_repository())


# ── City insights ────────────────────────────────────────────────────────


@app.get("/peer-group/{city}", response_model=PeerGroup)
def peer_group(
    city: str,
    state: str | None = None,
    category: str | None = None,
    min_rating: float = Query(default=0.0, ge=0.0, le=5.0),
    max_review_count: int | None = Query(default=None, ge=0),
) -> PeerGroup:
    return queries.peer_group(
        get_repository(), city, category,
        state=state, min_rating=min_rating, max_review_count=max_review_count, guard=_guard(),
    )


@app.get("/hidden-gems/{city}", response_model=list[ClassificationResult])
def hidden_gems(
    city: str,
    state: str | None = None,
    category: str | None = None,
    min_rating: float = Query(default=0.0, ge=0.0, le=5.0),
    max_review_count: int | None = Query(default=None, ge=0),
) -> list[ClassificationResult]:
    return queries.hidden_gems(
        get_repository(), city, category,
        state=state, min_rating=min_rating, max_review_count=max_review_count, guard=_guard(),
    )


@app.get("/restaurant/{restaurant_id}", response_model=RestaurantDetail)
def restaurant(restaurant_id: str) -> RestaurantDetail:
    detail = queries.restaurant_detail(get_repository(), restaurant_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return detail


@app.get("/city-stats/{city}", response_model=CitySummary)
def city_stats(city: str, state: str | None = None) -> CitySummary:
    summary = queries.city_stats(get_repository(), city, state)
    if summary.total_restaurants == 0:
        raise HTTPException(status_code=404, detail="City not found or has no restaurants")
    return summary


@app.get("/city-top-restaurants/{city}", response_model=list[TopRestaurant])
def city_top_restaurants(
    city: str,
    state: str | None = None,
    min_rating: float = Query(default=0.0, ge=0.0, le=5.0),
    min_review_count: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> list[TopRestaurant]:
    return queries.city_top_restaurants(
        get_repository(), city, state, min_rating, min_review_count, limit,
    )


# ── Geospatial ───────────────────────────────────────────────────────────


@app.get("/nearby-restaurants", response_model=list[DistanceResult])
def nearby_restaurants(
    latitude: float,
    longitude: float,
    radius_km: float = Query(default=DEFAULT_RANKING_CONFIG.default_radius_km, ge=0.0, le=500.0),
    quality: bool = False,
    limit: int | None = Query(default=None, ge=1, le=500),
) -> list[DistanceResult]:
    return queries.nearby_restaurants(
        get_repository(), (latitude, longitude), radius_km, quality, limit, guard=_guard(),
    )


@app.get("/map-restaurants", response_model=list[MapRestaurant])
def map_restaurants(
    latitude: float,
    longitude: float,
    radius_km: float = Query(default=DEFAULT_RANKING_CONFIG.default_radius_km, ge=0.0, le=500.0),
) -> list[MapRestaurant]:
    return queries.map_restaurants(
        get_repository(), (latitude, longitude), radius_km, guard=_guard(),
    )


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()
