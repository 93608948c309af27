from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..data_store.models import AwardTier, RestaurantRecord


class EngagementStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    partition: str
    restaurant_count: int = Field(..., ge=0)
    ratio_sample_size: int = Field(..., ge=0)
    mean_photos_per_review: float | None = None


class CitySummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    city: str
    state: str | None = None
    avg_rating: float | None = None
    total_restaurants: int = 0
    total_guide_restaurants: int = 0
    award_breakdown: dict[str, int] = Field(default_factory=dict)


class TopRestaurant(BaseModel):
    model_config = ConfigDict(frozen=True)

    restaurant_id: str
    name: str
    address: str
    city: str
    state: str
    rating: float
    review_count: int
    award: AwardTier | None = None


class CityRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    city: str
    state: str


class GuideAward(BaseModel):
    model_config = ConfigDict(frozen=True)

    award: AwardTier
    price: str | None = None
    green_star: bool = False
    description: str | None = None
    distance_km: float = Field(..., ge=0.0)


class RestaurantDetail(BaseModel):
    """One restaurant with its categories in name order and its guide listing, if any."""

    model_config = ConfigDict(frozen=True)

    restaurant: RestaurantRecord
    categories: list[str]
    guide: GuideAward | None = None
