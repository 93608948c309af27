from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..data_store.models import AwardTier, RestaurantRecord
from ..peers.models import Label
from .config import DEFAULT_RANKING_CONFIG


class QualityGate(BaseModel):
    """Keep restaurants with ``rating >= min_rating`` and ``review_count > min_review_count``."""

    model_config = ConfigDict(frozen=True)

    min_rating: float = Field(default=DEFAULT_RANKING_CONFIG.quality_min_rating, ge=0.0, le=5.0)
    min_review_count: int = Field(default=DEFAULT_RANKING_CONFIG.quality_min_review_count, ge=0)

    def admits(self, record: RestaurantRecord) -> bool:
        return record.rating >= self.min_rating and record.review_count > self.min_review_count


class DistanceResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    restaurant_id: str
    distance_km: float
    restaurant: RestaurantRecord


class MapRestaurant(BaseModel):
    """A nearby restaurant annotated with its city label and guide award."""

    model_config = ConfigDict(frozen=True)

    restaurant_id: str
    distance_km: float
    restaurant: RestaurantRecord
    status: Label | None = None
    award: AwardTier | None = None
