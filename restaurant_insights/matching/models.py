from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ..data_store.models import GuideEntry, RestaurantRecord


class MatchedPair(BaseModel):
    """A restaurant and a guide entry judged to be the same venue."""

    model_config = ConfigDict(frozen=True)

    restaurant: RestaurantRecord
    guide: GuideEntry
    distance_km: float
