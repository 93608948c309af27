from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PeerGroupKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    city: str
    category: str | None = None
    state: str | None = None
    min_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    max_review_count: int | None = Field(default=None, ge=0)


class PeerGroup(BaseModel):
    """
    Cohort statistics. An empty cohort has ``sample_size == 0`` and no means;
    it must not be used for classification.

    ``member_ids`` lists the restaurants the means were computed over. It is
    left out of serialised output.
    """

    model_config = ConfigDict(frozen=True)

    key: PeerGroupKey
    mean_rating: float | None = None
    mean_review_count: float | None = None
    sample_size: int = Field(default=0, ge=0)
    member_ids: frozenset[str] = Field(default_factory=frozenset, exclude=True)

    @model_validator(mode="after")
    def _means_match_sample_size(self) -> PeerGroup:
        has_means = self.mean_rating is not None and self.mean_review_count is not None
        if self.sample_size > 0 and not has_means:
            raise ValueError("non-empty peer group requires both means")
        if self.sample_size == 0 and (self.mean_rating is not None or self.mean_review_count is not None):
            raise ValueError("empty peer group must not carry means")
        if self.member_ids and len(self.member_ids) != self.sample_size:
            raise ValueError("member_ids must hold exactly sample_size ids")
        return self

    @property
    def is_empty(self) -> bool:
        return self.sample_size == 0


class Label(str, Enum):
    hidden_gem = "hidden_gem"
    overrated = "overrated"
    typical = "typical"


class ClassificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    restaurant_id: str
    name: str
    rating: float
    review_count: int
    label: Label
    peer_group: PeerGroup
