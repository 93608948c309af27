from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..geo.distance import validate_coordinate


class AwardTier(str, Enum):
    unrated = "unrated"
    selected = "selected"
    bib = "bib"
    one_star = "one_star"
    two_star = "two_star"
    three_star = "three_star"

    @property
    def rank(self) -> int:
        return _AWARD_ORDER.index(self)

    @classmethod
    def parse(cls, label: str | AwardTier | None) -> AwardTier:
        """Map a guide award label (e.g. ``"1 Star"``, ``"Bib Gourmand"``) to a tier."""
        if isinstance(label, AwardTier):
            return label
        if label is None:
            return cls.unrated
        key = " ".join(str(label).replace("_", " ").split()).casefold()
        if not key:
            return cls.unrated
        try:
            return _AWARD_LABELS[key]
        except KeyError:
            raise ValueError(f"Unknown award label: {label!r}") from None


_AWARD_ORDER = [
    AwardTier.unrated,
    AwardTier.selected,
    AwardTier.bib,
    AwardTier.one_star,
    AwardTier.two_star,
    AwardTier.three_star,
]

_AWARD_LABELS: dict[str, AwardTier] = {
    "unrated": AwardTier.unrated,
    "none": AwardTier.unrated,
    "selected": AwardTier.selected,
    "selected restaurant": AwardTier.selected,
    "selected restaurants": AwardTier.selected,
    "bib": AwardTier.bib,
    "bib gourmand": AwardTier.bib,
    "one star": AwardTier.one_star,
    "1 star": AwardTier.one_star,
    "two star": AwardTier.two_star,
    "two stars": AwardTier.two_star,
    "2 star": AwardTier.two_star,
    "2 stars": AwardTier.two_star,
    "three star": AwardTier.three_star,
    "three stars": AwardTier.three_star,
    "3 star": AwardTier.three_star,
    "3 stars": AwardTier.three_star,
}


class RestaurantRecord(BaseModel):
    """A crowd-review listing as read from the datastore."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    latitude: float | None = None
    longitude: float | None = None
    rating: float = Field(..., ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)
    categories: frozenset[str] = Field(default_factory=frozenset)

    @model_validator(mode="after")
    def _check_coordinates(self) -> RestaurantRecord:
        if self.coordinates is not None:
            validate_coordinate(self.coordinates)
        return self

    @property
    def coordinates(self) -> tuple[float, float] | None:
        if self.latitude is None or self.longitude is None:
            return None
        return self.latitude, self.longitude


class GuideEntry(BaseModel):
    """A curated guide listing. Shares no key with ``RestaurantRecord``."""

    model_config = ConfigDict(frozen=True)

    name: str
    address: str = ""
    latitude: float | None = None
    longitude: float | None = None
    award: AwardTier = AwardTier.unrated
    price: str | None = None
    green_star: bool = False
    description: str | None = None

    @field_validator("award", mode="before")
    @classmethod
    def _parse_award(cls, value):
        return AwardTier.parse(value)

    @model_validator(mode="after")
    def _check_coordinates(self) -> GuideEntry:
        if self.coordinates is not None:
            validate_coordinate(self.coordinates)
        return self

    @property
    def coordinates(self) -> tuple[float, float] | None:
        if self.latitude is None or self.longitude is None:
            return None
        return self.latitude, self.longitude
