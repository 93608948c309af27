from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from .config import DEFAULT_DATA_STORE_CONFIG, DataStoreConfig
from .models import GuideEntry, RestaurantRecord
from .repository import InMemoryRepository

logger = logging.getLogger(__name__)

RESTAURANT_COLUMNS = [
    "business_id",
    "name",
    "address",
    "city",
    "state",
    "postal_code",
    "stars",
    "review_count",
    "latitude",
    "longitude",
]

GUIDE_COLUMNS = [
    "name",
    "address",
    "latitude",
    "longitude",
    "award",
    "price",
    "greenstar",
    "description",
]


def _text(value) -> str:
    return "" if pd.isna(value) else str(value).strip()


def _optional_text(value) -> str | None:
    return None if pd.isna(value) else str(value)


def _optional_float(value) -> float | None:
    return None if pd.isna(value) else float(value)


def _flag(value) -> bool:
    if pd.isna(value):
        return False
    return str(value).strip().lower() in ("true", "1", "1.0", "yes", "y")


def _load_categories(path: Path) -> dict[str, frozenset[str]]:
    if not path.exists():
        return {}
    df = pd.read_csv(path, dtype={"business_id": str, "category": str})
    df["category"] = df["category"].fillna("").str.strip()
    df = df[df["category"] != ""]
    return {bid: frozenset(group["category"]) for bid, group in df.groupby("business_id")}


def _load_restaurants(config: DataStoreConfig) -> list[RestaurantRecord]:
    df = pd.read_csv(config.restaurants_path, dtype={"business_id": str, "postal_code": str})
    missing = [c for c in RESTAURANT_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{config.restaurants_path} is missing columns: {missing}")

    # Unparseable numerics become NaN; those rows are dropped below.
    df["stars"] = pd.to_numeric(df["stars"], errors="coerce")
    df["review_count"] = pd.to_numeric(df["review_count"], errors="coerce")
    df["latitude"] = pd.to_numeric(df["latitude"], errors="coerce")
    df["longitude"] = pd.to_numeric(df["longitude"], errors="coerce")

    categories = _load_categories(config.categories_path)

    records: list[RestaurantRecord] = []
    dropped = 0
    for row in df[RESTAURANT_COLUMNS].itertuples(index=False):
        if pd.isna(row.business_id) or pd.isna(row.stars) or pd.isna(row.review_count):
            dropped += 1
            continue
        try:
            records.append(RestaurantRecord(
                id=str(row.business_id),
                name=_text(row.name),
                address=_text(row.address),
                city=_text(row.city),
                state=_text(row.state),
                postal_code=_text(row.postal_code),
                latitude=_optional_float(row.latitude),
                longitude=_optional_float(row.longitude),
                rating=float(row.stars),
                review_count=int(row.review_count),
                categories=categories.get(str(row.business_id), frozenset()),
            ))
        except ValidationError:
            dropped += 1

    if dropped:
        logger.warning("Dropped %d malformed restaurant rows from %s", dropped, config.restaurants_path)
    return records


def _load_guide(config: DataStoreConfig) -> list[GuideEntry]:
    if not config.guide_path.exists():
        logger.warning("Guide file %s not found, continuing without guide entries", config.guide_path)
        return []

    df = pd.read_csv(config.guide_path)
    for col in GUIDE_COLUMNS:
        if col not in df.columns:
            df[col] = pd.NA
    df["latitude"] = pd.to_numeric(df["latitude"], errors="coerce")
    df["longitude"] = pd.to_numeric(df["longitude"], errors="coerce")

    entries: list[GuideEntry] = []
    dropped = 0
    for row in df[GUIDE_COLUMNS].itertuples(index=False):
        if pd.isna(row.name):
            dropped += 1
            continue
        try:
            entries.append(GuideEntry(
                name=str(row.name),
                address=_text(row.address),
                latitude=_optional_float(row.latitude),
                longitude=_optional_float(row.longitude),
                award=_optional_text(row.award),
                price=_optional_text(row.price),
                green_star=_flag(row.greenstar),
                description=_optional_text(row.description),
            ))
        except ValidationError:
            dropped += 1

    if dropped:
        logger.warning("Dropped %d malformed guide rows from %s", dropped, config.guide_path)
    return entries


def _load_photo_counts(path: Path) -> dict[str, int]:
    if not path.exists():
        return {}
    df = pd.read_csv(path, dtype={"business_id": str})
    return {str(k): int(v) for k, v in df.groupby("business_id").size().items()}


def load_repository(
    config: DataStoreConfig = DEFAULT_DATA_STORE_CONFIG,
    version: int = 1,
) -> InMemoryRepository:
    """
    Read the CSV snapshot described by *config* into an in-memory repository.

    ``restaurants.csv`` is required; categories, guide and photo files are
    optional.
    """
    restaurants = _load_restaurants(config)
    guide = _load_guide(config)
    photos = _load_photo_counts(config.photos_path)
    logger.info(
        "Loaded snapshot v%d: %d restaurants, %d guide entries, %d photo counts",
        version, len(restaurants), len(guide), len(photos),
    )
    return InMemoryRepository(restaurants, guide, photos, version=version)
