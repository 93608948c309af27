from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "processed"


@dataclass(frozen=True)
class DataStoreConfig:
    """
    Location of the snapshot files read by ``load_repository``.
    """

    data_dir: Path = Path(os.getenv("INSIGHTS_DATA_DIR", str(_DEFAULT_DATA_DIR)))
    restaurants_filename: str = "restaurants.csv"
    categories_filename: str = "categories.csv"
    guide_filename: str = "guide.csv"
    photos_filename: str = "photos.csv"

    @property
    def restaurants_path(self) -> Path:
        return self.data_dir / self.restaurants_filename

    @property
    def categories_path(self) -> Path:
        return self.data_dir / self.categories_filename

    @property
    def guide_path(self) -> Path:
        return self.data_dir / self.guide_filename

    @property
    def photos_path(self) -> Path:
        return self.data_dir / self.photos_filename


DEFAULT_DATA_STORE_CONFIG = DataStoreConfig()
