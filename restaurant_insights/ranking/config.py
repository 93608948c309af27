from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class RankingConfig:
    chunk_size: int = int(os.getenv("RANK_CHUNK_SIZE", "1024"))
    default_radius_km: float = 8.0
    map_limit: int = 30
    quality_min_rating: float = 4.5
    quality_min_review_count: int = 300


DEFAULT_RANKING_CONFIG = RankingConfig()
