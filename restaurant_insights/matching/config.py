from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class MatchingConfig:
    # 50 m
    proximity_threshold_km: float = float(os.getenv("MATCH_PROXIMITY_KM", "0.05"))


DEFAULT_MATCHING_CONFIG = MatchingConfig()
