from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class PeerConfig:
    cache_ttl_seconds: float = float(os.getenv("PEER_CACHE_TTL_SECONDS", "300"))
    scan_check_interval: int = int(os.getenv("PEER_SCAN_CHECK_INTERVAL", "512"))


DEFAULT_PEER_CONFIG = PeerConfig()
