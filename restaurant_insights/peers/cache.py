"""
TTL cache for peer-group aggregates.

Keys combine the cohort key with the snapshot version, so a refreshed
snapshot never serves a stale aggregate even before ``clear_cache`` runs.
"""
from __future__ import annotations

import hashlib
import json
import threading
import time

from .config import DEFAULT_PEER_CONFIG
from .models import PeerGroup, PeerGroupKey

_cache: dict[str, dict] = {}
_lock = threading.Lock()
_hits: int = 0
_misses: int = 0
_expired: int = 0


def _make_key(key: PeerGroupKey, snapshot_version: int) -> str:
    payload = {"key": key.model_dump(), "version": snapshot_version}
    normalized = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(
    key: PeerGroupKey,
    snapshot_version: int,
    ttl: float = DEFAULT_PEER_CONFIG.cache_ttl_seconds,
) -> PeerGroup | None:
    global _hits, _misses, _expired
    cache_key = _make_key(key, snapshot_version)
    with _lock:
        entry = _cache.get(cache_key)
        if entry and time.time() - entry["created_at"] < ttl:
            _hits += 1
            return entry["value"]
        if entry:
            del _cache[cache_key]
            _expired += 1
        _misses += 1
        return None


def cache_set(key: PeerGroupKey, snapshot_version: int, value: PeerGroup) -> None:
    cache_key = _make_key(key, snapshot_version)
    with _lock:
        _cache[cache_key] = {"value": value, "version": snapshot_version, "created_at": time.time()}


def get_cache_stats() -> dict:
    """Hit/miss counters plus which snapshots and cities the cached cohorts cover."""
    with _lock:
        lookups = _hits + _misses
        groups = [entry["value"] for entry in _cache.values()]
        return {
            "size": len(_cache),
            "hits": _hits,
            "misses": _misses,
            "expired": _expired,
            "hit_rate": round(_hits / lookups * 100, 1) if lookups > 0 else 0.0,
            "ttl_seconds": DEFAULT_PEER_CONFIG.cache_ttl_seconds,
            "snapshot_versions": sorted({entry["version"] for entry in _cache.values()}),
            "cities": sorted({group.key.city for group in groups}),
            "empty_cohorts": sum(1 for group in groups if group.is_empty),
        }


def clear_cache() -> None:
    """Drop every cached cohort and reset the counters; called on snapshot swap."""
    global _hits, _misses, _expired
    with _lock:
        _cache.clear()
        _hits = 0
        _misses = 0
        _expired = 0
