from __future__ import annotations

import logging

from ..peers.cache import clear_cache
from .config import DEFAULT_DATA_STORE_CONFIG, DataStoreConfig
from .loader import load_repository
from .repository import RestaurantRepository

logger = logging.getLogger(__name__)

_repository: RestaurantRepository | None = None


def get_repository() -> RestaurantRepository:
    """Return the current snapshot, loading it from disk on first call."""
    global _repository
    if _repository is None:
        _repository = load_repository(DEFAULT_DATA_STORE_CONFIG)
    return _repository


def set_repository(repository: RestaurantRepository | None) -> None:
    """Swap the current snapshot. Cached peer groups are discarded."""
    global _repository
    _repository = repository
    clear_cache()


def refresh_repository(config: DataStoreConfig = DEFAULT_DATA_STORE_CONFIG) -> RestaurantRepository:
    """Reload the snapshot from disk under a new version number."""
    version = _repository.version + 1 if _repository is not None else 1
    repository = load_repository(config, version=version)
    set_repository(repository)
    logger.info("Snapshot refreshed to v%d", version)
    return repository
