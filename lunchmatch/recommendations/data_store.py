"""
Restaurant catalog source.

Loads the processed catalog written by ``data_ingestion`` on first use, or the
bundled raw seed when no processed file exists yet.
"""
from __future__ import annotations

import logging

from ..data_ingestion.config import DEFAULT_INGESTION_CONFIG, IngestionConfig
from ..data_ingestion.ingest import frame_to_restaurants, load_catalog_frame
from .models import Restaurant

logger = logging.getLogger(__name__)

_catalog: list[Restaurant] | None = None


def _load(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> list[Restaurant]:
    path = config.processed_path if config.processed_path.exists() else config.raw_path
    restaurants = frame_to_restaurants(load_catalog_frame(path, config), config)
    logger.info("Loaded %d restaurants from %s", len(restaurants), path)
    return restaurants


def get_catalog() -> list[Restaurant]:
    """Return the in-memory catalog, loading it on first call."""
    global _catalog
    if _catalog is None:
        _catalog = _load()
    return _catalog


def list_restaurants(limit: int = 100) -> list[Restaurant]:
    return get_catalog()[:limit]


def get_restaurant(restaurant_id: str) -> Restaurant | None:
    for restaurant in get_catalog():
        if restaurant.id == restaurant_id:
            return restaurant
    return None


def set_catalog(restaurants: list[Restaurant] | None) -> None:
    """Replace the catalog; ``None`` forces a reload on next access."""
    global _catalog
    _catalog = restaurants
