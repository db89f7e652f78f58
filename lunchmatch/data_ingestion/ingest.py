from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List

import pandas as pd
from pydantic import ValidationError

from ..recommendations.models import Restaurant
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

logger = logging.getLogger(__name__)

CANONICAL_COLUMNS: List[str] = [
    "id",
    "name",
    "address",
    "lat",
    "lng",
    "cuisine_type",
    "price_min",
    "price_max",
    "quietness",
    "service_speed",
    "atmosphere",
    "private_booths",
    "walkable_distance",
    "ideal_meeting_types",
    "rating_average",
    "rating_count",
]

_NUMERIC_COLUMNS = ["lat", "lng", "price_min", "price_max", "quietness", "rating_average", "rating_count"]
_TRUTHY = {"true", "yes", "1", "y"}


def _split_list(value: Any, separator: str = ";") -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    parts = [p.strip() for p in str(value).split(separator) if p.strip()]
    return separator.join(parts)


def _normalize_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _clamp(value: float | None, low: float, high: float) -> float | None:
    if value is None or pd.isna(value):
        return None
    return max(low, min(high, float(value)))


def normalize_frame(df: pd.DataFrame, config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> pd.DataFrame:
    """Coerce a raw catalog frame into the canonical columns."""
    canonical = df.reindex(columns=CANONICAL_COLUMNS)
    canonical["id"] = canonical["id"].astype("string").str.strip()
    canonical["name"] = canonical["name"].astype("string").str.strip()
    canonical["address"] = canonical["address"].fillna("").astype(str).str.strip()

    for col in _NUMERIC_COLUMNS:
        canonical[col] = pd.to_numeric(canonical[col], errors="coerce")

    canonical["quietness"] = canonical["quietness"].apply(lambda v: _clamp(v, 0.0, 100.0))
    canonical["rating_average"] = canonical["rating_average"].apply(lambda v: _clamp(v, 0.0, 5.0))

    for col in ("cuisine_type", "ideal_meeting_types"):
        canonical[col] = canonical[col].apply(lambda v: _split_list(v, config.list_separator))
    for col in ("private_booths", "walkable_distance"):
        canonical[col] = canonical[col].fillna(False).apply(_normalize_flag)
    for col in ("service_speed", "atmosphere"):
        canonical[col] = canonical[col].astype("string").str.strip().str.lower()

    return canonical


def _optional(value: Any) -> Any:
    return None if value is None or pd.isna(value) else value


def _row_to_record(row: pd.Series, separator: str) -> dict[str, Any]:
    lat, lng = _optional(row["lat"]), _optional(row["lng"])
    price_min, price_max = _optional(row["price_min"]), _optional(row["price_max"])
    rating = _optional(row["rating_average"])
    cuisines = row["cuisine_type"] or ""
    meeting_types = row["ideal_meeting_types"] or ""

    return {
        "id": _optional(row["id"]),
        "name": _optional(row["name"]),
        "address": row["address"],
        "coordinates": {"lat": lat, "lng": lng} if lat is not None and lng is not None else None,
        "cuisine_type": [c for c in cuisines.split(separator) if c],
        "price_range": (
            {"min": price_min, "max": price_max}
            if price_min is not None and price_max is not None
            else None
        ),
        "attributes": {
            "quietness": _optional(row["quietness"]),
            "service_speed": _optional(row["service_speed"]),
            "atmosphere": _optional(row["atmosphere"]),
            "private_booths": bool(row["private_booths"]),
            "walkable_distance": bool(row["walkable_distance"]),
            "ideal_meeting_types": [m for m in meeting_types.split(separator) if m],
        },
        "rating": (
            {"average": rating, "count": int(_optional(row["rating_count"]) or 0)}
            if rating is not None
            else None
        ),
    }


def frame_to_restaurants(
    df: pd.DataFrame, config: IngestionConfig = DEFAULT_INGESTION_CONFIG
) -> list[Restaurant]:
    """Validate canonical rows into ``Restaurant`` records, skipping bad rows."""
    restaurants: list[Restaurant] = []
    for idx, row in df.iterrows():
        try:
            restaurants.append(Restaurant.model_validate(_row_to_record(row, config.list_separator)))
        except ValidationError as exc:
            logger.warning("Skipping malformed catalog row %s: %s", idx, exc.errors()[0]["msg"])
    return restaurants


def load_catalog_frame(path: Path, config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> pd.DataFrame:
    return normalize_frame(pd.read_csv(path), config)


def run_ingestion(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> Path:
    """
    Normalize the raw seed catalog and persist it for the recommendation service.

    Rows that do not validate as restaurants are dropped before writing.
    """
    config.processed_data_dir.mkdir(parents=True, exist_ok=True)

    canonical = load_catalog_frame(config.raw_path, config)
    valid_ids = {r.id for r in frame_to_restaurants(canonical, config)}
    canonical = canonical[canonical["id"].isin(valid_ids)]

    output_path = config.processed_path
    canonical.to_csv(output_path, index=False)
    logger.info("Wrote %d restaurants to %s", len(canonical), output_path)
    return output_path


if __name__ == "__main__":
    path = run_ingestion()
    print(f"Ingestion complete. Processed data saved to: {path}")
