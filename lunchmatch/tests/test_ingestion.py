from pathlib import Path

import pandas as pd

from lunchmatch.data_ingestion.config import IngestionConfig
from lunchmatch.data_ingestion.ingest import (
    CANONICAL_COLUMNS,
    frame_to_restaurants,
    load_catalog_frame,
    run_ingestion,
)
from lunchmatch.recommendations.models import Atmosphere, MeetingType, ServiceSpeed

_HEADER = (
    "id,name,address,lat,lng,cuisine_type,price_min,price_max,quietness,service_speed,"
    "atmosphere,private_booths,walkable_distance,ideal_meeting_types,rating_average,rating_count"
)


def _write_raw(path: Path, *rows: str) -> Path:
    path.write_text("\n".join([_HEADER, *rows]) + "\n")
    return path


def test_run_ingestion_creates_non_empty_processed_file(tmp_path: Path):
    """
    End-to-end run over the bundled seed catalog.

    Uses a temporary output directory so we don't pollute real data directories.
    """
    cfg = IngestionConfig(processed_data_dir=tmp_path / "processed")

    output_path = run_ingestion(config=cfg)

    assert output_path.is_file(), "Processed CSV should be created"

    df = pd.read_csv(output_path)
    assert len(df) == 14
    assert list(df.columns) == CANONICAL_COLUMNS


def test_processed_file_round_trips_into_restaurants(tmp_path: Path):
    cfg = IngestionConfig(processed_data_dir=tmp_path / "processed")
    output_path = run_ingestion(config=cfg)

    restaurants = frame_to_restaurants(load_catalog_frame(output_path, cfg), cfg)
    by_id = {r.id: r for r in restaurants}

    sakura = by_id["sakura"]
    assert sakura.cuisine_type == ["Japanese", "Sushi"]
    assert sakura.attributes.atmosphere == Atmosphere.intimate
    assert sakura.attributes.service_speed == ServiceSpeed.medium
    assert sakura.attributes.private_booths is True
    assert MeetingType.investor_lunch in sakura.attributes.ideal_meeting_types
    assert sakura.rating.average == 4.7
    assert sakura.rating.count == 521


def test_malformed_rows_are_dropped(tmp_path: Path):
    raw = _write_raw(
        tmp_path / "raw.csv",
        'ok,Good Place,"1 Main St",37.1,-113.5,Thai;Asian,10,20,60,fast,casual,true,false,team-meeting,4.1,10',
        'noname,,"2 Main St",37.1,-113.5,Thai,10,20,60,fast,casual,false,false,team-meeting,4.1,10',
        'badmeeting,Bad Meeting,"3 Main St",37.1,-113.5,Thai,10,20,60,fast,casual,false,false,brunch,4.1,10',
    )
    cfg = IngestionConfig(raw_path=raw, processed_data_dir=tmp_path / "processed")

    restaurants = frame_to_restaurants(load_catalog_frame(raw, cfg), cfg)

    assert [r.id for r in restaurants] == ["ok"]


def test_optional_fields_become_absent(tmp_path: Path):
    raw = _write_raw(
        tmp_path / "raw.csv",
        "sparse,Sparse Diner,,,,,,,,,,,,,,",
    )
    cfg = IngestionConfig(raw_path=raw, processed_data_dir=tmp_path / "processed")

    [restaurant] = frame_to_restaurants(load_catalog_frame(raw, cfg), cfg)

    assert restaurant.coordinates is None
    assert restaurant.price_range is None
    assert restaurant.rating is None
    assert restaurant.cuisine_type == []
    assert restaurant.attributes.quietness is None
    assert restaurant.attributes.ideal_meeting_types == []


def test_values_are_clamped(tmp_path: Path):
    raw = _write_raw(
        tmp_path / "raw.csv",
        "loud,Loud Bar,,37.1,-113.5,Bar,10,20,140,fast,energetic,false,false,,7.5,3",
    )
    cfg = IngestionConfig(raw_path=raw, processed_data_dir=tmp_path / "processed")

    [restaurant] = frame_to_restaurants(load_catalog_frame(raw, cfg), cfg)

    assert restaurant.attributes.quietness == 100
    assert restaurant.rating.average == 5
