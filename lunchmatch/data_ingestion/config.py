from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_PACKAGE_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class IngestionConfig:
    """
    Where the raw seed catalog lives and where the processed catalog goes.
    """

    raw_path: Path = _PACKAGE_DATA_DIR / "raw" / "restaurants.csv"
    processed_data_dir: Path = Path(os.getenv("LUNCHMATCH_DATA_DIR", str(_PACKAGE_DATA_DIR / "processed")))
    processed_filename: str = "restaurants.csv"
    list_separator: str = ";"

    @property
    def processed_path(self) -> Path:
        return self.processed_data_dir / self.processed_filename


DEFAULT_INGESTION_CONFIG = IngestionConfig()
