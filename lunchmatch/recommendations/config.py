from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ScoringConfig:
    favorite_points: int = 50
    friend_points: int = 40
    quietness_points: int = 15
    quietness_tolerance: float = 20.0
    price_points: int = 10
    cuisine_points: int = 10
    meeting_type_points: int = 20
    very_close_points: int = 15
    very_close_km: float = 1.0
    nearby_points: int = 10
    nearby_km: float = 5.0
    highly_rated_points: int = 10
    highly_rated_threshold: float = 4.0
    fallback_points: int = 5
    fallback_reason: str = os.getenv("LUNCHMATCH_FALLBACK_REASON", "Great option in St. George")
    max_reasons: int = 3
    default_limit: int = 20


@dataclass(frozen=True)
class GroupConfig:
    group_fit_points: int = 30
    quietness_tolerance: float = 25.0
    limit: int = 10


DEFAULT_SCORING_CONFIG = ScoringConfig()
DEFAULT_GROUP_CONFIG = GroupConfig()
