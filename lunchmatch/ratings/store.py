from __future__ import annotations

import time
from typing import Any

from ..recommendations.models import MeetingType

_ratings: list[dict[str, Any]] = []


def record_rating(
    user_id: str,
    restaurant_id: str,
    rating: int,
    meeting_type: MeetingType | None = None,
    notes: str | None = None,
) -> dict[str, Any]:
    entry = {
        "user_id": user_id,
        "restaurant_id": restaurant_id,
        "rating": rating,
        "meeting_type": meeting_type.value if meeting_type else None,
        "notes": notes,
        "timestamp": time.time(),
    }
    _ratings.append(entry)
    return entry


def get_ratings(user_id: str) -> list[dict[str, Any]]:
    return [r for r in _ratings if r["user_id"] == user_id]


def top_rated_restaurant_ids(user_id: str, min_rating: int = 4, limit: int = 10) -> set[str]:
    """Ids of the user's highest-rated restaurants rated at least *min_rating*.

    The top *limit* ratings are taken first and then filtered, so a user with
    many ratings only contributes their best ones.
    """
    best = sorted(get_ratings(user_id), key=lambda r: r["rating"], reverse=True)[:limit]
    return {r["restaurant_id"] for r in best if r["rating"] >= min_rating}


def clear_ratings() -> None:
    _ratings.clear()
