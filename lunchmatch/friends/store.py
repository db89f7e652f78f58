from __future__ import annotations

import random
import time
from typing import Any

from ..ratings.store import get_ratings

_friends: dict[str, set[str]] = {}
_recommendations: list[dict[str, Any]] = []


def add_friend(user_id: str, friend_id: str) -> None:
    """Connect two users. Connections are mutual and always accepted."""
    if user_id == friend_id:
        raise ValueError("a user cannot befriend themselves")
    _friends.setdefault(user_id, set()).add(friend_id)
    _friends.setdefault(friend_id, set()).add(user_id)


def get_friends(user_id: str) -> list[str]:
    return sorted(_friends.get(user_id, set()))


def recommend_restaurant(
    from_user_id: str,
    to_user_id: str,
    restaurant_id: str,
    message: str | None = None,
) -> dict[str, Any]:
    entry = {
        "from_user_id": from_user_id,
        "to_user_id": to_user_id,
        "restaurant_id": restaurant_id,
        "message": message,
        "timestamp": time.time(),
    }
    _recommendations.append(entry)
    return entry


def recommended_restaurant_ids(user_id: str) -> set[str]:
    return {r["restaurant_id"] for r in _recommendations if r["to_user_id"] == user_id}


def friends_highly_rated_restaurant_ids(
    user_id: str,
    limit: int = 5,
    min_rating: int = 4,
    rng: random.Random | None = None,
) -> list[str]:
    """A shuffled sample of restaurants the user's friends rated highly.

    Pass a seeded *rng* for a reproducible order.
    """
    if limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")
    seen: dict[str, None] = {}
    for friend_id in get_friends(user_id):
        for entry in get_ratings(friend_id):
            if entry["rating"] >= min_rating:
                seen[entry["restaurant_id"]] = None

    candidates = list(seen)
    (rng or random.Random()).shuffle(candidates)
    return candidates[:limit]


def clear_friends() -> None:
    _friends.clear()
    _recommendations.clear()
