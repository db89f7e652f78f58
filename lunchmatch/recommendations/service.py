from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from ..analytics.store import record_event
from ..friends.store import recommended_restaurant_ids
from ..profiles.learning import update_profile_from_rating
from ..profiles.resolver import resolve_profile
from ..profiles.store import put_profile
from ..ratings.store import record_rating, top_rated_restaurant_ids
from .data_store import get_restaurant, list_restaurants
from .group import aggregate_group
from .models import (
    Coordinates,
    MeetingType,
    RecommendationResponse,
    RestaurantRecommendation,
    ScoringOptions,
    TasteProfile,
)
from .scoring import score_restaurants

logger = logging.getLogger(__name__)

CATALOG_FETCH_LIMIT = 100


def _signals_for(user_id: str) -> ScoringOptions:
    return ScoringOptions(
        favorite_ids=top_rated_restaurant_ids(user_id, min_rating=4, limit=10),
        friend_recommended_ids=recommended_restaurant_ids(user_id),
    )


def _record(
    event_type: str,
    start_time: float,
    meeting_type: MeetingType | None,
    location: Coordinates | None,
    recommendations: list[RestaurantRecommendation],
    **extra,
) -> None:
    record_event(event_type, {
        "meeting_type": meeting_type.value if meeting_type else None,
        "has_location": location is not None,
        "results_returned": len(recommendations),
        "match_types": [r.match_type.value for r in recommendations],
        "restaurant_ids": [r.restaurant.id for r in recommendations],
        "response_time_ms": round((time.time() - start_time) * 1000, 1),
        **extra,
    })


def get_personalized_recommendations(
    user_id: str,
    user_location: Coordinates | None = None,
    meeting_type: MeetingType | None = None,
    limit: int = 20,
) -> RecommendationResponse:
    start_time = time.time()

    profile = resolve_profile(user_id)
    options = _signals_for(user_id).model_copy(
        update={"meeting_type": meeting_type, "user_location": user_location}
    )
    catalog = list_restaurants(CATALOG_FETCH_LIMIT)

    recommendations = score_restaurants(profile, catalog, options, limit=limit)

    _record("recommendations", start_time, meeting_type, user_location, recommendations, user_id=user_id)
    logger.info("Served %d recommendations to %s", len(recommendations), user_id)
    return RecommendationResponse(recommendations=recommendations, total_candidates=len(catalog))


def get_group_recommendations(
    user_ids: Sequence[str],
    meeting_type: MeetingType | None,
    location: Coordinates | None = None,
) -> RecommendationResponse:
    """Recommendations for a group; the first user id is the primary participant."""
    start_time = time.time()

    profiles: list[TasteProfile] = [resolve_profile(uid) for uid in user_ids]
    catalog = list_restaurants(CATALOG_FETCH_LIMIT)
    primary_options = _signals_for(user_ids[0]) if user_ids else None

    recommendations = aggregate_group(
        profiles,
        catalog,
        meeting_type=meeting_type,
        location=location,
        primary_options=primary_options,
    )

    _record(
        "group_recommendations", start_time, meeting_type, location, recommendations,
        group_size=len(profiles),
    )
    logger.info("Served %d group recommendations for %d users", len(recommendations), len(profiles))
    return RecommendationResponse(recommendations=recommendations, total_candidates=len(catalog))


def rate_restaurant(
    user_id: str,
    restaurant_id: str,
    rating: int,
    meeting_type: MeetingType | None = None,
    notes: str | None = None,
) -> TasteProfile:
    """Record a rating and fold it into the user's taste profile.

    Raises ``LookupError`` for an unknown restaurant.
    """
    restaurant = get_restaurant(restaurant_id)
    if restaurant is None:
        raise LookupError(f"Unknown restaurant: {restaurant_id}")

    record_rating(user_id, restaurant_id, rating, meeting_type, notes)
    profile = update_profile_from_rating(resolve_profile(user_id), restaurant, rating)
    put_profile(profile)

    record_event("rating", {"user_id": user_id, "restaurant_id": restaurant_id, "rating": rating})
    return profile
