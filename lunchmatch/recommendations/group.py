"""
Group recommendations.

Several participants' taste profiles are merged into one synthetic profile and
the first participant's personal recommendations are re-scored against it.
"""
from __future__ import annotations

from collections.abc import Sequence
from statistics import fmean

from .config import DEFAULT_GROUP_CONFIG, DEFAULT_SCORING_CONFIG, GroupConfig, ScoringConfig
from .models import (
    Coordinates,
    LearningData,
    MeetingType,
    PriceRange,
    Restaurant,
    RestaurantRecommendation,
    ScoringOptions,
    TastePreferences,
    TasteProfile,
)
from .scoring import rank, score_restaurants

GROUP_USER_ID = "group"

_SCALARS = ("quietness", "service_quality", "healthiness", "value", "atmosphere")


def merge_profiles(profiles: Sequence[TasteProfile]) -> TasteProfile:
    """Average the scalars, union the cuisines and intersect the price ranges.

    Disjoint price ranges produce ``min >= max``; that range is kept as-is so
    price matching simply never succeeds for the group.
    """
    if not profiles:
        raise ValueError("cannot merge an empty list of profiles")

    prefs = [p.preferences for p in profiles]
    averaged = {name: fmean(getattr(p, name) for p in prefs) for name in _SCALARS}
    cuisines = list(dict.fromkeys(c for p in prefs for c in p.cuisine_types))
    price = PriceRange(
        min=max(p.price_range.min for p in prefs),
        max=min(p.price_range.max for p in prefs),
    )

    # model_construct skips the min < max check that real user profiles get
    return TasteProfile.model_construct(
        user_id=GROUP_USER_ID,
        preferences=TastePreferences(**averaged, cuisine_types=cuisines, price_range=price),
        learning_data=LearningData(),
    )


def _fits_group(merged: TasteProfile, restaurant: Restaurant, config: GroupConfig) -> bool:
    attr = restaurant.attributes
    if attr.quietness is None or restaurant.price_range is None:
        return False
    pref = merged.preferences
    quiet_enough = abs(pref.quietness - attr.quietness) < config.quietness_tolerance
    return quiet_enough and pref.price_range.contains(restaurant.price_range.midpoint)


def aggregate_group(
    profiles: Sequence[TasteProfile],
    catalog: Sequence[Restaurant],
    meeting_type: MeetingType | None = None,
    location: Coordinates | None = None,
    primary_options: ScoringOptions | None = None,
    config: GroupConfig = DEFAULT_GROUP_CONFIG,
    scoring_config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> list[RestaurantRecommendation]:
    """Recommend restaurants for a group meeting.

    The base list comes from scoring the catalog for the first profile, using
    that participant's favourite and friend signals (*primary_options*). Every
    restaurant that suits the merged group profile then gets a bonus.
    """
    if not profiles:
        return []

    merged = merge_profiles(profiles)
    base_options = (primary_options or ScoringOptions()).model_copy(
        update={"meeting_type": meeting_type, "user_location": location}
    )
    base = score_restaurants(profiles[0], catalog, base_options, config=scoring_config)

    rescored: list[RestaurantRecommendation] = []
    for rec in base:
        score = rec.score
        reasons = list(rec.reasons)
        if _fits_group(merged, rec.restaurant, config):
            score += config.group_fit_points
            reasons.append("Suitable for all participants")
        rescored.append(
            rec.model_copy(update={"score": score, "reasons": reasons[: scoring_config.max_reasons]})
        )

    return rank(rescored, config.limit)
