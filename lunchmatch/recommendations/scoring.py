from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .models import (
    Coordinates,
    MatchType,
    Restaurant,
    RestaurantRecommendation,
    ScoringOptions,
    TasteProfile,
)

EARTH_RADIUS_KM = 6371.0


class ScoringValidationError(ValueError):
    """Raised when the scorer is handed inputs it cannot score meaningfully."""


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points in kilometres."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def _require_finite(label: str, *values: float | None) -> None:
    for v in values:
        if v is not None and not math.isfinite(v):
            raise ScoringValidationError(f"{label} must be a finite number, got {v!r}")


def _validate_profile(profile: TasteProfile) -> None:
    pref = profile.preferences
    _require_finite(
        "profile preference",
        pref.quietness,
        pref.service_quality,
        pref.healthiness,
        pref.value,
        pref.atmosphere,
    )
    _require_finite("profile price range", pref.price_range.min, pref.price_range.max)


def _validate_restaurant(restaurant: Restaurant) -> None:
    label = f"restaurant {restaurant.id}"
    _require_finite(f"{label} quietness", restaurant.attributes.quietness)
    if restaurant.price_range is not None:
        _require_finite(f"{label} price range", restaurant.price_range.min, restaurant.price_range.max)
    if restaurant.rating is not None:
        _require_finite(f"{label} rating", restaurant.rating.average)
    if restaurant.coordinates is not None:
        _require_finite(f"{label} coordinates", restaurant.coordinates.lat, restaurant.coordinates.lng)


def score_restaurant(
    profile: TasteProfile,
    restaurant: Restaurant,
    options: ScoringOptions | None = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> RestaurantRecommendation:
    """Score one restaurant against one taste profile.

    Rules fire in a fixed order and each appends its reason as it fires, so
    the kept reasons are always the earliest ones. When both the favourite and
    the friend rule fire, the friend rule runs second and its match type wins.
    """
    opts = options or ScoringOptions()
    _validate_restaurant(restaurant)

    score = 0
    reasons: list[str] = []
    match_type = MatchType.smart_match
    pref = profile.preferences
    attr = restaurant.attributes

    if restaurant.id in opts.favorite_ids:
        score += config.favorite_points
        reasons.append("One of your favorites")
        match_type = MatchType.personal_favorite

    if restaurant.id in opts.friend_recommended_ids:
        score += config.friend_points
        reasons.append("Recommended by friends")
        match_type = MatchType.friend_recommendation

    if attr.quietness is not None and abs(pref.quietness - attr.quietness) < config.quietness_tolerance:
        score += config.quietness_points
        reasons.append("Matches your preference for quietness")

    if restaurant.price_range is not None and pref.price_range.contains(restaurant.price_range.midpoint):
        score += config.price_points
        reasons.append("Within your price range")

    if any(c in pref.cuisine_types for c in restaurant.cuisine_type):
        score += config.cuisine_points
        reasons.append("Matches your cuisine preferences")

    if opts.meeting_type is not None and opts.meeting_type in attr.ideal_meeting_types:
        score += config.meeting_type_points
        reasons.append(f"Perfect for {opts.meeting_type.label}")

    if opts.user_location is not None and restaurant.coordinates is not None:
        distance = haversine_km(opts.user_location, restaurant.coordinates)
        if distance < config.very_close_km:
            score += config.very_close_points
            reasons.append("Very close to you")
        elif distance < config.nearby_km:
            score += config.nearby_points
            reasons.append("Nearby")

    if restaurant.rating is not None and restaurant.rating.average >= config.highly_rated_threshold:
        score += config.highly_rated_points
        reasons.append("Highly rated")

    if not reasons:
        reasons.append(config.fallback_reason)
        score += config.fallback_points

    return RestaurantRecommendation(
        restaurant=restaurant,
        score=score,
        reasons=reasons[: config.max_reasons],
        match_type=match_type,
    )


def rank(
    recommendations: Iterable[RestaurantRecommendation], limit: int
) -> list[RestaurantRecommendation]:
    """Stable sort by score, highest first, truncated to *limit*."""
    if limit < 0:
        raise ScoringValidationError(f"limit must not be negative, got {limit}")
    return sorted(recommendations, key=lambda r: r.score, reverse=True)[:limit]


def score_restaurants(
    profile: TasteProfile,
    catalog: Sequence[Restaurant],
    options: ScoringOptions | None = None,
    limit: int | None = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> list[RestaurantRecommendation]:
    """Score every restaurant in *catalog* and return the best *limit* of them."""
    if limit is None:
        limit = config.default_limit
    _validate_profile(profile)
    opts = options or ScoringOptions()
    if opts.user_location is not None:
        _require_finite("user location", opts.user_location.lat, opts.user_location.lng)

    scored = [score_restaurant(profile, r, opts, config) for r in catalog]
    return rank(scored, limit)
