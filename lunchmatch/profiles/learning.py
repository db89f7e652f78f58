from __future__ import annotations

from datetime import datetime, timezone

from ..recommendations.models import (
    Atmosphere,
    LearningData,
    Restaurant,
    TasteProfile,
)

LEARNING_RATE = 0.1

# Fixed nudges applied per rating, scaled by how far the rating is from neutral.
SERVICE_QUALITY_STEP = 20.0
HEALTHINESS_STEP = 10.0
VALUE_STEP = 15.0
UPSCALE_ATMOSPHERE_STEP = 30.0
ATMOSPHERE_STEP = 10.0


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def update_profile_from_rating(
    profile: TasteProfile,
    restaurant: Restaurant,
    rating: int,
    now: datetime | None = None,
) -> TasteProfile:
    """Return a copy of *profile* nudged toward (or away from) *restaurant*.

    A 3-star rating is neutral; 5 pulls preferences toward the restaurant at
    full learning rate and 1 pushes them away.
    """
    if not 1 <= rating <= 5:
        raise ValueError(f"rating must be between 1 and 5, got {rating}")

    pref = profile.preferences
    attr = restaurant.attributes
    step = (rating - 3) / 2 * LEARNING_RATE

    quietness = pref.quietness
    if attr.quietness is not None:
        quietness = _clamp(pref.quietness + step * (attr.quietness - pref.quietness))
    atmosphere_step = UPSCALE_ATMOSPHERE_STEP if attr.atmosphere == Atmosphere.upscale else ATMOSPHERE_STEP

    learning = profile.learning_data
    total = learning.total_ratings + 1
    average = (learning.average_rating * learning.total_ratings + rating) / total

    preferences = pref.model_copy(update={
        "quietness": quietness,
        "service_quality": _clamp(pref.service_quality + step * SERVICE_QUALITY_STEP),
        "healthiness": _clamp(pref.healthiness + step * HEALTHINESS_STEP),
        "value": _clamp(pref.value + step * VALUE_STEP),
        "atmosphere": _clamp(pref.atmosphere + step * atmosphere_step),
        "cuisine_types": list(dict.fromkeys([*pref.cuisine_types, *restaurant.cuisine_type])),
    })
    return profile.model_copy(update={
        "preferences": preferences,
        "learning_data": LearningData(
            total_ratings=total,
            average_rating=average,
            last_updated=now or datetime.now(timezone.utc),
        ),
    })


def calculate_overlap_score(a: TasteProfile, b: TasteProfile) -> float:
    """Similarity of two profiles on a 0-100 scale (70% preferences, 30% cuisines)."""
    pa, pb = a.preferences, b.preferences
    diffs = [
        abs(pa.quietness - pb.quietness),
        abs(pa.service_quality - pb.service_quality),
        abs(pa.healthiness - pb.healthiness),
        abs(pa.value - pb.value),
        abs(pa.atmosphere - pb.atmosphere),
    ]
    preference_score = 100 - sum(diffs) / len(diffs)

    cuisines_a, cuisines_b = set(pa.cuisine_types), set(pb.cuisine_types)
    union = cuisines_a | cuisines_b
    cuisine_score = len(cuisines_a & cuisines_b) / len(union) * 100 if union else 50.0

    return preference_score * 0.7 + cuisine_score * 0.3
