from __future__ import annotations

import logging
from collections.abc import Callable

from ..recommendations.models import (
    LearningData,
    PriceRange,
    ProfileUpdateRequest,
    TastePreferences,
    TasteProfile,
)
from . import store

logger = logging.getLogger(__name__)


def default_taste_profile(user_id: str) -> TasteProfile:
    """The profile every user starts with. Two calls with one id compare equal."""
    return TasteProfile(
        user_id=user_id,
        preferences=TastePreferences(
            quietness=50,
            service_quality=50,
            healthiness=50,
            value=50,
            atmosphere=50,
            cuisine_types=[],
            price_range=PriceRange(min=10, max=100),
        ),
        learning_data=LearningData(),
    )


def resolve_profile(
    user_id: str,
    get: Callable[[str], TasteProfile | None] = store.get_profile,
    put: Callable[[TasteProfile], None] = store.put_profile,
) -> TasteProfile:
    """Return the stored profile for *user_id*, creating the default on first access."""
    profile = get(user_id)
    if profile is not None:
        return profile

    logger.warning("No taste profile for %s, storing the default", user_id)
    profile = default_taste_profile(user_id)
    put(profile)
    return profile


def apply_profile_update(profile: TasteProfile, update: ProfileUpdateRequest) -> TasteProfile:
    """Apply a settings edit. Fields left unset keep their current value.

    Raises ``pydantic.ValidationError`` when the edit leaves an invalid price range.
    """
    changes = update.model_dump(exclude_none=True)
    preferences = profile.preferences.model_dump()
    preferences.update(changes)
    return TasteProfile.model_validate({
        "user_id": profile.user_id,
        "preferences": preferences,
        "learning_data": profile.learning_data.model_dump(),
    })
