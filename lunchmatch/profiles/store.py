from __future__ import annotations

from ..recommendations.models import TasteProfile

_profiles: dict[str, TasteProfile] = {}


def get_profile(user_id: str) -> TasteProfile | None:
    return _profiles.get(user_id)


def put_profile(profile: TasteProfile) -> None:
    _profiles[profile.user_id] = profile


def clear_profiles() -> None:
    _profiles.clear()
