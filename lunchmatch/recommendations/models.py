from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

# Fixed timestamp carried by every default profile so defaults compare equal.
DEFAULT_LAST_UPDATED = datetime(1970, 1, 1, tzinfo=timezone.utc)


class MeetingType(str, Enum):
    casual_checkin = "casual-checkin"
    investor_lunch = "investor-lunch"
    team_meeting = "team-meeting"
    client_meeting = "client-meeting"
    post_event_debrief = "post-event-debrief"
    one_on_one = "one-on-one"
    social_lunch = "social-lunch"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ")


class MatchType(str, Enum):
    personal_favorite = "personal-favorite"
    friend_recommendation = "friend-recommendation"
    smart_match = "smart-match"
    trending = "trending"


class ServiceSpeed(str, Enum):
    fast = "fast"
    medium = "medium"
    slow = "slow"


class Atmosphere(str, Enum):
    casual = "casual"
    upscale = "upscale"
    energetic = "energetic"
    intimate = "intimate"


# ── Shared value objects ─────────────────────────────────────────────────


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class PriceRange(BaseModel):
    min: float
    max: float

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


# ── Taste profile ────────────────────────────────────────────────────────


class TastePreferences(BaseModel):
    quietness: float = 50.0
    service_quality: float = 50.0
    healthiness: float = 50.0
    value: float = 50.0
    atmosphere: float = 50.0
    cuisine_types: list[str] = Field(default_factory=list)
    price_range: PriceRange = Field(default_factory=lambda: PriceRange(min=10, max=100))

    @field_validator("quietness", "service_quality", "healthiness", "value", "atmosphere")
    @classmethod
    def _clamp_scalar(cls, v: float) -> float:
        if math.isnan(v):
            raise ValueError("preference must be a number")
        return max(0.0, min(100.0, v))

    @field_validator("cuisine_types")
    @classmethod
    def _dedupe_cuisines(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(c.strip() for c in v if c and c.strip()))


class LearningData(BaseModel):
    total_ratings: int = Field(default=0, ge=0)
    average_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    last_updated: datetime = DEFAULT_LAST_UPDATED


class TasteProfile(BaseModel):
    user_id: str = Field(..., min_length=1)
    preferences: TastePreferences = Field(default_factory=TastePreferences)
    learning_data: LearningData = Field(default_factory=LearningData)

    @model_validator(mode="after")
    def _check_price_range(self) -> TasteProfile:
        price = self.preferences.price_range
        if not price.min < price.max:
            raise ValueError("price_range.min must be lower than price_range.max")
        return self


# ── Restaurant catalog ───────────────────────────────────────────────────


class RestaurantAttributes(BaseModel):
    quietness: float | None = Field(default=None, ge=0.0, le=100.0)
    service_speed: ServiceSpeed | None = None
    atmosphere: Atmosphere | None = None
    private_booths: bool = False
    walkable_distance: bool = False
    ideal_meeting_types: list[MeetingType] = Field(default_factory=list)

    @field_validator("ideal_meeting_types", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return [] if v is None else v


class RestaurantRating(BaseModel):
    average: float = Field(default=0.0, ge=0.0, le=5.0)
    count: int = Field(default=0, ge=0)


class Restaurant(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    address: str = ""
    coordinates: Coordinates | None = None
    cuisine_type: list[str] = Field(default_factory=list)
    price_range: PriceRange | None = None
    attributes: RestaurantAttributes = Field(default_factory=RestaurantAttributes)
    rating: RestaurantRating | None = None

    @field_validator("attributes", mode="before")
    @classmethod
    def _none_is_default(cls, v):
        return RestaurantAttributes() if v is None else v


# ── Scoring input / output ───────────────────────────────────────────────


class ScoringOptions(BaseModel):
    favorite_ids: set[str] = Field(default_factory=set)
    friend_recommended_ids: set[str] = Field(default_factory=set)
    meeting_type: MeetingType | None = None
    user_location: Coordinates | None = None


class RestaurantRecommendation(BaseModel):
    restaurant: Restaurant
    score: int = Field(..., ge=0)
    reasons: list[str] = Field(default_factory=list)
    match_type: MatchType = MatchType.smart_match


# ── API models ───────────────────────────────────────────────────────────


class LoginRequest(BaseModel):
    username: str
    password: str


class RecommendationRequest(BaseModel):
    meeting_type: MeetingType | None = None
    location: Coordinates | None = None
    limit: int = Field(default=20, ge=0, le=100)


class GroupRecommendationRequest(BaseModel):
    user_ids: list[str] = Field(..., min_length=1, max_length=20)
    meeting_type: MeetingType
    location: Coordinates | None = None


class RecommendationResponse(BaseModel):
    recommendations: list[RestaurantRecommendation]
    total_candidates: int


class RatingRequest(BaseModel):
    restaurant_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    meeting_type: MeetingType | None = None
    notes: str | None = Field(default=None, max_length=1000)


class RatingResponse(BaseModel):
    status: str
    profile: TasteProfile


class FriendRecommendationRequest(BaseModel):
    to_user_id: str = Field(..., min_length=1)
    restaurant_id: str = Field(..., min_length=1)
    message: str | None = Field(default=None, max_length=500)


class ProfileUpdateRequest(BaseModel):
    quietness: float | None = Field(default=None, ge=0.0, le=100.0)
    service_quality: float | None = Field(default=None, ge=0.0, le=100.0)
    healthiness: float | None = Field(default=None, ge=0.0, le=100.0)
    value: float | None = Field(default=None, ge=0.0, le=100.0)
    atmosphere: float | None = Field(default=None, ge=0.0, le=100.0)
    cuisine_types: list[str] | None = None
    price_range: PriceRange | None = None


class OverlapResponse(BaseModel):
    user_id: str
    friend_id: str
    score: float
