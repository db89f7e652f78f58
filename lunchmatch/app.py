from __future__ import annotations

import os

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from pydantic import ValidationError
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .auth.dependencies import current_user_id, require_admin, require_user
from .auth.users import authenticate, user_exists
from .friends.store import (
    add_friend,
    friends_highly_rated_restaurant_ids,
    get_friends,
    recommend_restaurant,
)
from .profiles.learning import calculate_overlap_score
from .profiles.resolver import apply_profile_update, resolve_profile
from .profiles.store import put_profile
from .recommendations.data_store import get_catalog, get_restaurant
from .recommendations.models import (
    FriendRecommendationRequest,
    GroupRecommendationRequest,
    LoginRequest,
    MeetingType,
    OverlapResponse,
    ProfileUpdateRequest,
    RatingRequest,
    RatingResponse,
    RecommendationRequest,
    RecommendationResponse,
    Restaurant,
    TasteProfile,
)
from .recommendations.scoring import ScoringValidationError
from .recommendations.service import (
    get_group_recommendations,
    get_personalized_recommendations,
    rate_restaurant,
)

app = FastAPI(title="LunchMatch Recommendation API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "lunchmatch-secret-change-in-production"),
)


def _require_known_user(user_id: str) -> None:
    if not user_exists(user_id):
        raise HTTPException(status_code=404, detail=f"Unknown user: {user_id}")


def _require_known_restaurant(restaurant_id: str) -> Restaurant:
    restaurant = get_restaurant(restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=404, detail=f"Unknown restaurant: {restaurant_id}")
    return restaurant


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    cuisines: set[str] = set()
    for restaurant in get_catalog():
        cuisines.update(restaurant.cuisine_type)
    return {
        "cuisines": sorted(cuisines),
        "meeting_types": [m.value for m in MeetingType],
    }


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Taste profile ────────────────────────────────────────────────────────


@app.get("/profile", response_model=TasteProfile)
def get_profile(user_id: str = Depends(current_user_id)) -> TasteProfile:
    return resolve_profile(user_id)


@app.put("/profile", response_model=TasteProfile)
def update_profile(
    body: ProfileUpdateRequest,
    user_id: str = Depends(current_user_id),
) -> TasteProfile:
    try:
        profile = apply_profile_update(resolve_profile(user_id), body)
    except ValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        raise HTTPException(status_code=422, detail=errors) from exc
    put_profile(profile)
    return profile


@app.get("/profile/overlap/{friend_id}", response_model=OverlapResponse)
def profile_overlap(friend_id: str, user_id: str = Depends(current_user_id)) -> OverlapResponse:
    _require_known_user(friend_id)
    score = calculate_overlap_score(resolve_profile(user_id), resolve_profile(friend_id))
    return OverlapResponse(user_id=user_id, friend_id=friend_id, score=round(score, 1))


@app.post("/ratings", response_model=RatingResponse)
def ratings(body: RatingRequest, user_id: str = Depends(current_user_id)) -> RatingResponse:
    _require_known_restaurant(body.restaurant_id)
    profile = rate_restaurant(user_id, body.restaurant_id, body.rating, body.meeting_type, body.notes)
    return RatingResponse(status="recorded", profile=profile)


# ── Friends ──────────────────────────────────────────────────────────────


@app.get("/friends")
def friends(user_id: str = Depends(current_user_id)) -> dict:
    return {"friends": get_friends(user_id)}


@app.post("/friends/{friend_id}")
def befriend(friend_id: str, user_id: str = Depends(current_user_id)) -> dict:
    _require_known_user(friend_id)
    if friend_id == user_id:
        raise HTTPException(status_code=400, detail="Cannot add yourself as a friend")
    add_friend(user_id, friend_id)
    return {"status": "connected", "friends": get_friends(user_id)}


@app.get("/friends/highly-rated", response_model=list[Restaurant])
def friends_highly_rated(
    limit: int = Query(5, ge=0),
    user_id: str = Depends(current_user_id),
) -> list[Restaurant]:
    ids = friends_highly_rated_restaurant_ids(user_id, limit=limit)
    return [r for r in (get_restaurant(i) for i in ids) if r is not None]


@app.post("/friend-recommendations")
def friend_recommendation(
    body: FriendRecommendationRequest,
    user_id: str = Depends(current_user_id),
) -> dict:
    _require_known_user(body.to_user_id)
    _require_known_restaurant(body.restaurant_id)
    recommend_restaurant(user_id, body.to_user_id, body.restaurant_id, body.message)
    return {"status": "recommended"}


# ── Recommendations ──────────────────────────────────────────────────────


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(
    body: RecommendationRequest,
    user_id: str = Depends(current_user_id),
) -> RecommendationResponse:
    try:
        return get_personalized_recommendations(user_id, body.location, body.meeting_type, body.limit)
    except ScoringValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.post("/recommendations/group", response_model=RecommendationResponse)
def group_recommendations(
    body: GroupRecommendationRequest,
    user_id: str = Depends(current_user_id),
) -> RecommendationResponse:
    # The requesting user is always the primary participant
    participants = [user_id] + [u for u in dict.fromkeys(body.user_ids) if u != user_id]
    for uid in participants:
        _require_known_user(uid)
    try:
        return get_group_recommendations(participants, body.meeting_type, body.location)
    except ScoringValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())
