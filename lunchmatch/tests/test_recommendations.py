from __future__ import annotations

from fastapi.testclient import TestClient

from lunchmatch.app import app
from lunchmatch.friends.store import clear_friends
from lunchmatch.profiles.store import clear_profiles, get_profile
from lunchmatch.ratings.store import clear_ratings

client = TestClient(app)

DOWNTOWN = {"lat": 37.0965, "lng": -113.5684}


def _login(c, username="user", password="user123"):
    c.post("/auth/login", json={"username": username, "password": password})


def _reset():
    clear_profiles()
    clear_ratings()
    clear_friends()


def _by_id(body: dict) -> dict:
    return {item["restaurant"]["id"]: item for item in body["recommendations"]}


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_metadata_lists_cuisines_and_meeting_types():
    body = client.get("/metadata").json()
    assert "Japanese" in body["cuisines"]
    assert "investor-lunch" in body["meeting_types"]
    assert len(body["meeting_types"]) == 7


# ── Personal recommendations ─────────────────────────────────────────────


def test_recommendations_returns_results():
    _reset()
    _login(client)
    resp = client.post("/recommendations", json={})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_candidates"] == 14
    assert len(body["recommendations"]) == 14


def test_recommendations_respects_limit():
    _reset()
    _login(client)
    resp = client.post("/recommendations", json={"limit": 3})
    assert len(resp.json()["recommendations"]) == 3


def test_recommendations_score_ordering_and_reasons():
    _reset()
    _login(client)
    resp = client.post(
        "/recommendations",
        json={"meeting_type": "client-meeting", "location": DOWNTOWN},
    )
    items = resp.json()["recommendations"]
    scores = [item["score"] for item in items]
    assert scores == sorted(scores, reverse=True)
    for item in items:
        assert 1 <= len(item["reasons"]) <= 3
        assert item["match_type"] == "smart-match"


def test_recommendations_meeting_type_reason():
    _reset()
    _login(client)
    resp = client.post("/recommendations", json={"meeting_type": "investor-lunch", "limit": 20})
    prime = _by_id(resp.json())["prime-steakhouse"]
    assert "Perfect for investor lunch" in prime["reasons"]


def test_favorite_after_high_rating():
    _reset()
    _login(client)
    rate = client.post("/ratings", json={"restaurant_id": "quick-bites", "rating": 5})
    assert rate.status_code == 200
    resp = client.post("/recommendations", json={})
    item = _by_id(resp.json())["quick-bites"]
    assert item["match_type"] == "personal-favorite"
    assert item["reasons"][0] == "One of your favorites"


def test_friend_recommendation_shows_up():
    _reset()
    c = TestClient(app)
    _login(c, "alice", "alice123")
    sent = c.post("/friend-recommendations", json={"to_user_id": "user", "restaurant_id": "healthy-bowl"})
    assert sent.status_code == 200

    _login(c, "user", "user123")
    item = _by_id(c.post("/recommendations", json={}).json())["healthy-bowl"]
    assert item["match_type"] == "friend-recommendation"
    assert "Recommended by friends" in item["reasons"]


def test_recommendations_validation_rejects_bad_limit():
    _login(client)
    resp = client.post("/recommendations", json={"limit": -1})
    assert resp.status_code == 422


def test_recommendations_validation_rejects_unknown_meeting_type():
    _login(client)
    resp = client.post("/recommendations", json={"meeting_type": "brunch"})
    assert resp.status_code == 422


def test_recommendations_validation_rejects_bad_location():
    _login(client)
    resp = client.post("/recommendations", json={"location": {"lat": 120, "lng": 0}})
    assert resp.status_code == 422


def test_recommendations_requires_login():
    c = TestClient(app)
    resp = c.post("/recommendations", json={})
    assert resp.status_code == 401


# ── Group recommendations ────────────────────────────────────────────────


def test_group_recommendations():
    _reset()
    _login(client)
    resp = client.post(
        "/recommendations/group",
        json={"user_ids": ["alice", "bob"], "meeting_type": "team-meeting", "location": DOWNTOWN},
    )
    assert resp.status_code == 200
    items = resp.json()["recommendations"]
    assert len(items) == 10
    scores = [item["score"] for item in items]
    assert scores == sorted(scores, reverse=True)


def test_group_uses_requesting_users_signals():
    _reset()
    _login(client)
    client.post("/ratings", json={"restaurant_id": "quick-bites", "rating": 5})
    resp = client.post(
        "/recommendations/group",
        json={"user_ids": ["alice"], "meeting_type": "casual-checkin"},
    )
    item = _by_id(resp.json())["quick-bites"]
    assert item["match_type"] == "personal-favorite"


def test_group_rejects_unknown_participant():
    _reset()
    _login(client)
    resp = client.post(
        "/recommendations/group",
        json={"user_ids": ["alice", "ghost0"], "meeting_type": "team-meeting"},
    )
    assert resp.status_code == 404
    assert get_profile("ghost0") is None


def test_group_caps_participant_count():
    _reset()
    _login(client)
    resp = client.post(
        "/recommendations/group",
        json={"user_ids": [f"ghost{i}" for i in range(500)], "meeting_type": "team-meeting"},
    )
    assert resp.status_code == 422
    assert get_profile("ghost0") is None


def test_group_requires_meeting_type():
    _login(client)
    resp = client.post("/recommendations/group", json={"user_ids": ["alice"]})
    assert resp.status_code == 422


# ── Profile, ratings, friends ────────────────────────────────────────────


def test_profile_defaults_then_update():
    _reset()
    _login(client)
    body = client.get("/profile").json()
    assert body["user_id"] == "user"
    assert body["preferences"]["quietness"] == 50
    assert body["preferences"]["price_range"] == {"min": 10, "max": 100}

    resp = client.put("/profile", json={"quietness": 80, "cuisine_types": ["Japanese"]})
    assert resp.status_code == 200
    assert client.get("/profile").json()["preferences"]["quietness"] == 80


def test_profile_update_rejects_inverted_price_range():
    _reset()
    _login(client)
    resp = client.put("/profile", json={"price_range": {"min": 90, "max": 20}})
    assert resp.status_code == 422


def test_rating_updates_profile():
    _reset()
    _login(client)
    resp = client.post("/ratings", json={"restaurant_id": "prime-steakhouse", "rating": 5})
    body = resp.json()
    assert body["status"] == "recorded"
    assert body["profile"]["learning_data"]["total_ratings"] == 1
    assert "Steakhouse" in body["profile"]["preferences"]["cuisine_types"]


def test_rating_unknown_restaurant():
    _login(client)
    resp = client.post("/ratings", json={"restaurant_id": "nowhere", "rating": 4})
    assert resp.status_code == 404


def test_rating_out_of_range():
    _login(client)
    resp = client.post("/ratings", json={"restaurant_id": "sakura", "rating": 6})
    assert resp.status_code == 422


def test_friends_and_highly_rated():
    _reset()
    c = TestClient(app)
    _login(c, "bob", "bob123")
    c.post("/ratings", json={"restaurant_id": "sakura", "rating": 5})
    _login(c, "user", "user123")
    assert c.post("/friends/bob").json()["friends"] == ["bob"]

    resp = c.get("/friends/highly-rated")
    assert resp.status_code == 200
    assert [r["id"] for r in resp.json()] == ["sakura"]


def test_friends_highly_rated_rejects_negative_limit():
    _reset()
    c = TestClient(app)
    _login(c, "alice", "alice123")
    c.post("/ratings", json={"restaurant_id": "painted-pony", "rating": 5})
    c.post("/ratings", json={"restaurant_id": "cliffside", "rating": 5})
    _login(c, "user", "user123")
    c.post("/friends/alice")

    resp = c.get("/friends/highly-rated", params={"limit": -1})
    assert resp.status_code == 422


def test_befriend_unknown_user():
    _login(client)
    assert client.post("/friends/ghost").status_code == 404


def test_profile_overlap():
    _reset()
    _login(client)
    resp = client.get("/profile/overlap/alice")
    assert resp.status_code == 200
    assert resp.json()["score"] == 85.0
