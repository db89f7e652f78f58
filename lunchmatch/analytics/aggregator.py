from __future__ import annotations

from collections import Counter
from typing import Any

RECOMMENDATION_EVENTS = ("recommendations", "group_recommendations")


def _rate(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    requests = [e for e in events if e["type"] in RECOMMENDATION_EVENTS]
    total = len(requests)

    times = [r["response_time_ms"] for r in requests if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    meeting_counter: Counter[str] = Counter()
    for r in requests:
        meeting_counter[r.get("meeting_type") or "none"] += 1
    top_meeting_types = [{"name": n, "count": c} for n, c in meeting_counter.most_common()]

    # Match types across every recommendation served
    match_counter: Counter[str] = Counter()
    for r in requests:
        match_counter.update(r.get("match_types", []))
    served = sum(match_counter.values())
    match_type_share = {k: _rate(v, served) for k, v in match_counter.items()}

    restaurant_counter: Counter[str] = Counter()
    for r in requests:
        restaurant_counter.update(r.get("restaurant_ids", [])[:3])
    top_restaurants = [{"id": n, "count": c} for n, c in restaurant_counter.most_common(10)]

    with_location = sum(1 for r in requests if r.get("has_location"))
    empty_results = sum(1 for r in requests if r.get("results_returned", 0) == 0)
    ratings = [e for e in events if e["type"] == "rating"]

    return {
        "total_requests": total,
        "group_requests": sum(1 for r in requests if r["type"] == "group_recommendations"),
        "avg_response_time_ms": avg_time,
        "top_meeting_types": top_meeting_types,
        "match_type_share": match_type_share,
        "top_restaurants": top_restaurants,
        "location_usage": _rate(with_location, total),
        "empty_result_rate": _rate(empty_results, total),
        "total_ratings": len(ratings),
    }
