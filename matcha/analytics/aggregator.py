from __future__ import annotations

from collections import Counter
from typing import Any

SEARCH_FILTERS = ("age", "fame", "gender", "interests", "distance")


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    requests = [e for e in events if e["type"] == "discovery"]
    total = len(requests)

    # Average response time
    times = [r["response_time_ms"] for r in requests if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Requests per endpoint
    endpoint_counter: Counter[str] = Counter(r.get("endpoint", "unknown") for r in requests)

    # Sort usage
    sort_counter: Counter[str] = Counter(r.get("sort", "compatibility") for r in requests)
    sort_usage = [{"name": n, "count": c} for n, c in sort_counter.most_common()]

    # Filter usage rates (search requests only)
    searches = [r for r in requests if r.get("endpoint") == "search"]
    filter_counts = dict.fromkeys(SEARCH_FILTERS, 0)
    for s in searches:
        for f in s.get("filters", []) or []:
            if f in filter_counts:
                filter_counts[f] += 1
    filter_usage = {
        k: round(v / len(searches) * 100, 1) if searches else 0.0
        for k, v in filter_counts.items()
    }

    # Result sizes
    empty = sum(1 for r in requests if r.get("total", 0) == 0)
    avg_total = round(sum(r.get("total", 0) for r in requests) / total, 1) if total else 0.0

    return {
        "total_requests": total,
        "avg_response_time_ms": avg_time,
        "requests_by_endpoint": dict(endpoint_counter),
        "sort_usage": sort_usage,
        "filter_usage": filter_usage,
        "avg_candidates": avg_total,
        "empty_result_rate": round(empty / total * 100, 1) if total else 0.0,
    }
