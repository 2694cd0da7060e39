from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from ..analytics.store import record_event
from ..users.models import User
from ..users.store import LikeStore, UserStore
from .compatibility import is_compatible
from .config import SEARCH_CONFIG, SUGGESTIONS_CONFIG, DiscoveryConfig
from .errors import ComputationFailure, DiscoveryError, ViewerNotFound
from .fetcher import exclude_seen, fetch_candidates
from .models import DiscoveryResponse, DiscoveryResult
from .params import SearchQuery, SuggestionsQuery
from .ranking import paginate, rank
from .scoring import ScoredCandidate, score_candidates

logger = logging.getLogger(__name__)


def _resolve_viewer(users: UserStore, viewer_id: int) -> User:
    viewer = users.find_by_id(viewer_id)
    if viewer is None:
        raise ViewerNotFound(viewer_id)
    return viewer


def _compatible_pool(
    viewer: User,
    users: UserStore,
    likes: LikeStore,
    max_distance_km: float | None,
    config: DiscoveryConfig,
) -> list[User]:
    raw = fetch_candidates(
        viewer,
        users,
        max_distance_km,
        nearby_limit=config.nearby_limit,
        fallback_limit=config.fallback_limit,
    )
    candidates = exclude_seen(viewer, raw, likes)
    return [c for c in candidates if is_compatible(viewer, c)]


def _respond(scored: list[ScoredCandidate], sort: str, page: int, per_page: int) -> DiscoveryResponse:
    ordered = rank(scored, sort)
    results = [
        DiscoveryResult(
            user=s.user,
            score=s.score,
            distance_km=s.distance_km,
            common_interests=s.common_interests,
        )
        for s in paginate(ordered, page, per_page)
    ]
    return DiscoveryResponse(page=page, per_page=per_page, results=results, total=len(scored))


def apply_search_filters(candidates: list[User], query: SearchQuery, now: datetime) -> list[User]:
    """Age, fame, gender and interest filters; each one is a plain intersection."""
    kept = candidates

    if query.min_age or query.max_age:
        def _age_ok(u: User) -> bool:
            age = u.age(now)
            if age is None:
                return False
            if query.min_age and age < query.min_age:
                return False
            if query.max_age and age > query.max_age:
                return False
            return True

        kept = [u for u in kept if _age_ok(u)]

    if query.min_fame is not None:
        kept = [u for u in kept if (u.fame_rating or 0) >= query.min_fame]
    if query.max_fame is not None:
        kept = [u for u in kept if (u.fame_rating or 0) <= query.max_fame]

    if query.genders:
        wanted = set(query.genders)
        kept = [u for u in kept if u.gender in wanted]

    if query.interests:
        requested = set(query.interests)
        kept = [u for u in kept if requested & set(u.interests)]

    return kept


def suggestions(
    viewer_id: int,
    query: SuggestionsQuery,
    users: UserStore,
    likes: LikeStore,
    config: DiscoveryConfig = SUGGESTIONS_CONFIG,
    now: datetime | None = None,
) -> DiscoveryResponse:
    """Ranked suggestions for the viewer: nearby, compatible, not yet liked."""
    start_time = time.time()
    now = now or datetime.now(timezone.utc)
    try:
        viewer = _resolve_viewer(users, viewer_id)
        pool = _compatible_pool(viewer, users, likes, query.max_distance_km, config)
        scored = score_candidates(viewer, pool, query.weights, now)
        response = _respond(scored, query.sort, query.page, config.per_page)
    except DiscoveryError:
        raise
    except Exception as exc:
        logger.exception("Discovery suggestions failed for viewer %s", viewer_id)
        raise ComputationFailure("Failed to compute suggestions") from exc

    record_event("discovery", {
        "endpoint": "suggestions",
        "sort": query.sort,
        "filters": [],
        "total": response.total,
        "results_returned": len(response.results),
        "response_time_ms": round((time.time() - start_time) * 1000, 1),
    })
    return response


def search(
    viewer_id: int,
    query: SearchQuery,
    users: UserStore,
    likes: LikeStore,
    config: DiscoveryConfig = SEARCH_CONFIG,
    now: datetime | None = None,
) -> DiscoveryResponse:
    """Filtered search: suggestions' pipeline plus attribute filters before scoring."""
    start_time = time.time()
    now = now or datetime.now(timezone.utc)
    try:
        viewer = _resolve_viewer(users, viewer_id)
        pool = _compatible_pool(viewer, users, likes, query.max_distance_km, config)
        filtered = apply_search_filters(pool, query, now)
        scored = score_candidates(viewer, filtered, config.weights, now)
        response = _respond(scored, query.sort, query.page, query.per_page)
    except DiscoveryError:
        raise
    except Exception as exc:
        logger.exception("Discovery search failed for viewer %s", viewer_id)
        raise ComputationFailure("Failed to execute search") from exc

    record_event("discovery", {
        "endpoint": "search",
        "sort": query.sort,
        "filters": query.filters_used(),
        "total": response.total,
        "results_returned": len(response.results),
        "response_time_ms": round((time.time() - start_time) * 1000, 1),
    })
    return response
