from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Callable

from ..users.models import as_utc
from .scoring import ScoredCandidate

DEFAULT_SORT = "compatibility"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _by_distance(s: ScoredCandidate) -> float:
    return s.distance_km if s.distance_km is not None else math.inf


def _by_recent(s: ScoredCandidate) -> tuple[bool, float]:
    # Never-online candidates go last
    seen = s.user.last_online
    if seen is None:
        return True, 0.0
    return False, -(as_utc(seen) - _EPOCH).total_seconds()


SORT_KEYS: dict[str, Callable[[ScoredCandidate], object]] = {
    "compatibility": lambda s: -s.score,
    "distance": _by_distance,
    "fame": lambda s: -(s.user.fame_rating or 0),
    "commonInterests": lambda s: -s.common_interests,
    "recent": _by_recent,
}


def rank(scored: list[ScoredCandidate], sort: str = DEFAULT_SORT) -> list[ScoredCandidate]:
    """Return a new list ordered by *sort*; unknown keys rank by compatibility."""
    key = SORT_KEYS.get(sort, SORT_KEYS[DEFAULT_SORT])
    return sorted(scored, key=key)


def paginate(items: list, page: int, per_page: int) -> list:
    """1-indexed page slice; out-of-range pages are empty."""
    if page < 1 or per_page < 1:
        return []
    start = (page - 1) * per_page
    return items[start:start + per_page]
