"""
Compatibility scoring.

Each candidate gets four sub-scores normalised to [0, 1]:

* **distance** – linear decay from 1 at 0 km to 0 at 200 km; 0 when either
  side has no coordinates.
* **interests** – shared tags over the larger of the two tag sets; 0 when the
  viewer declared none.
* **fame** – similarity of fame ratings, ``1 - min(100, |diff|) / 100``.
* **recency** – linear decay from 1 (online now) to 0 after 30 days; 0 when
  the candidate was never seen online.

The combined score is ``Σ sub_score × weight``. Weights are used as given,
so callers control the absolute scale.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from ..users.models import User, as_utc
from .config import ScoreWeights
from .geo import distance_km as haversine_km

DISTANCE_HORIZON_KM = 200.0
RECENCY_HORIZON_SECONDS = 30 * 24 * 60 * 60


@dataclass(frozen=True)
class ScoredCandidate:
    user: User
    score: float
    distance_km: float | None
    common_interests: int
    distance_score: float
    interest_score: float
    fame_score: float
    recency_score: float


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def interest_overlap(viewer_interests: list[str], candidate_interests: list[str]) -> tuple[float, int]:
    """Return ``(interest_score, shared_count)``."""
    theirs = set(candidate_interests)
    common = [i for i in viewer_interests if i in theirs]
    if not viewer_interests:
        return 0.0, len(common)
    score = len(common) / max(len(viewer_interests), len(candidate_interests))
    return _clamp(score), len(common)


def fame_similarity(viewer_fame: int | None, candidate_fame: int | None) -> float:
    diff = abs((candidate_fame or 0) - (viewer_fame or 0))
    return _clamp(1 - min(100, diff) / 100)


def distance_score(distance_km: float | None) -> float:
    if distance_km is None:
        return 0.0
    return _clamp(1 - distance_km / DISTANCE_HORIZON_KM)


def recency_score(last_online: datetime | None, now: datetime) -> float:
    if last_online is None:
        return 0.0
    elapsed = (now - as_utc(last_online)).total_seconds()
    return _clamp(1 - elapsed / RECENCY_HORIZON_SECONDS)


def pair_distance(viewer: User, candidate: User) -> float | None:
    """Distance in km, or ``None`` when either side is not located."""
    if not (viewer.has_location and candidate.has_location):
        return None
    return haversine_km(viewer.latitude, viewer.longitude, candidate.latitude, candidate.longitude)


def score_candidate(
    viewer: User,
    candidate: User,
    weights: ScoreWeights,
    now: datetime | None = None,
) -> ScoredCandidate:
    now = now or datetime.now(timezone.utc)

    i_score, common = interest_overlap(viewer.interests, candidate.interests)
    f_score = fame_similarity(viewer.fame_rating, candidate.fame_rating)
    km = pair_distance(viewer, candidate)
    d_score = distance_score(km)
    r_score = recency_score(candidate.last_online, now)

    combined = (
        d_score * weights.distance
        + i_score * weights.interests
        + f_score * weights.fame
        + r_score * weights.recency
    )
    return ScoredCandidate(
        user=candidate,
        score=combined,
        distance_km=km,
        common_interests=common,
        distance_score=d_score,
        interest_score=i_score,
        fame_score=f_score,
        recency_score=r_score,
    )


def score_candidates(
    viewer: User,
    candidates: list[User],
    weights: ScoreWeights,
    now: datetime | None = None,
) -> list[ScoredCandidate]:
    now = now or datetime.now(timezone.utc)
    return [score_candidate(viewer, c, weights, now) for c in candidates]
