from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoreWeights:
    """Raw multipliers for each sub-score. They are not normalised."""

    distance: float = 0.25
    interests: float = 0.25
    fame: float = 0.25
    recency: float = 0.25


@dataclass(frozen=True)
class DiscoveryConfig:
    weights: ScoreWeights
    nearby_limit: int
    fallback_limit: int
    per_page: int = 20
    max_distance_km: float | None = None


SUGGESTIONS_CONFIG = DiscoveryConfig(
    weights=ScoreWeights(distance=0.3, interests=0.3, fame=0.2, recency=0.2),
    nearby_limit=200,
    fallback_limit=500,
    per_page=20,
    max_distance_km=50.0,
)

SEARCH_CONFIG = DiscoveryConfig(
    weights=ScoreWeights(distance=0.25, interests=0.35, fame=0.2, recency=0.2),
    nearby_limit=1000,
    fallback_limit=1000,
    per_page=20,
    max_distance_km=None,
)
