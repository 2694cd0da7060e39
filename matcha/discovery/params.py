"""
Lenient query-string parsing for the discovery endpoints.

Values that do not parse never produce an error: they fall back to the
preset defaults, the same way a missing parameter does.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from starlette.datastructures import QueryParams

from .config import SEARCH_CONFIG, SUGGESTIONS_CONFIG, DiscoveryConfig, ScoreWeights
from .ranking import DEFAULT_SORT

logger = logging.getLogger(__name__)


def _to_float(raw: str | None) -> float | None:
    if raw is None or not str(raw).strip():
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric query value %r", raw)
        return None
    return value if math.isfinite(value) else None


def _to_int(raw: str | None) -> int | None:
    value = _to_float(raw)
    return int(value) if value is not None else None


def _nonzero_float(raw: str | None, default: float | None) -> float | None:
    value = _to_float(raw)
    return value if value else default


def _positive_int(raw: str | None, default: int) -> int:
    value = _to_int(raw)
    return value if value is not None and value >= 1 else default


def _string_list(params: QueryParams, key: str, split_commas: bool) -> list[str]:
    values = params.getlist(key)
    if split_commas and len(values) == 1:
        values = values[0].split(",")
    return [v.strip() for v in values if v and v.strip()]


def parse_weights(params: QueryParams, defaults: ScoreWeights) -> ScoreWeights:
    """``w_distance`` / ``w_interests`` / ``w_fame`` / ``w_recency``; zero or junk keeps the default."""
    return ScoreWeights(
        distance=_nonzero_float(params.get("w_distance"), defaults.distance),
        interests=_nonzero_float(params.get("w_interests"), defaults.interests),
        fame=_nonzero_float(params.get("w_fame"), defaults.fame),
        recency=_nonzero_float(params.get("w_recency"), defaults.recency),
    )


@dataclass(frozen=True)
class SuggestionsQuery:
    weights: ScoreWeights
    page: int = 1
    max_distance_km: float | None = None
    sort: str = DEFAULT_SORT

    @classmethod
    def from_params(
        cls, params: QueryParams, config: DiscoveryConfig = SUGGESTIONS_CONFIG,
    ) -> SuggestionsQuery:
        return cls(
            weights=parse_weights(params, config.weights),
            page=_positive_int(params.get("page"), 1),
            max_distance_km=_nonzero_float(params.get("maxDistance"), config.max_distance_km),
            sort=params.get("sort") or DEFAULT_SORT,
        )


@dataclass(frozen=True)
class SearchQuery:
    page: int = 1
    per_page: int = SEARCH_CONFIG.per_page
    min_age: int | None = None
    max_age: int | None = None
    max_distance_km: float | None = None
    min_fame: float | None = None
    max_fame: float | None = None
    genders: list[str] = field(default_factory=list)
    interests: list[str] = field(default_factory=list)
    sort: str = DEFAULT_SORT

    @classmethod
    def from_params(
        cls, params: QueryParams, config: DiscoveryConfig = SEARCH_CONFIG,
    ) -> SearchQuery:
        return cls(
            page=_positive_int(params.get("page"), 1),
            per_page=_positive_int(params.get("limit"), config.per_page),
            min_age=_to_int(params.get("minAge")) or None,
            max_age=_to_int(params.get("maxAge")) or None,
            max_distance_km=_nonzero_float(params.get("maxDistance"), config.max_distance_km),
            min_fame=_to_float(params.get("minFame")),
            max_fame=_to_float(params.get("maxFame")),
            genders=_string_list(params, "gender", split_commas=False),
            interests=_string_list(params, "interests", split_commas=True),
            sort=params.get("sort") or DEFAULT_SORT,
        )

    def filters_used(self) -> list[str]:
        used = []
        if self.min_age or self.max_age:
            used.append("age")
        if self.min_fame is not None or self.max_fame is not None:
            used.append("fame")
        if self.genders:
            used.append("gender")
        if self.interests:
            used.append("interests")
        if self.max_distance_km:
            used.append("distance")
        return used
