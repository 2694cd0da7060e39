from __future__ import annotations

from ..users.models import User
from ..users.store import LikeStore, UserStore


def fetch_candidates(
    viewer: User,
    users: UserStore,
    max_distance_km: float | None,
    nearby_limit: int,
    fallback_limit: int,
) -> list[User]:
    """Radius query when the viewer is located and a radius is given,
    otherwise an unordered pool of everyone but the viewer."""
    if viewer.has_location and max_distance_km:
        return users.find_nearby(viewer.latitude, viewer.longitude, max_distance_km, nearby_limit)
    return users.find_all_except(viewer.id, fallback_limit)


def excluded_ids(viewer: User, likes: LikeStore) -> set[int]:
    return {viewer.id, *likes.liked_ids_by(viewer.id)}


def exclude_seen(viewer: User, candidates: list[User], likes: LikeStore) -> list[User]:
    """Drop the viewer and everyone the viewer already liked."""
    excluded = excluded_ids(viewer, likes)
    return [c for c in candidates if c.id not in excluded]
