from __future__ import annotations

import itertools
from datetime import datetime, timezone
from typing import Any

import numpy as np

from ..config import DEFAULT_APP_CONFIG, AppConfig
from ..discovery.geo import distances_km
from .models import User


class UserStore:
    """In-memory user table keyed by id, iterated in insertion order."""

    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._users)

    def create(self, **fields: Any) -> User:
        email = fields.get("email")
        if email and self.find_by_email(email) is not None:
            raise ValueError(f"User already exists with email {email!r}")
        user_id = fields.pop("id", None) or self._next_id
        user = User(id=user_id, **fields)
        self._next_id = max(self._next_id, user.id + 1)
        self._users[user.id] = user
        return user

    def find_by_id(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        email = email.strip().lower()
        for user in self._users.values():
            if user.email.lower() == email:
                return user
        return None

    def update(self, user_id: int, **updates: Any) -> User | None:
        current = self._users.get(user_id)
        if current is None:
            return None
        data = current.model_dump()
        data.update(updates)
        data["password_hash"] = updates.get("password_hash", current.password_hash)
        user = User.model_validate(data)
        self._users[user_id] = user
        return user

    def delete(self, user_id: int) -> bool:
        return self._users.pop(user_id, None) is not None

    def touch_last_online(self, user_id: int) -> None:
        if user_id in self._users:
            self.update(user_id, last_online=datetime.now(timezone.utc))

    def find_nearby(self, lat: float, lon: float, radius_km: float, limit: int) -> list[User]:
        """Users within *radius_km* of (lat, lon), in store order, at most *limit*."""
        located = [u for u in self._users.values() if u.has_location]
        if not located or limit <= 0:
            return []
        lats = np.array([u.latitude for u in located], dtype=float)
        lons = np.array([u.longitude for u in located], dtype=float)
        within = distances_km(lat, lon, lats, lons) < radius_km
        return [u for u, keep in zip(located, within) if keep][:limit]

    def find_all_except(self, user_id: int, limit: int) -> list[User]:
        if limit <= 0:
            return []
        others = (u for u in self._users.values() if u.id != user_id)
        return list(itertools.islice(others, limit))


class LikeStore:
    """Directed like edges, unique per (liker, liked) pair."""

    def __init__(self) -> None:
        self._likes: list[tuple[int, int]] = []

    def liked_ids_by(self, viewer_id: int) -> list[int]:
        return [liked for liker, liked in self._likes if liker == viewer_id]

    def toggle(self, liker_id: int, liked_id: int) -> bool:
        """Add the like if absent, remove it otherwise. Returns the new state."""
        edge = (liker_id, liked_id)
        if edge in self._likes:
            self._likes.remove(edge)
            return False
        self._likes.append(edge)
        return True

    def count_for(self, liked_id: int) -> int:
        return sum(1 for _, liked in self._likes if liked == liked_id)


class ViewStore:
    def __init__(self) -> None:
        self._views: list[dict[str, Any]] = []

    def record(self, viewer_id: int, viewed_id: int) -> int:
        self._views.append({
            "viewer_id": viewer_id,
            "viewed_id": viewed_id,
            "timestamp": datetime.now(timezone.utc),
        })
        return sum(1 for v in self._views if v["viewed_id"] == viewed_id)


_user_store: UserStore | None = None
_like_store = LikeStore()
_view_store = ViewStore()


def get_user_store(config: AppConfig = DEFAULT_APP_CONFIG) -> UserStore:
    """Return the process-wide user store, seeding it on first call."""
    global _user_store
    if _user_store is None:
        _user_store = UserStore()
        if config.seed_on_startup and config.seed_users_path.exists():
            from .seed import load_seed_users

            load_seed_users(_user_store, config.seed_users_path, config)
    return _user_store


def get_like_store() -> LikeStore:
    return _like_store


def get_view_store() -> ViewStore:
    return _view_store


def clear_stores() -> None:
    """Replace every store with an empty, unseeded one."""
    global _user_store, _like_store, _view_store
    _user_store = UserStore()
    _like_store = LikeStore()
    _view_store = ViewStore()
