from __future__ import annotations

from datetime import datetime, timezone

from .models import User, as_utc
from .store import UserStore

MAX_PHOTOS = 5


def profile_completion(user: User) -> int:
    """Percentage of the profile filled in (0-100)."""
    gender_score = 15 if user.gender else 0
    pref_score = 15 if (user.preferred_gender or user.sexual_preferences) else 0
    bio_score = 20 if user.biography else 0
    interests_score = 15 if user.interests else 0
    photos_score = min(35, round(len(user.photos) / MAX_PHOTOS * 35)) if user.photos else 0
    return gender_score + pref_score + bio_score + interests_score + photos_score


def fame_rating(user: User, now: datetime | None = None) -> int:
    """Views 30%, likes 40%, completion 20%, account age 10%; clamped to 0-100.

    Views and likes saturate at 1000, account age at one year.
    """
    now = now or datetime.now(timezone.utc)
    age_days = max(0, (now - as_utc(user.created_at)).days)

    views_score = min(100, round(user.profile_views / 1000 * 100))
    likes_score = min(100, round(user.likes_count / 1000 * 100))
    age_score = min(100, round(min(age_days, 365) / 365 * 100))

    fame = round(
        views_score * 0.30
        + likes_score * 0.40
        + user.profile_completion * 0.20
        + age_score * 0.10
    )
    return max(0, min(100, fame))


def refresh_reputation(store: UserStore, user_id: int) -> User | None:
    user = store.find_by_id(user_id)
    if user is None:
        return None
    user = store.update(user_id, profile_completion=profile_completion(user))
    return store.update(user_id, fame_rating=fame_rating(user))
