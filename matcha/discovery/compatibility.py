from __future__ import annotations

from ..users.models import User


def accepted_genders(user: User) -> set[str] | None:
    """Genders *user* is willing to see, or ``None`` when open to everyone.

    ``sexual_preferences`` wins when non-empty, then the legacy
    ``preferred_gender`` field.
    """
    if user.sexual_preferences:
        return set(user.sexual_preferences)
    if user.preferred_gender:
        return {user.preferred_gender}
    return None


def accepts(user: User, other: User) -> bool:
    wanted = accepted_genders(user)
    return wanted is None or other.gender in wanted


def is_compatible(viewer: User, target: User) -> bool:
    """Both sides must accept each other's gender."""
    return accepts(viewer, target) and accepts(target, viewer)
