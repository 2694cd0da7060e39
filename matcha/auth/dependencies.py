from __future__ import annotations

from fastapi import HTTPException, Request

from ..users.store import get_user_store


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in; otherwise mark them online.

    The session user may have been deleted since login: callers that need the
    full record resolve it themselves and report their own error.
    """
    user = request.session.get("user")
    if not user or "id" not in user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    get_user_store().touch_last_online(user["id"])
    return user
