from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .auth.dependencies import require_user
from .auth.users import EmailTaken, authenticate, register, session_payload
from .config import DEFAULT_APP_CONFIG
from .discovery.errors import DiscoveryError
from .discovery.models import DiscoveryResponse, ErrorResponse
from .discovery.params import SearchQuery, SuggestionsQuery
from .discovery.service import search, suggestions
from .users.models import (
    LocationRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    User,
)
from .users.reputation import refresh_reputation
from .users.store import get_like_store, get_user_store, get_view_store

logger = logging.getLogger(__name__)

app = FastAPI(title="Matcha API", version="1.0.0")
app.add_middleware(SessionMiddleware, secret_key=DEFAULT_APP_CONFIG.session_secret)

_ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _public(user: User) -> dict:
    return user.model_dump(mode="json")


def _existing_user(user_id: int) -> User:
    user = get_user_store().find_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# ── Error bodies ─────────────────────────────────────────────────────────


@app.exception_handler(DiscoveryError)
async def discovery_error_handler(request: Request, exc: DiscoveryError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/register", status_code=201)
def register_user(body: RegisterRequest, request: Request) -> dict:
    try:
        user = register(get_user_store(), body)
    except EmailTaken:
        raise HTTPException(status_code=400, detail="User already exists with this email")
    logger.info("Registered user %s", user.id)
    request.session["user"] = session_payload(user)
    return {"status": "ok", "user": _public(user)}


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(get_user_store(), body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = session_payload(user)
    return {"status": "ok", "user": _public(user)}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return {"user": _public(_existing_user(user["id"]))}


# ── Profile endpoints ────────────────────────────────────────────────────


@app.patch("/profile")
def update_profile(body: ProfileUpdateRequest, user: dict = Depends(require_user)) -> dict:
    _existing_user(user["id"])
    store = get_user_store()
    store.update(user["id"], **body.model_dump(exclude_unset=True))
    return {"user": _public(refresh_reputation(store, user["id"]))}


@app.put("/profile/location")
def set_location(body: LocationRequest, user: dict = Depends(require_user)) -> dict:
    _existing_user(user["id"])
    store = get_user_store()
    store.update(user["id"], location_source="manual", **body.model_dump())
    return {"user": _public(refresh_reputation(store, user["id"]))}


@app.post("/profile/like/{user_id}")
def toggle_like(user_id: int, user: dict = Depends(require_user)) -> dict:
    if user_id == user["id"]:
        raise HTTPException(status_code=400, detail="Cannot like your own profile")
    _existing_user(user_id)
    store = get_user_store()
    likes = get_like_store()
    liked = likes.toggle(user["id"], user_id)
    store.update(user_id, likes_count=likes.count_for(user_id))
    return {"user": _public(refresh_reputation(store, user_id)), "liked": liked}


@app.post("/profile/view/{user_id}")
def track_view(user_id: int, user: dict = Depends(require_user)) -> dict:
    if user_id == user["id"]:
        raise HTTPException(status_code=400, detail="Cannot view your own profile")
    _existing_user(user_id)
    store = get_user_store()
    views = get_view_store().record(user["id"], user_id)
    store.update(user_id, profile_views=views)
    return {"user": _public(refresh_reputation(store, user_id))}


# ── User lookup ──────────────────────────────────────────────────────────


@app.get("/users/nearby")
def nearby_users(
    lat: float | None = None,
    lng: float | None = None,
    radius: float = 50.0,
    limit: int = 20,
) -> dict:
    if lat is None or lng is None:
        raise HTTPException(status_code=400, detail="Latitude and longitude are required")
    users = get_user_store().find_nearby(lat, lng, radius, limit)
    return {"users": [_public(u) for u in users]}


@app.get("/users/{user_id}")
def get_user(user_id: int) -> dict:
    return {"user": _public(_existing_user(user_id))}


# ── Discovery ────────────────────────────────────────────────────────────


@app.get(
    "/discovery/suggestions",
    response_model=DiscoveryResponse,
    responses=_ERROR_RESPONSES,
)
def discovery_suggestions(
    request: Request,
    user: dict = Depends(require_user),
) -> DiscoveryResponse:
    query = SuggestionsQuery.from_params(request.query_params)
    return suggestions(user["id"], query, get_user_store(), get_like_store())


@app.get(
    "/discovery/search",
    response_model=DiscoveryResponse,
    responses=_ERROR_RESPONSES,
)
def discovery_search(
    request: Request,
    user: dict = Depends(require_user),
) -> DiscoveryResponse:
    query = SearchQuery.from_params(request.query_params)
    return search(user["id"], query, get_user_store(), get_like_store())


@app.get("/analytics")
def analytics(user: dict = Depends(require_user)) -> dict:
    return compute_analytics(get_events())
