from __future__ import annotations

import pytest

from matcha.config import AppConfig
from matcha.discovery.fetcher import exclude_seen, fetch_candidates
from matcha.users.models import User, parse_list_field
from matcha.users.seed import load_seed_users
from matcha.users.store import LikeStore, UserStore, ViewStore


def _store_with(*users: dict) -> UserStore:
    store = UserStore()
    for i, fields in enumerate(users, start=1):
        store.create(email=f"st{i}@example.com", username=f"st{i}", **fields)
    return store


# ── List field parsing ───────────────────────────────────────────────────


@pytest.mark.parametrize("raw,expected", [
    (None, []),
    ("", []),
    ("[]", []),
    ('["hiking", "music"]', ["hiking", "music"]),
    (["a", "a", " b "], ["a", "b"]),
    ("hiking, music", ["hiking", "music"]),
    ("[broken", []),
    ('{"a": 1}', []),
    ("42", []),
    (float("nan"), []),
    (17, []),
])
def test_parse_list_field(raw, expected):
    assert parse_list_field(raw) == expected


def test_user_model_parses_serialised_lists():
    user = User(id=1, email="x@example.com", username="x", interests='["a","b"]', photos="[oops")
    assert user.interests == ["a", "b"]
    assert user.photos == []


def test_password_hash_never_serialised():
    user = User(id=1, email="x@example.com", username="x", password_hash="secret")
    assert "password_hash" not in user.model_dump()
    assert "secret" not in user.model_dump_json()


# ── UserStore ────────────────────────────────────────────────────────────


def test_create_assigns_increasing_ids():
    store = _store_with({}, {}, {})
    assert [store.find_by_id(i).id for i in (1, 2, 3)] == [1, 2, 3]


def test_create_rejects_duplicate_email():
    store = _store_with({})
    with pytest.raises(ValueError):
        store.create(email="ST1@example.com", username="dup")


def test_update_keeps_password_hash():
    store = UserStore()
    user = store.create(email="p@example.com", username="p", password_hash="h")
    store.update(user.id, biography="hello")
    assert store.find_by_id(user.id).password_hash == "h"
    assert store.find_by_id(user.id).biography == "hello"


def test_find_nearby_respects_radius_and_limit():
    store = _store_with(
        {"latitude": 48.8566, "longitude": 2.3522},   # Paris
        {"latitude": 48.8049, "longitude": 2.1204},   # Versailles, ~18 km
        {"latitude": 51.5074, "longitude": -0.1278},  # London, ~344 km
        {},                                           # unlocated
    )
    near = store.find_nearby(48.8566, 2.3522, 50, 10)
    assert [u.id for u in near] == [1, 2]
    assert [u.id for u in store.find_nearby(48.8566, 2.3522, 50, 1)] == [1]
    assert len(store.find_nearby(48.8566, 2.3522, 500, 10)) == 3


def test_find_all_except():
    store = _store_with({}, {}, {}, {})
    assert [u.id for u in store.find_all_except(2, 10)] == [1, 3, 4]
    assert [u.id for u in store.find_all_except(2, 2)] == [1, 3]


# ── Likes and views ──────────────────────────────────────────────────────


def test_like_toggle_is_unique_per_pair():
    likes = LikeStore()
    assert likes.toggle(1, 2) is True
    assert likes.toggle(3, 2) is True
    assert likes.liked_ids_by(1) == [2]
    assert likes.count_for(2) == 2
    assert likes.toggle(1, 2) is False
    assert likes.liked_ids_by(1) == []
    assert likes.count_for(2) == 1


def test_view_store_counts_per_viewed_user():
    views = ViewStore()
    views.record(1, 2)
    views.record(3, 2)
    assert views.record(1, 4) == 1
    assert views.record(1, 2) == 3


# ── Candidate fetching ───────────────────────────────────────────────────


def test_fetch_uses_radius_when_viewer_located():
    store = _store_with(
        {"latitude": 48.8566, "longitude": 2.3522},
        {"latitude": 48.86, "longitude": 2.34},
        {"latitude": 51.5074, "longitude": -0.1278},
        {},
    )
    viewer = store.find_by_id(1)
    pool = fetch_candidates(viewer, store, 50, nearby_limit=200, fallback_limit=500)
    # the radius query itself may return the viewer; exclusion removes it later
    assert {u.id for u in pool} == {1, 2}


def test_fetch_falls_back_without_coordinates_or_radius():
    store = _store_with({}, {"latitude": 51.5, "longitude": -0.12}, {})
    viewer = store.find_by_id(1)
    assert [u.id for u in fetch_candidates(viewer, store, 50, 200, 500)] == [2, 3]

    located = store.find_by_id(2)
    assert [u.id for u in fetch_candidates(located, store, None, 200, 500)] == [1, 3]


def test_fetch_fallback_limit():
    store = _store_with(*({} for _ in range(10)))
    viewer = store.find_by_id(1)
    assert len(fetch_candidates(viewer, store, None, 200, 4)) == 4


def test_exclude_seen_removes_self_and_liked():
    store = _store_with({}, {}, {}, {})
    viewer = store.find_by_id(1)
    likes = LikeStore()
    likes.toggle(1, 3)
    likes.toggle(2, 4)  # someone else's like does not matter
    kept = exclude_seen(viewer, list(store.find_all_except(0, 10)), likes)
    assert [u.id for u in kept] == [2, 4]


# ── Seed data ────────────────────────────────────────────────────────────


def test_seed_users_load():
    config = AppConfig(bcrypt_rounds=4)
    store = UserStore()
    added = load_seed_users(store, config.seed_users_path, config)
    assert added == len(store) > 0

    alice = store.find_by_email("alice@example.com")
    assert alice.interests == ["hiking", "music"]
    assert alice.sexual_preferences == ["male"]
    assert alice.has_location

    carol = store.find_by_email("carol@example.com")
    assert carol.latitude is None
    assert carol.last_online is None

    dan = store.find_by_email("dan@example.com")
    assert dan.interests == ["hiking", "climbing", "music"]

    # loading twice does not duplicate users
    assert load_seed_users(store, config.seed_users_path, config) == 0
