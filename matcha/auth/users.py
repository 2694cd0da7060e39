from __future__ import annotations

import bcrypt

from ..config import DEFAULT_APP_CONFIG, AppConfig
from ..users.models import RegisterRequest, User
from ..users.reputation import refresh_reputation
from ..users.store import UserStore


class EmailTaken(Exception):
    pass


def hash_password(plain: str, config: AppConfig = DEFAULT_APP_CONFIG) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt(rounds=config.bcrypt_rounds)).decode()


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def register(store: UserStore, body: RegisterRequest) -> User:
    """Create a user; raises ``EmailTaken`` when the email is already registered."""
    if store.find_by_email(body.email) is not None:
        raise EmailTaken(body.email)
    user = store.create(
        email=body.email.strip().lower(),
        username=body.username or body.email.split("@")[0],
        first_name=body.first_name,
        last_name=body.last_name,
        birth_date=body.birth_date,
        gender=body.gender,
        preferred_gender=body.preferred_gender,
        password_hash=hash_password(body.password),
    )
    return refresh_reputation(store, user.id) or user


def authenticate(store: UserStore, email: str, password: str) -> User | None:
    """Verify credentials. Returns the user or ``None``."""
    user = store.find_by_email(email)
    if user and verify_password(password, user.password_hash):
        return user
    return None


def session_payload(user: User) -> dict:
    return {"id": user.id, "email": user.email}
