from __future__ import annotations

import logging
from pathlib import Path

import bcrypt
import pandas as pd

from ..config import DEFAULT_APP_CONFIG, AppConfig
from .store import UserStore

logger = logging.getLogger(__name__)

SEED_PASSWORD = "Password1!"


def _load(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path, dtype={"birth_date": str, "last_online": str})
    # Empty cells come back as NaN; the user model expects None
    return df.astype(object).where(df.notna(), None)


def load_seed_users(
    store: UserStore,
    path: Path,
    config: AppConfig = DEFAULT_APP_CONFIG,
) -> int:
    """Insert the seed users from *path* into *store*. Returns how many were added."""
    df = _load(path)
    password_hash = bcrypt.hashpw(
        SEED_PASSWORD.encode(), bcrypt.gensalt(rounds=config.bcrypt_rounds)
    ).decode()

    added = 0
    for record in df.to_dict(orient="records"):
        if store.find_by_email(record["email"]) is not None:
            continue
        store.create(password_hash=password_hash, **record)
        added += 1

    logger.info("Loaded %d seed users from %s", added, path)
    return added
