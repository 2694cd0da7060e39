from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AppConfig:
    session_secret: str = os.getenv("SESSION_SECRET", "matcha-secret-change-in-production")
    seed_users_path: Path = Path(
        os.getenv(
            "SEED_USERS_PATH",
            str(Path(__file__).resolve().parent / "data" / "seed_users.csv"),
        )
    )
    seed_on_startup: bool = _env_flag("SEED_USERS", True)
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))


DEFAULT_APP_CONFIG = AppConfig()
