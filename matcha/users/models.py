from __future__ import annotations

import json
import math
from datetime import date, datetime, timezone
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, Field, field_validator

GENDERS = ("male", "female", "other")

Gender = Literal["male", "female", "other"]


def parse_list_field(value: Any) -> list[str]:
    """Leniently turn a stored list column into a list of strings.

    Accepts a real list, JSON text, comma-separated text or nothing at all.
    Malformed input yields an empty list instead of raising.
    """
    if value is None:
        return []
    if isinstance(value, float) and math.isnan(value):
        return []
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            value = json.loads(text)
        except ValueError:
            if text.startswith(("[", "{")):
                return []
            value = text.split(",")
    if isinstance(value, (list, tuple, set)):
        items = value
    else:
        return []

    seen: list[str] = []
    for item in items:
        if item is None or isinstance(item, (dict, list)):
            continue
        tag = str(item).strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


ParsedList = Annotated[list[str], BeforeValidator(parse_list_field)]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class User(BaseModel):
    id: int
    email: str
    username: str
    first_name: str | None = None
    last_name: str | None = None
    birth_date: date | None = None
    gender: Gender | None = None
    preferred_gender: Gender | None = None
    sexual_preferences: ParsedList = Field(default_factory=list)
    interests: ParsedList = Field(default_factory=list)
    photos: ParsedList = Field(default_factory=list)
    biography: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    city: str | None = None
    country: str | None = None
    location_source: Literal["gps", "ip", "manual"] | None = None
    fame_rating: int = Field(default=0, ge=0, le=100)
    profile_views: int = 0
    likes_count: int = 0
    profile_completion: int = 0
    last_online: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    password_hash: str | None = Field(default=None, exclude=True, repr=False)

    @field_validator(
        "first_name", "last_name", "birth_date", "gender", "preferred_gender",
        "biography", "latitude", "longitude", "city", "country",
        "location_source", "last_online",
        mode="before",
    )
    @classmethod
    def _nan_is_missing(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def age(self, now: datetime | None = None) -> int | None:
        if self.birth_date is None:
            return None
        now = now or datetime.now(timezone.utc)
        days = (now.date() - self.birth_date).days
        return math.floor(days / 365.25)


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=6)
    username: str | None = Field(default=None, min_length=1)
    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    birth_date: date
    gender: Gender
    preferred_gender: Gender

    @field_validator("birth_date")
    @classmethod
    def _must_be_adult(cls, value: date) -> date:
        if date.today().year - value.year < 18:
            raise ValueError("You must be at least 18 years old")
        return value


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    gender: Gender | None = None
    preferred_gender: Gender | None = None
    sexual_preferences: list[Gender] | None = None
    biography: str | None = Field(default=None, max_length=2000)
    interests: list[str] | None = None


class LocationRequest(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    city: str | None = None
    country: str | None = None
