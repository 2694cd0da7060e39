from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..users.models import User


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DiscoveryResult(_CamelModel):
    user: User
    score: float
    distance_km: float | None = None
    common_interests: int = 0


class DiscoveryResponse(_CamelModel):
    page: int
    per_page: int
    results: list[DiscoveryResult]
    total: int


class ErrorResponse(BaseModel):
    error: str
