"""Wire models for TVDB v4 response envelopes."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

_WIRE_CONFIG = {
    "populate_by_name": True,
    "coerce_numbers_to_str": True,
    "extra": "ignore",
}


class TvdbResponse(BaseModel, Generic[T]):
    status: str | None = None
    data: T | None = None
    message: str | None = None

    model_config = _WIRE_CONFIG


class TvdbAuthData(BaseModel):
    token: str | None = None

    model_config = _WIRE_CONFIG


class TvdbSearchResult(BaseModel):
    tvdb_id: str | None = None
    name: str | None = None
    overview: str | None = None
    first_air_time: str | None = None
    image_url: str | None = None
    type: str | None = None
    year: str | None = None

    model_config = _WIRE_CONFIG


class TvdbNamed(BaseModel):
    """Genre, status and company entries share the same shape."""

    id: int | None = None
    name: str | None = None

    model_config = _WIRE_CONFIG


class TvdbMovieDetails(BaseModel):
    id: int
    name: str | None = None
    overview: str | None = None
    first_air_time: str | None = None
    image: str | None = None
    genres: list[TvdbNamed] | None = None
    score: float | None = None
    status: TvdbNamed | None = None
    runtime: int | None = None
    companies: list[TvdbNamed] | None = Field(default=None)

    model_config = _WIRE_CONFIG


__all__ = [
    "TvdbAuthData",
    "TvdbMovieDetails",
    "TvdbNamed",
    "TvdbResponse",
    "TvdbSearchResult",
]
