from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field


class Movie(BaseModel):
    """Normalized catalog entry shown on a discovery card."""

    id: int = 0
    title: str = ""
    overview: str = ""
    first_aired: date | None = None
    poster_url: str | None = None
    backdrop_url: str | None = None
    genres: list[str] = Field(default_factory=list)
    rating: float | None = None
    content_rating: str | None = None
    runtime: int | None = None
    status: str | None = None
    companies: list[str] = Field(default_factory=list)

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }

    @property
    def year(self) -> str:
        return str(self.first_aired.year) if self.first_aired else "Unknown"

    @property
    def genre_text(self) -> str:
        """First two genres, comma separated."""
        return ", ".join(self.genres[:2])

    @property
    def runtime_text(self) -> str:
        return f"{self.runtime} min" if self.runtime is not None else "Unknown"

    @property
    def rating_text(self) -> str:
        return f"{self.rating:.1f}/10" if self.rating is not None else "No rating"

    def interaction_payload(self) -> dict[str, Any]:
        """Fields recorded by the interaction store when a swipe is saved."""
        return {
            "movie_id": self.id,
            "title": self.title.strip(),
            "poster_url": self.poster_url.strip() if self.poster_url else None,
            "overview": self.overview.strip() or None,
            "year": self.year,
            "genres": self.genre_text,
            "rating": self.rating,
        }
