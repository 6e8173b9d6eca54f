from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import date, timedelta
from typing import Any

import httpx
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from moviedeck.clients.auth import (
    DEFAULT_SAFETY_MARGIN,
    DEFAULT_TOKEN_LIFETIME,
    CatalogAuthManager,
)
from moviedeck.models import Movie, TvdbMovieDetails, TvdbResponse, TvdbSearchResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api4.thetvdb.com/v4"
DEFAULT_TIMEOUT = 20.0
DEFAULT_RETRY_ATTEMPTS = 2
USER_AGENT = "moviedeck/0.1.0"


class TvdbClient:
    """Thin asynchronous wrapper around the TVDB v4 API."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        pin: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        token_lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
        safety_margin: timedelta = DEFAULT_SAFETY_MARGIN,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
    ) -> None:
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
        )
        self._auth = CatalogAuthManager(
            self._client,
            api_key,
            pin=pin,
            token_lifetime=token_lifetime,
            safety_margin=safety_margin,
        )
        self._retry_attempts = max(1, retry_attempts)

    @property
    def auth(self) -> CatalogAuthManager:
        return self._auth

    async def close(self) -> None:
        await self._client.aclose()

    async def ensure_authenticated(self) -> None:
        await self._auth.ensure_authenticated()

    async def search(self, query: str) -> list[Movie]:
        """Search the catalog for movies. Misses and failures yield an empty list."""
        await self._auth.ensure_authenticated()

        payload = await self._get_payload("/search", params={"query": query, "type": "movie"})
        if payload is None:
            return []

        try:
            envelope = TvdbResponse[list[TvdbSearchResult]].model_validate(payload)
        except ValidationError as exc:
            logger.warning("Discarding malformed TVDB search payload for %r: %s", query, exc)
            return []

        if not envelope.data:
            return []
        return [
            search_result_to_movie(result)
            for result in envelope.data
            if (result.type or "").lower() == "movie"
        ]

    async def get_details(self, movie_id: int) -> Movie | None:
        """Fetch the extended record for a movie, or ``None`` when unavailable."""
        await self._auth.ensure_authenticated()

        payload = await self._get_payload(f"/movies/{movie_id}/extended")
        if payload is None:
            return None

        try:
            envelope = TvdbResponse[TvdbMovieDetails].model_validate(payload)
        except ValidationError as exc:
            logger.warning("Discarding malformed TVDB details payload for %s: %s", movie_id, exc)
            return None

        if envelope.data is None:
            return None
        return details_to_movie(envelope.data)

    async def _get_payload(self, path: str, *, params: dict[str, Any] | None = None) -> Any | None:
        try:
            async for attempt in self._retry_policy():
                with attempt:
                    response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("TVDB request %s failed: %s", path, exc)
            return None

        if response.status_code == httpx.codes.UNAUTHORIZED:
            self._auth.invalidate(_bearer_token(response.request))
        if not response.is_success:
            logger.info("TVDB request %s returned %s", path, response.status_code)
            return None

        try:
            return response.json()
        except ValueError:  # response was not JSON
            logger.warning("TVDB request %s returned a non-JSON body", path)
            return None

    def _retry_policy(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=0.5, max=4),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )

    async def __aenter__(self) -> TvdbClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        await self.close()


@asynccontextmanager
async def tvdb_client(
    api_key: str,
    *,
    base_url: str = DEFAULT_BASE_URL,
    pin: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    token_lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
    safety_margin: timedelta = DEFAULT_SAFETY_MARGIN,
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
):
    client = TvdbClient(
        api_key,
        base_url=base_url,
        pin=pin,
        timeout=timeout,
        token_lifetime=token_lifetime,
        safety_margin=safety_margin,
        retry_attempts=retry_attempts,
    )
    try:
        yield client
    finally:
        await client.close()


def _bearer_token(request: httpx.Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    return token if scheme == "Bearer" and token else None


def parse_first_aired(value: str | None) -> date | None:
    """Parse a TVDB date string; blanks, garbage and the 0001-01-01 sentinel become ``None``."""

    if not value or not value.strip():
        return None
    try:
        parsed = date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None
    if parsed == date.min:
        return None
    return parsed


def search_result_to_movie(result: TvdbSearchResult) -> Movie:
    try:
        movie_id = int(result.tvdb_id)
    except (TypeError, ValueError):
        movie_id = 0

    # Search results carry no genre or rating data
    return Movie(
        id=movie_id,
        title=result.name or "",
        overview=result.overview or "",
        first_aired=parse_first_aired(result.first_air_time),
        poster_url=result.image_url or None,
    )


def details_to_movie(details: TvdbMovieDetails) -> Movie:
    return Movie(
        id=details.id,
        title=details.name or "",
        overview=details.overview or "",
        first_aired=parse_first_aired(details.first_air_time),
        poster_url=details.image or None,
        genres=[genre.name for genre in details.genres or [] if genre.name],
        rating=details.score,
        runtime=details.runtime,
        status=details.status.name if details.status else None,
        companies=[company.name for company in details.companies or [] if company.name],
    )


__all__ = [
    "TvdbClient",
    "details_to_movie",
    "parse_first_aired",
    "search_result_to_movie",
    "tvdb_client",
]
