from __future__ import annotations

from collections.abc import Sequence

from moviedeck.clients.tvdb import TvdbClient
from moviedeck.discovery import DiscoveryPaginator, InteractionLookup
from moviedeck.discovery.paginator import DEFAULT_PAGE_SIZE
from moviedeck.models import Movie


class DiscoveryService:
    """Caller-facing entry points for browsing, searching and inspecting movies."""

    def __init__(
        self,
        client: TvdbClient,
        corpus: Sequence[str],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        seen: InteractionLookup | None = None,
    ) -> None:
        self._client = client
        self._paginator = DiscoveryPaginator(client, corpus, page_size=page_size, seen=seen)

    @property
    def paginator(self) -> DiscoveryPaginator:
        return self._paginator

    async def get_popular_movies(self, page: int = 1) -> list[Movie]:
        return await self._paginator.get_page(page)

    async def search_movies(self, query: str) -> list[Movie]:
        return await self._client.search(query)

    async def get_movie_details(self, movie_id: int) -> Movie | None:
        return await self._client.get_details(movie_id)


__all__ = ["DiscoveryService"]
