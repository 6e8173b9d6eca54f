"""Page assembly for catalogs that only offer title search.

A page request becomes a sequence of searches over corpus titles. Pages that run
past the end of the corpus start another *cycle*, and each cycle rewrites the
titles with a different query variation so repeated passes surface other
catalog entries. Work per page is capped at ``page_size * 3`` searches.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from moviedeck.discovery.variations import is_displayable, vary_query
from moviedeck.models import Movie

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
ATTEMPTS_PER_SLOT = 3
MAX_RESULTS_PER_SEARCH = 2


class CatalogSearcher(Protocol):
    """Anything that can turn a query string into movies."""

    async def search(self, query: str) -> list[Movie]:
        """Return movies matching ``query``."""


class InteractionLookup(Protocol):
    """Read side of the external swipe-decision store."""

    async def has_interacted(self, movie_id: int) -> bool:
        """Return True when the user already matched or rejected ``movie_id``."""


@dataclass(frozen=True)
class SearchPlan:
    page: int
    cycle: int
    offset: int
    queries: tuple[str, ...]


@dataclass
class SearchOutcome:
    query: str
    movies: list[Movie] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DiscoveryPaginator:
    def __init__(
        self,
        searcher: CatalogSearcher,
        corpus: Sequence[str],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        seen: InteractionLookup | None = None,
    ) -> None:
        if not corpus:
            raise ValueError("corpus must contain at least one title")
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._searcher = searcher
        self._corpus = tuple(corpus)
        self._page_size = page_size
        self._seen = seen

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def max_attempts(self) -> int:
        return self._page_size * ATTEMPTS_PER_SLOT

    def plan(self, page: int) -> SearchPlan:
        """Work out which queries a page request will issue, in order."""

        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")

        size = len(self._corpus)
        start_index = (page - 1) * self._page_size
        cycle, offset = divmod(start_index, size)
        queries = tuple(
            vary_query(self._corpus[(offset + attempt) % size], cycle)
            for attempt in range(self.max_attempts)
        )
        return SearchPlan(page=page, cycle=cycle, offset=offset, queries=queries)

    async def get_page(self, page: int) -> list[Movie]:
        plan = self.plan(page)
        logger.debug(
            "Page %s: cycle=%s offset=%s corpus=%s", page, plan.cycle, plan.offset, len(self._corpus)
        )

        movies: list[Movie] = []
        page_ids: set[int] = set()
        attempts = 0
        for query in plan.queries:
            if len(movies) >= self._page_size:
                break
            attempts += 1
            outcome = await self._search(query)
            if not outcome.ok:
                logger.info("Search for %r failed, continuing: %s", query, outcome.error)
                continue

            survivors = [movie for movie in outcome.movies if is_displayable(movie)]
            for movie in survivors[:MAX_RESULTS_PER_SEARCH]:
                if movie.id in page_ids:
                    continue
                if self._seen is not None and await self._seen.has_interacted(movie.id):
                    continue
                page_ids.add(movie.id)
                movies.append(movie)
                if len(movies) >= self._page_size:
                    break

        logger.debug("Page %s assembled %s movies in %s searches", page, len(movies), attempts)
        return movies

    async def _search(self, query: str) -> SearchOutcome:
        try:
            movies = await self._searcher.search(query)
        except (httpx.HTTPError, ValueError) as exc:
            return SearchOutcome(query=query, error=str(exc) or type(exc).__name__)
        return SearchOutcome(query=query, movies=movies)


__all__ = [
    "CatalogSearcher",
    "DiscoveryPaginator",
    "InteractionLookup",
    "SearchOutcome",
    "SearchPlan",
]
