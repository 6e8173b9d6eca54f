"""Tests for discovery page assembly."""

import httpx
import pytest

from moviedeck.clients.auth import AuthenticationError
from moviedeck.discovery import DiscoveryPaginator, vary_query
from moviedeck.models import Movie


class FakeSearcher:
    """Records queries and answers from a mapping or a callable."""

    def __init__(self, responses=None, *, default=None):
        self.queries: list[str] = []
        self._responses = responses or {}
        self._default = default

    async def search(self, query: str) -> list[Movie]:
        self.queries.append(query)
        response = self._responses.get(query, self._default)
        if callable(response):
            response = response(query, len(self.queries))
        if isinstance(response, Exception):
            raise response
        return list(response or [])


class FakeSeen:
    def __init__(self, ids):
        self.ids = set(ids)
        self.checked: list[int] = []

    async def has_interacted(self, movie_id: int) -> bool:
        self.checked.append(movie_id)
        return movie_id in self.ids


def movie(movie_id: int, title: str | None = None) -> Movie:
    return Movie(id=movie_id, title=title or f"Movie {movie_id}")


def unique_movies(query: str, call_number: int) -> list[Movie]:
    """Every search returns two fresh movies."""
    base = call_number * 10
    return [movie(base + 1), movie(base + 2)]


CORPUS = [f"Title {index}" for index in range(25)]


class TestPlan:
    def test_first_page_starts_at_offset_zero(self):
        paginator = DiscoveryPaginator(FakeSearcher(), CORPUS)
        plan = paginator.plan(1)

        assert plan.cycle == 0
        assert plan.offset == 0
        assert len(plan.queries) == 30
        assert plan.queries[:3] == ("Title 0", "Title 1", "Title 2")

    def test_queries_wrap_around_the_corpus(self):
        paginator = DiscoveryPaginator(FakeSearcher(), CORPUS)
        plan = paginator.plan(2)

        assert plan.offset == 10
        assert plan.queries[14] == "Title 24"
        assert plan.queries[15] == "Title 0"

    def test_later_cycles_use_variations(self):
        paginator = DiscoveryPaginator(FakeSearcher(), CORPUS)
        plan = paginator.plan(4)

        assert plan.cycle == 1
        assert plan.offset == 5
        assert plan.queries[0] == "Title 5 2"

    def test_pages_in_same_cycle_use_identical_base_terms(self):
        paginator = DiscoveryPaginator(FakeSearcher(), CORPUS)

        assert paginator.plan(2).queries == paginator.plan(2).queries
        first, second = paginator.plan(1), paginator.plan(2)
        assert first.cycle == second.cycle == 0
        assert first.queries[10:] == second.queries[:20]

    def test_alpha_beta_scenario(self):
        paginator = DiscoveryPaginator(FakeSearcher(), ["Alpha", "Beta"])
        plan = paginator.plan(1)

        assert plan.cycle == 0
        assert plan.offset == 0
        assert plan.queries == ("Alpha", "Beta") * 15

    @pytest.mark.parametrize("page", [0, -1])
    def test_non_positive_page_rejected(self, page):
        paginator = DiscoveryPaginator(FakeSearcher(), CORPUS)
        with pytest.raises(ValueError):
            paginator.plan(page)

    def test_empty_corpus_rejected(self):
        with pytest.raises(ValueError):
            DiscoveryPaginator(FakeSearcher(), [])

    def test_custom_page_size_scales_attempt_cap(self):
        paginator = DiscoveryPaginator(FakeSearcher(), CORPUS, page_size=4)
        assert paginator.max_attempts == 12
        assert len(paginator.plan(1).queries) == 12


class TestGetPage:
    @pytest.mark.asyncio
    async def test_fills_page_with_unique_movies(self):
        searcher = FakeSearcher(default=unique_movies)
        paginator = DiscoveryPaginator(searcher, CORPUS)

        page = await paginator.get_page(1)

        assert len(page) == 10
        assert len({m.id for m in page}) == 10
        assert searcher.queries == [f"Title {index}" for index in range(5)]

    @pytest.mark.asyncio
    async def test_takes_at_most_two_results_per_search(self):
        searcher = FakeSearcher(
            default=lambda query, n: [movie(n * 10 + k) for k in range(1, 6)]
        )
        paginator = DiscoveryPaginator(searcher, CORPUS)

        page = await paginator.get_page(1)

        assert [m.id for m in page[:4]] == [11, 12, 21, 22]
        assert len(searcher.queries) == 5

    @pytest.mark.asyncio
    async def test_stops_mid_search_when_page_is_full(self):
        searcher = FakeSearcher(default=unique_movies)
        paginator = DiscoveryPaginator(searcher, CORPUS, page_size=3)

        page = await paginator.get_page(1)

        assert [m.id for m in page] == [11, 12, 21]
        assert len(searcher.queries) == 2

    @pytest.mark.asyncio
    async def test_filters_noise_results(self):
        noise = [
            Movie(id=1, title="comedy"),
            Movie(id=2, title="Drama"),
            Movie(id=3, title="X"),
            Movie(id=0, title="Unresolved"),
            Movie(id=-5, title="Negative"),
            Movie(id=4, title="  "),
            Movie(id=5, title="Real Movie"),
        ]
        searcher = FakeSearcher({"Alpha": noise})
        paginator = DiscoveryPaginator(searcher, ["Alpha"])

        page = await paginator.get_page(1)

        assert [m.id for m in page] == [5]

    @pytest.mark.asyncio
    async def test_duplicates_across_searches_are_skipped(self):
        searcher = FakeSearcher(
            {
                "Alpha": [movie(1), movie(2)],
                "Beta": [movie(2), movie(3)],
            }
        )
        paginator = DiscoveryPaginator(searcher, ["Alpha", "Beta"])

        page = await paginator.get_page(1)

        assert [m.id for m in page] == [1, 2, 3]
        assert searcher.queries == ["Alpha", "Beta"] * 15

    @pytest.mark.asyncio
    async def test_alpha_beta_scenario_runs_every_planned_search(self):
        searcher = FakeSearcher(
            {
                "Alpha": [movie(1), movie(2), movie(3)],
                "Beta": [movie(4), Movie(id=5, title="Comedy"), movie(6)],
            }
        )
        paginator = DiscoveryPaginator(searcher, ["Alpha", "Beta"])

        page = await paginator.get_page(1)

        assert len(searcher.queries) == 30
        assert searcher.queries[:4] == ["Alpha", "Beta", "Alpha", "Beta"]
        assert [m.id for m in page] == [1, 2, 4, 6]

    @pytest.mark.asyncio
    async def test_failed_search_does_not_fail_page(self):
        searcher = FakeSearcher(
            {
                "Title 0": httpx.ReadTimeout("slow"),
                "Title 1": ValueError("bad payload"),
            },
            default=unique_movies,
        )
        paginator = DiscoveryPaginator(searcher, CORPUS)

        page = await paginator.get_page(1)

        assert len(page) == 10
        assert searcher.queries[:2] == ["Title 0", "Title 1"]

    @pytest.mark.asyncio
    async def test_authentication_failure_aborts_page(self):
        searcher = FakeSearcher(default=AuthenticationError("denied", status_code=401))
        paginator = DiscoveryPaginator(searcher, CORPUS)

        with pytest.raises(AuthenticationError):
            await paginator.get_page(1)
        assert len(searcher.queries) == 1

    @pytest.mark.asyncio
    async def test_empty_results_return_short_page(self):
        searcher = FakeSearcher(default=[])
        paginator = DiscoveryPaginator(searcher, CORPUS)

        page = await paginator.get_page(3)

        assert page == []
        assert len(searcher.queries) == 30

    @pytest.mark.asyncio
    async def test_seen_movies_are_skipped(self):
        searcher = FakeSearcher({"Alpha": [movie(1), movie(2)], "Beta": [movie(3)]})
        seen = FakeSeen({2})
        paginator = DiscoveryPaginator(searcher, ["Alpha", "Beta"], seen=seen)

        page = await paginator.get_page(1)

        assert [m.id for m in page] == [1, 3]
        assert 2 in seen.checked

    @pytest.mark.asyncio
    async def test_second_cycle_searches_variations(self):
        searcher = FakeSearcher(default=[])
        corpus = ["The Matrix", "Alien"]
        paginator = DiscoveryPaginator(searcher, corpus, page_size=1)

        await paginator.get_page(3)

        assert searcher.queries == ["The Matrix 2", "Alien 2", "The Matrix 2"]
        assert vary_query("The Matrix", 1) == "The Matrix 2"

    @pytest.mark.asyncio
    async def test_pages_stay_unique_and_filtered(self):
        searcher = FakeSearcher(
            default=lambda query, n: [movie(n % 7 + 1), movie(n % 5 + 100), Movie(id=9, title="horror")]
        )
        paginator = DiscoveryPaginator(searcher, CORPUS)

        for page_number in range(1, 8):
            page = await paginator.get_page(page_number)
            ids = [m.id for m in page]
            assert len(page) <= paginator.page_size
            assert len(ids) == len(set(ids))
            assert all(m.id > 0 and m.title.lower() != "horror" for m in page)
