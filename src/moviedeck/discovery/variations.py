from __future__ import annotations

from collections.abc import Callable

from moviedeck.models import Movie

QueryVariation = Callable[[str], str]


def _verbatim(title: str) -> str:
    return title


def _strip_leading_article(title: str) -> str:
    return title[4:] if title.startswith("The ") else title


def _append(suffix: str) -> QueryVariation:
    def variation(title: str) -> str:
        return f"{title} {suffix}"

    return variation


# Index is ``cycle % len(QUERY_VARIATIONS)``; order matters for determinism
QUERY_VARIATIONS: tuple[QueryVariation, ...] = (
    _verbatim,
    _append("2"),
    _append("II"),
    _append("Returns"),
    _append("Reloaded"),
    _strip_leading_article,
    _append("movie"),
)

# Genre tags the search endpoint sometimes returns as if they were movies
GENRE_FALSE_POSITIVES = frozenset(
    {
        "action",
        "adventure",
        "animation",
        "comedy",
        "crime",
        "documentary",
        "drama",
        "family",
        "fantasy",
        "horror",
        "musical",
        "mystery",
        "romance",
        "sci-fi",
        "science fiction",
        "thriller",
        "war",
        "western",
    }
)


def vary_query(title: str, cycle: int) -> str:
    """Search term for ``title`` on the given pass through the corpus."""

    if cycle <= 0:
        return title
    return QUERY_VARIATIONS[cycle % len(QUERY_VARIATIONS)](title)


def is_displayable(movie: Movie) -> bool:
    title = movie.title.strip()
    if len(title) <= 1:
        return False
    if title.casefold() in GENRE_FALSE_POSITIVES:
        return False
    return movie.id > 0


__all__ = ["GENRE_FALSE_POSITIVES", "QUERY_VARIATIONS", "is_displayable", "vary_query"]
