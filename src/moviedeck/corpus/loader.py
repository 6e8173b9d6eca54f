"""Title corpus used to drive catalog searches.

The packaged ``movies.csv`` follows the MovieLens layout (``movieId,title,genres``).
Titles are normalized once per process and shared read-only by every page request.
"""

from __future__ import annotations

import csv
import logging
import re
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

logger = logging.getLogger(__name__)

PACKAGED_RESOURCE = "data/movies.csv"

FALLBACK_TITLES: tuple[str, ...] = (
    "The Shawshank Redemption",
    "The Godfather",
    "The Dark Knight",
    "Pulp Fiction",
    "The Lord of the Rings",
    "Forrest Gump",
    "Star Wars",
    "Inception",
    "The Matrix",
    "Goodfellas",
    "The Silence of the Lambs",
    "Saving Private Ryan",
    "Schindler's List",
    "Terminator 2",
    "Back to the Future",
    "Alien",
    "The Lion King",
    "Gladiator",
)

_AKA_PATTERN = re.compile(r"\s*\(a\.k\.a\.[^)]*\)", re.IGNORECASE)
_YEAR_SUFFIX_PATTERN = re.compile(r"\s*\(\d{4}\)\s*$")
_WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True)
class RowOutcome:
    """Result of parsing one CSV data row: a title, or the reason it was skipped."""

    line_number: int
    title: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.title is not None


def extract_title(line: str) -> str:
    """Return the raw second column of a CSV row, honouring quoted commas."""

    fields = next(csv.reader([line]), [])
    if len(fields) < 2:
        raise ValueError(f"expected at least 2 columns, got {len(fields)}")
    return fields[1]


def clean_title(raw: str) -> str:
    """Strip ``(a.k.a. ...)`` annotations and a trailing ``(YYYY)`` year."""

    title = _AKA_PATTERN.sub("", raw)
    title = _YEAR_SUFFIX_PATTERN.sub("", title)
    return _WHITESPACE_PATTERN.sub(" ", title).strip()


def parse_row(line: str, line_number: int = 0) -> RowOutcome:
    try:
        title = clean_title(extract_title(line))
    except (ValueError, csv.Error) as exc:
        return RowOutcome(line_number=line_number, error=str(exc))
    if len(title) <= 1:
        return RowOutcome(line_number=line_number, error=f"unusable title {title!r}")
    return RowOutcome(line_number=line_number, title=title)


def parse_corpus(lines: Iterable[str]) -> tuple[str, ...]:
    """Parse data rows (header excluded) into a deduplicated, ordered title tuple."""

    titles: list[str] = []
    seen: set[str] = set()
    skipped = 0
    for line_number, line in enumerate(lines, start=2):
        if not line.strip():
            continue
        outcome = parse_row(line, line_number)
        title = outcome.title
        if title is None:
            skipped += 1
            logger.debug("Skipping corpus row %s: %s", line_number, outcome.error)
            continue
        if title in seen:
            continue
        seen.add(title)
        titles.append(title)
    if skipped:
        logger.debug("Skipped %s unusable corpus rows", skipped)
    return tuple(titles)


class TitleCorpusLoader:
    """Loads the title corpus once and memoizes it.

    ``load`` never raises: a missing, unreadable or empty resource yields
    ``FALLBACK_TITLES``.
    """

    def __init__(self, resource: Path | Traversable | None = None) -> None:
        self._resource = resource
        self._titles: tuple[str, ...] | None = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._titles is not None

    def load(self) -> tuple[str, ...]:
        titles = self._titles
        if titles is not None:
            return titles
        with self._lock:
            if self._titles is None:
                self._titles = self._read()
            return self._titles

    def _read(self) -> tuple[str, ...]:
        resource = self._resource or resources.files("moviedeck.corpus").joinpath(PACKAGED_RESOURCE)
        try:
            text = resource.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Title corpus unavailable (%s); using built-in titles", exc)
            return FALLBACK_TITLES

        # Drop the header row
        titles = parse_corpus(text.splitlines()[1:])
        if not titles:
            logger.warning("Title corpus %s has no usable rows; using built-in titles", resource)
            return FALLBACK_TITLES

        logger.debug("Loaded %s corpus titles from %s", len(titles), resource)
        return titles


_default_loader = TitleCorpusLoader()


def load_corpus(path: Path | None = None) -> tuple[str, ...]:
    """Return the process-wide corpus, or a freshly loaded one for an explicit path."""

    if path is not None:
        return TitleCorpusLoader(path).load()
    return _default_loader.load()


__all__ = [
    "FALLBACK_TITLES",
    "RowOutcome",
    "TitleCorpusLoader",
    "clean_title",
    "extract_title",
    "load_corpus",
    "parse_corpus",
    "parse_row",
]
