from .loader import (
    FALLBACK_TITLES,
    RowOutcome,
    TitleCorpusLoader,
    clean_title,
    extract_title,
    load_corpus,
    parse_corpus,
    parse_row,
)

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
