from .movie import Movie
from .tvdb import TvdbAuthData, TvdbMovieDetails, TvdbNamed, TvdbResponse, TvdbSearchResult

__all__ = [
    "Movie",
    "TvdbAuthData",
    "TvdbMovieDetails",
    "TvdbNamed",
    "TvdbResponse",
    "TvdbSearchResult",
]
