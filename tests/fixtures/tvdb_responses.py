"""Fixture data for TVDB API responses."""

from typing import Any

BASE_URL = "https://api.test/v4"

LOGIN_SUCCESS_RESPONSE: dict[str, Any] = {
    "status": "success",
    "data": {"token": "test-token-abc"},
}

LOGIN_NO_TOKEN_RESPONSE: dict[str, Any] = {
    "status": "success",
    "data": {},
}

LOGIN_UNAUTHORIZED_RESPONSE: dict[str, Any] = {
    "status": "failure",
    "message": "InvalidAPIKey",
    "data": None,
}

SEARCH_MATRIX_RESPONSE: dict[str, Any] = {
    "status": "success",
    "data": [
        {
            "tvdb_id": "169",
            "name": "The Matrix",
            "overview": "A hacker learns the truth about his reality.",
            "first_air_time": "1999-03-31",
            "image_url": "https://artworks.thetvdb.com/banners/movies/169/posters/169.jpg",
            "type": "movie",
            "year": "1999",
        },
        {
            "tvdb_id": "170",
            "name": "The Matrix Reloaded",
            "overview": "Neo and the rebels fight on.",
            "first_air_time": "2003-05-15",
            "image_url": None,
            "type": "Movie",
            "year": "2003",
        },
        {
            "tvdb_id": "75870",
            "name": "The Matrix Experience",
            "overview": "A series about the films.",
            "first_air_time": "2001-01-01",
            "type": "series",
        },
        {
            "tvdb_id": "not-a-number",
            "name": "Matrix Fan Edit",
            "overview": "",
            "first_air_time": "",
            "type": "movie",
        },
    ],
}

SEARCH_EMPTY_RESPONSE: dict[str, Any] = {
    "status": "success",
    "data": [],
}

SEARCH_NULL_DATA_RESPONSE: dict[str, Any] = {
    "status": "success",
    "data": None,
}

MOVIE_DETAILS_RESPONSE: dict[str, Any] = {
    "status": "success",
    "data": {
        "id": 169,
        "name": "The Matrix",
        "overview": "A hacker learns the truth about his reality.",
        "first_air_time": "1999-03-31",
        "image": "https://artworks.thetvdb.com/banners/movies/169/posters/169.jpg",
        "genres": [
            {"id": 1, "name": "Action"},
            {"id": 17, "name": "Science Fiction"},
            {"id": 8, "name": "Thriller"},
        ],
        "score": 8.7,
        "status": {"id": 5, "name": "Released"},
        "runtime": 136,
        "companies": [
            {"id": 10, "name": "Warner Bros. Pictures"},
            {"id": 11, "name": "Village Roadshow Pictures"},
        ],
    },
}

MOVIE_DETAILS_SPARSE_RESPONSE: dict[str, Any] = {
    "status": "success",
    "data": {
        "id": 4242,
        "name": "Untitled Project",
        "overview": None,
        "first_air_time": "not a date",
    },
}


SEARCH_NULL_ID_RESPONSE = {
    "status": "success",
    "data": [
        {"tvdb_id": "169", "name": "The Matrix", "type": "movie"},
        {"tvdb_id": None, "name": "Broken", "type": "movie"},
    ],
}


def search_payload(*entries: tuple[int, str]) -> dict[str, Any]:
    """Build a search envelope from ``(tvdb_id, name)`` pairs."""
    return {
        "status": "success",
        "data": [
            {"tvdb_id": str(tvdb_id), "name": name, "overview": "", "type": "movie"}
            for tvdb_id, name in entries
        ],
    }
