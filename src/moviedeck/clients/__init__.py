from ..errors import MoviedeckError
from .auth import AuthenticationError, CatalogAuthManager, Credential
from .tvdb import TvdbClient, tvdb_client

__all__ = [
    "AuthenticationError",
    "CatalogAuthManager",
    "Credential",
    "MoviedeckError",
    "TvdbClient",
    "tvdb_client",
]
