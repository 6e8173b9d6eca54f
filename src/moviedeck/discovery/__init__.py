from .paginator import (
    CatalogSearcher,
    DiscoveryPaginator,
    InteractionLookup,
    SearchOutcome,
    SearchPlan,
)
from .variations import GENRE_FALSE_POSITIVES, QUERY_VARIATIONS, is_displayable, vary_query

__all__ = [
    "CatalogSearcher",
    "DiscoveryPaginator",
    "GENRE_FALSE_POSITIVES",
    "InteractionLookup",
    "QUERY_VARIATIONS",
    "SearchOutcome",
    "SearchPlan",
    "is_displayable",
    "vary_query",
]
