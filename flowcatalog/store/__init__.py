"""Entity query cache for backend reads."""

from flowcatalog.store.cache import Loader, NotFound, QueryCache, QueryError, QueryState
from flowcatalog.store.keys import QueryKey, key_matches, make_key

__all__ = [
    "Loader",
    "NotFound",
    "QueryCache",
    "QueryError",
    "QueryKey",
    "QueryState",
    "key_matches",
    "make_key",
]
