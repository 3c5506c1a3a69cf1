"""Search result cache backends and factory."""

from agent_rag.boundary.cache.cache_factory import get_search_cache
from agent_rag.boundary.cache.search_cache import (
    InMemorySearchCache,
    RedisSearchCache,
    SearchCache,
)

__all__ = ["SearchCache", "InMemorySearchCache", "RedisSearchCache", "get_search_cache"]
