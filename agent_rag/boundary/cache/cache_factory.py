"""
Search cache factory.

Dependencies: agent_rag.boundary.cache, agent_rag.configs
System role: Cache backend selection
"""

import logging

from agent_rag.boundary.cache.search_cache import (
    InMemorySearchCache,
    RedisSearchCache,
    SearchCache,
)
from agent_rag.configs.cache import CacheSettings

logger = logging.getLogger(__name__)


def get_search_cache(settings: CacheSettings) -> SearchCache:
    """
    Build the configured cache backend.

    Raises:
        ValueError: If backend is unknown or redis_url is missing for redis
    """
    backend = settings.backend.lower()

    if backend == "memory":
        logger.info(f"{__name__}:get_search_cache - Using in-memory search cache")
        return InMemorySearchCache(max_entries=settings.max_entries)

    if backend == "redis":
        if not settings.redis_url:
            raise ValueError("CACHE_REDIS_URL is required when CACHE_BACKEND=redis")
        logger.info(f"{__name__}:get_search_cache - Using Redis search cache")
        return RedisSearchCache(settings.redis_url)

    raise ValueError(f"Invalid CACHE_BACKEND: {backend}. Must be 'memory' or 'redis'.")
