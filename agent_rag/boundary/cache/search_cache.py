"""
Search result cache backends.

Values are JSON strings; serialization belongs to the caller. Backends
raise CacheError on failure and never interpret cached content.

Dependencies: redis (async client), time, collections
System role: TTL cache in front of similarity search
"""

import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from agent_rag.core.exceptions import CacheError

logger = logging.getLogger(__name__)


class SearchCache(ABC):
    """Key/value cache with per-entry TTL and prefix invalidation."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the cached value, or None on miss or expiry."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store value under key for ttl_seconds."""

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with prefix. Returns the number removed."""

    async def close(self) -> None:
        """Release backend resources."""


class InMemorySearchCache(SearchCache):
    """
    Process-local cache for development and tests.

    Expiry uses time.monotonic. Expired entries are dropped on read and
    purged on every write; past max_entries the oldest write is evicted.
    Invalidation only reaches the owning process.
    """

    def __init__(self, max_entries: int = 10_000) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._entries: OrderedDict[str, tuple[float, str]] = OrderedDict()

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if time.monotonic() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        now = time.monotonic()
        self._purge_expired(now)
        self._entries.pop(key, None)
        self._entries[key] = (now + ttl_seconds, value)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    async def delete_prefix(self, prefix: str) -> int:
        keys = [key for key in self._entries if key.startswith(prefix)]
        for key in keys:
            del self._entries[key]
        return len(keys)

    def __len__(self) -> int:
        return len(self._entries)


class RedisSearchCache(SearchCache):
    """Redis-backed cache shared by all API and worker processes."""

    def __init__(self, redis_url: str, client: aioredis.Redis | None = None) -> None:
        """
        Initialize Redis cache.

        Args:
            redis_url: Redis connection URL
            client: Optional pre-built client (tests)
        """
        self._client = client or aioredis.from_url(redis_url, decode_responses=True)

    async def get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except RedisError as e:
            raise CacheError(f"Redis GET failed: {e}", {"key": key}) from e

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._client.setex(key, ttl_seconds, value)
        except RedisError as e:
            raise CacheError(f"Redis SETEX failed: {e}", {"key": key}) from e

    async def delete_prefix(self, prefix: str) -> int:
        try:
            keys = [key async for key in self._client.scan_iter(match=f"{prefix}*", count=500)]
            if not keys:
                return 0
            return int(await self._client.delete(*keys))
        except RedisError as e:
            raise CacheError(f"Redis prefix delete failed: {e}", {"prefix": prefix}) from e

    async def close(self) -> None:
        await self._client.aclose()
