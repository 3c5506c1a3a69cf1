"""
Test suite for search cache backends and factory.

Redis is replaced by an AsyncMock client; the in-memory backend is
exercised directly.

System role: Verification of the similarity search cache layer
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from agent_rag.boundary.cache import (
    InMemorySearchCache,
    RedisSearchCache,
    get_search_cache,
)
from agent_rag.configs.cache import CacheSettings
from agent_rag.core.exceptions import CacheError


@pytest.fixture
def memory_cache() -> InMemorySearchCache:
    """Provide empty in-memory cache."""
    return InMemorySearchCache()


@pytest.fixture
def redis_client() -> MagicMock:
    """Provide mocked async Redis client."""
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.setex = AsyncMock()
    client.delete = AsyncMock(return_value=0)
    client.aclose = AsyncMock()
    return client


def _scan_returning(keys: list[str]):
    async def _scan_iter(match: str, count: int):
        for key in keys:
            yield key

    return _scan_iter


class TestInMemorySearchCache:
    """Test suite for InMemorySearchCache."""

    @pytest.mark.asyncio
    async def test_get_should_return_stored_value(self, memory_cache: InMemorySearchCache) -> None:
        await memory_cache.set("vector_search:a:q:5:0.7", "[]", ttl_seconds=60)

        assert await memory_cache.get("vector_search:a:q:5:0.7") == "[]"

    @pytest.mark.asyncio
    async def test_get_should_miss_unknown_key(self, memory_cache: InMemorySearchCache) -> None:
        assert await memory_cache.get("missing") is None

    @pytest.mark.asyncio
    async def test_expired_entry_should_be_evicted_on_read(
        self, memory_cache: InMemorySearchCache
    ) -> None:
        await memory_cache.set("key", "value", ttl_seconds=0)

        assert await memory_cache.get("key") is None
        assert len(memory_cache) == 0

    @pytest.mark.asyncio
    async def test_set_should_purge_expired_entries(
        self, memory_cache: InMemorySearchCache
    ) -> None:
        """Expired keys never read again do not accumulate."""
        # Arrange
        for i in range(1000):
            await memory_cache.set(f"vector_search:agent:q{i}:5:0.7", "[]", ttl_seconds=0)

        # Act
        await memory_cache.set("vector_search:agent:live:5:0.7", "[]", ttl_seconds=60)

        # Assert
        assert len(memory_cache) == 1
        assert await memory_cache.get("vector_search:agent:live:5:0.7") == "[]"

    @pytest.mark.asyncio
    async def test_set_should_evict_oldest_past_max_entries(self) -> None:
        cache = InMemorySearchCache(max_entries=2)

        await cache.set("a", "1", 60)
        await cache.set("b", "2", 60)
        await cache.set("c", "3", 60)

        assert len(cache) == 2
        assert await cache.get("a") is None
        assert await cache.get("b") == "2"
        assert await cache.get("c") == "3"

    @pytest.mark.asyncio
    async def test_rewriting_key_should_refresh_its_position(self) -> None:
        cache = InMemorySearchCache(max_entries=2)

        await cache.set("a", "1", 60)
        await cache.set("b", "2", 60)
        await cache.set("a", "1b", 60)
        await cache.set("c", "3", 60)

        assert await cache.get("a") == "1b"
        assert await cache.get("b") is None

    def test_max_entries_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            InMemorySearchCache(max_entries=0)

    @pytest.mark.asyncio
    async def test_delete_prefix_should_only_remove_matching_keys(
        self, memory_cache: InMemorySearchCache
    ) -> None:
        # Arrange
        await memory_cache.set("vector_search:agent-1:q1:5:0.7", "[]", 60)
        await memory_cache.set("vector_search:agent-1:q2:5:0.7", "[]", 60)
        await memory_cache.set("vector_search:agent-2:q1:5:0.7", "[]", 60)

        # Act
        removed = await memory_cache.delete_prefix("vector_search:agent-1:")

        # Assert
        assert removed == 2
        assert await memory_cache.get("vector_search:agent-2:q1:5:0.7") == "[]"


class TestRedisSearchCache:
    """Test suite for RedisSearchCache."""

    @pytest.mark.asyncio
    async def test_set_should_use_setex_with_ttl(self, redis_client: MagicMock) -> None:
        cache = RedisSearchCache("redis://localhost:6379/0", client=redis_client)

        await cache.set("key", "value", ttl_seconds=3600)

        redis_client.setex.assert_awaited_once_with("key", 3600, "value")

    @pytest.mark.asyncio
    async def test_get_should_return_client_value(self, redis_client: MagicMock) -> None:
        redis_client.get.return_value = "cached"
        cache = RedisSearchCache("redis://localhost:6379/0", client=redis_client)

        assert await cache.get("key") == "cached"

    @pytest.mark.asyncio
    async def test_redis_errors_should_become_cache_errors(self, redis_client: MagicMock) -> None:
        redis_client.get.side_effect = RedisConnectionError("down")
        cache = RedisSearchCache("redis://localhost:6379/0", client=redis_client)

        with pytest.raises(CacheError) as exc_info:
            await cache.get("key")

        assert isinstance(exc_info.value.__cause__, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_delete_prefix_should_delete_scanned_keys(self, redis_client: MagicMock) -> None:
        # Arrange
        redis_client.scan_iter = _scan_returning(["p:1", "p:2"])
        redis_client.delete.return_value = 2
        cache = RedisSearchCache("redis://localhost:6379/0", client=redis_client)

        # Act
        removed = await cache.delete_prefix("p:")

        # Assert
        assert removed == 2
        redis_client.delete.assert_awaited_once_with("p:1", "p:2")

    @pytest.mark.asyncio
    async def test_delete_prefix_without_matches_should_skip_delete(
        self, redis_client: MagicMock
    ) -> None:
        redis_client.scan_iter = _scan_returning([])
        cache = RedisSearchCache("redis://localhost:6379/0", client=redis_client)

        assert await cache.delete_prefix("p:") == 0
        redis_client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_should_close_client(self, redis_client: MagicMock) -> None:
        cache = RedisSearchCache("redis://localhost:6379/0", client=redis_client)

        await cache.close()

        redis_client.aclose.assert_awaited_once()


class TestGetSearchCache:
    """Test suite for get_search_cache()."""

    def test_memory_backend(self) -> None:
        assert isinstance(get_search_cache(CacheSettings(backend="memory")), InMemorySearchCache)

    def test_memory_backend_should_apply_entry_cap(self) -> None:
        cache = get_search_cache(CacheSettings(backend="memory", max_entries=5))

        assert cache._max_entries == 5

    def test_redis_backend_requires_url(self) -> None:
        with pytest.raises(ValueError):
            get_search_cache(CacheSettings(backend="redis", redis_url=None))

    def test_redis_backend(self) -> None:
        cache = get_search_cache(
            CacheSettings(backend="redis", redis_url="redis://localhost:6379/0")
        )

        assert isinstance(cache, RedisSearchCache)

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError):
            get_search_cache(CacheSettings(backend="memcached"))
