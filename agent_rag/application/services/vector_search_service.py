"""
Vector search service orchestrator.

Agent-scoped similarity search: cache lookup, query embedding, filtered
vector search, then a join back to the catalog for authoritative content.

Dependencies: pydantic, agent_rag.boundary, agent_rag.core
System role: Retrieval orchestration for RAG
"""

import hashlib
import json
import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from agent_rag.application.services.embedding_service import EmbeddingService
from agent_rag.boundary.cache.search_cache import SearchCache
from agent_rag.boundary.vdb.vector_index import VectorIndex
from agent_rag.boundary.vdb.vector_schemas import VectorSearchHit
from agent_rag.configs.cache import CacheSettings
from agent_rag.core.document_processing.tasks import EmbeddingTask
from agent_rag.core.exceptions import CacheError, RetrievalError, ValidationError
from agent_rag.observability.log_utils import preview

logger = logging.getLogger(__name__)

MIN_LIMIT = 1
MAX_LIMIT = 20


class SearchResult(BaseModel):
    """Single ranked search result joined with its catalog row."""

    id: str = Field(description="Embedding id (catalog row and index point)")
    agent_id: str
    document_id: str
    chunk_index: int
    content: str
    similarity: float = Field(ge=0.0, le=1.0)
    metadata: dict[str, Any] = Field(default_factory=dict)
    token_count: int
    created_at: datetime | None = None


_RESULTS_ADAPTER = TypeAdapter(list[SearchResult])


def hash_query(query: str) -> str:
    """Stable short digest of the raw query text."""
    return hashlib.sha256(query.encode("utf-8")).hexdigest()[:32]


class VectorSearchService:
    """
    Similarity search with a TTL cache in front.

    Cache failures never fail a search. Embedding, index and catalog
    failures propagate; there is no empty-result fallback.
    """

    def __init__(
        self,
        db: AsyncSession,
        vector_index: VectorIndex,
        embedding_task: EmbeddingTask,
        cache: SearchCache,
        cache_settings: CacheSettings,
    ) -> None:
        """
        Initialize search service.

        Args:
            db: AsyncSession for the catalog join
            vector_index: Booted vector index
            embedding_task: Query embedding path
            cache: Shared search cache
            cache_settings: TTL and key prefix
        """
        self.db = db
        self._vector_index = vector_index
        self._embedding_task = embedding_task
        self._embedding_service = EmbeddingService(db, vector_index)
        self._cache = cache
        self._cache_settings = cache_settings

    def build_cache_key(self, agent_id: UUID, query: str, limit: int, threshold: float) -> str:
        return (
            f"{self._cache_settings.key_prefix}:{agent_id}:"
            f"{hash_query(query)}:{limit}:{threshold}"
        )

    async def search(
        self,
        agent_id: UUID,
        query: str,
        limit: int = 5,
        threshold: float = 0.7,
    ) -> list[SearchResult]:
        """
        Search an agent's knowledge base.

        Args:
            agent_id: Agent whose embeddings are searched
            query: Free-text query
            limit: Maximum results, clamped to [1, 20]
            threshold: Minimum similarity in [0, 1]

        Returns:
            list[SearchResult]: Results in index order (descending similarity)

        Raises:
            ValidationError: Blank query or threshold out of range
            EmbeddingError: Query embedding failed
            VectorStoreError: Vector search failed
            RetrievalError: Catalog join failed
        """
        if not query or not query.strip():
            raise ValidationError("Query must not be empty", field="query")
        if not 0.0 <= threshold <= 1.0:
            raise ValidationError(
                "Threshold must be between 0 and 1",
                field="threshold",
                details={"threshold": threshold},
            )
        limit = max(MIN_LIMIT, min(MAX_LIMIT, limit))

        cache_key = self.build_cache_key(agent_id, query, limit, threshold)
        cached = await self._cache_get(cache_key)
        if cached is not None:
            logger.debug(
                f"{__name__}:search - Cache hit",
                extra={"agent_id": str(agent_id), "results": len(cached)},
            )
            return cached

        vector = await self._embedding_task.embed_query(query)
        hits = await self._vector_index.search(
            vector,
            limit=limit,
            score_threshold=threshold,
            filters={"agentId": str(agent_id)},
        )
        results = await self._join_catalog(agent_id, hits)

        await self._cache_set(cache_key, results)
        logger.info(
            f"{__name__}:search - Search completed",
            extra={
                "agent_id": str(agent_id),
                "query_preview": preview(query),
                "hits": len(hits),
                "results": len(results),
            },
        )
        return results

    async def _join_catalog(
        self,
        agent_id: UUID,
        hits: list[VectorSearchHit],
    ) -> list[SearchResult]:
        """Resolve hits against the catalog, dropping ids it does not know."""
        keyed: list[tuple[VectorSearchHit, UUID | None]] = [(hit, _parse_uuid(hit.id)) for hit in hits]

        try:
            rows = await self._embedding_service.find_by_ids(
                [hit_id for _, hit_id in keyed if hit_id is not None]
            )
        except SQLAlchemyError as e:
            raise RetrievalError(
                f"Catalog lookup failed: {e}",
                agent_id=str(agent_id),
            ) from e

        results: list[SearchResult] = []
        for hit, hit_id in keyed:
            row = rows.get(hit_id) if hit_id is not None else None
            if row is None or row.agent_id != agent_id:
                logger.warning(
                    f"{__name__}:_join_catalog - Dropping hit without catalog row",
                    extra={"point_id": hit.id, "agent_id": str(agent_id)},
                )
                continue
            results.append(
                SearchResult(
                    id=str(row.id),
                    agent_id=str(row.agent_id),
                    document_id=str(row.document_id),
                    chunk_index=row.chunk_index,
                    content=row.content,
                    similarity=max(0.0, min(1.0, hit.score)),
                    metadata=row.chunk_metadata or {},
                    token_count=row.token_count,
                    created_at=row.created_at,
                )
            )
        return results

    async def _cache_get(self, key: str) -> list[SearchResult] | None:
        try:
            raw = await self._cache.get(key)
        except CacheError as e:
            logger.warning(f"{__name__}:_cache_get - Cache read failed, searching live: {e}")
            return None
        if raw is None:
            return None
        try:
            return _RESULTS_ADAPTER.validate_json(raw)
        except PydanticValidationError:
            logger.warning(f"{__name__}:_cache_get - Discarding malformed cache entry")
            return None

    async def _cache_set(self, key: str, results: list[SearchResult]) -> None:
        payload = json.dumps([result.model_dump(mode="json") for result in results])
        try:
            await self._cache.set(key, payload, self._cache_settings.ttl_seconds)
        except CacheError as e:
            logger.warning(f"{__name__}:_cache_set - Cache write failed: {e}")

    async def invalidate_agent(self, agent_id: UUID) -> int:
        """
        Drop every cached search of an agent.

        Returns:
            int: Entries removed (0 if the cache is unavailable)
        """
        prefix = f"{self._cache_settings.key_prefix}:{agent_id}:"
        try:
            removed = await self._cache.delete_prefix(prefix)
        except CacheError as e:
            logger.warning(f"{__name__}:invalidate_agent - Cache invalidation failed: {e}")
            return 0
        logger.debug(
            f"{__name__}:invalidate_agent - Invalidated cache",
            extra={"agent_id": str(agent_id), "removed": removed},
        )
        return removed

    async def get_search_stats(self, agent_id: UUID) -> dict[str, int]:
        """Knowledge-base statistics for an agent."""
        return await self._embedding_service.get_stats(agent_id)


def _parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None
