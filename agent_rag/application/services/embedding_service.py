"""
Embedding service: dual write over the relational catalog and vector index.

Every embedding lives in both stores under one client-generated UUID.
Writes go catalog first, then index (a catalog row without a point is a
tolerated partial state, the reverse is not). Deletes go index first,
then catalog. Neither direction compensates if the second step fails;
check_document_consistency reports such drift.

Dependencies: sqlalchemy, agent_rag.boundary.db, agent_rag.boundary.vdb
System role: Embedding persistence orchestration
"""

import logging
import uuid
from typing import Sequence
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from agent_rag.boundary.db.CRUD.embedding_crud import embedding_crud
from agent_rag.boundary.db.models.embedding_model import EmbeddingModel
from agent_rag.boundary.vdb.vector_index import VectorIndex
from agent_rag.boundary.vdb.vector_schemas import VectorPayload, VectorPoint
from agent_rag.core.document_processing.models import EmbeddingCreate
from agent_rag.core.exceptions import CatalogError

logger = logging.getLogger(__name__)


class ConsistencyReport(BaseModel):
    """Catalog vs index row counts for one document."""

    document_id: str
    catalog_count: int
    index_count: int

    @property
    def consistent(self) -> bool:
        return self.catalog_count == self.index_count


class EmbeddingService:
    """
    Embedding catalog + vector index orchestrator.

    Flushes but does not commit; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession, vector_index: VectorIndex) -> None:
        """
        Initialize embedding service.

        Args:
            db: AsyncSession for catalog operations
            vector_index: Booted vector index bound to the embeddings collection
        """
        self.db = db
        self._vector_index = vector_index

    @staticmethod
    def _to_point(embedding_id: UUID, item: EmbeddingCreate) -> VectorPoint:
        return VectorPoint(
            id=str(embedding_id),
            vector=item.vector,
            payload=VectorPayload(
                agent_id=str(item.agent_id),
                document_id=str(item.document_id),
                chunk_index=item.chunk_index,
                content=item.content,
                token_count=item.token_count,
            ),
        )

    async def create(self, item: EmbeddingCreate) -> EmbeddingModel:
        """
        Create one embedding in both stores.

        Args:
            item: Row fields and optional vector

        Returns:
            EmbeddingModel: Catalog row; its id is also the point id

        Raises:
            CatalogError: Catalog insert failed (nothing written to the index)
            VectorStoreError: Index upsert failed (catalog row is flushed)
        """
        rows = await self.create_bulk([item])
        return rows[0]

    async def create_bulk(self, items: Sequence[EmbeddingCreate]) -> list[EmbeddingModel]:
        """
        Create many embeddings with one catalog flush and one index upsert.

        Items without a vector get a catalog row only.

        Args:
            items: Rows to create

        Returns:
            list[EmbeddingModel]: Catalog rows in input order

        Raises:
            CatalogError: Catalog insert failed
            VectorStoreError: Index upsert failed
        """
        if not items:
            return []

        ids = [uuid.uuid4() for _ in items]
        try:
            rows = await embedding_crud.create_many(
                self.db,
                [{"id": embedding_id, **item.catalog_fields()} for embedding_id, item in zip(ids, items)],
            )
        except SQLAlchemyError as e:
            raise CatalogError(
                f"Catalog insert failed: {e}",
                operation="create_bulk",
                details={"items": len(items)},
            ) from e

        points = [
            self._to_point(embedding_id, item)
            for embedding_id, item in zip(ids, items)
            if item.vector is not None
        ]
        await self._vector_index.upsert(points, wait=True)

        logger.debug(
            f"{__name__}:create_bulk - Created embeddings",
            extra={"rows": len(rows), "points": len(points)},
        )
        return rows

    async def delete_by_document(self, document_id: UUID) -> int:
        """
        Delete a document's embeddings from index, then catalog.

        Returns:
            int: Catalog rows deleted

        Raises:
            VectorStoreError: Index delete failed (catalog untouched)
            CatalogError: Catalog delete failed (index already cleared)
        """
        await self._vector_index.delete({"documentId": str(document_id)})
        try:
            deleted = await embedding_crud.delete_by_document(self.db, document_id)
        except SQLAlchemyError as e:
            raise CatalogError(
                f"Catalog delete failed: {e}",
                operation="delete_by_document",
                details={"document_id": str(document_id)},
            ) from e

        logger.info(
            f"{__name__}:delete_by_document - Deleted embeddings",
            extra={"document_id": str(document_id), "deleted": deleted},
        )
        return deleted

    async def delete_by_agent(self, agent_id: UUID) -> int:
        """
        Delete all of an agent's embeddings from index, then catalog.

        Returns:
            int: Catalog rows deleted
        """
        await self._vector_index.delete({"agentId": str(agent_id)})
        try:
            deleted = await embedding_crud.delete_by_agent(self.db, agent_id)
        except SQLAlchemyError as e:
            raise CatalogError(
                f"Catalog delete failed: {e}",
                operation="delete_by_agent",
                details={"agent_id": str(agent_id)},
            ) from e

        logger.info(
            f"{__name__}:delete_by_agent - Deleted embeddings",
            extra={"agent_id": str(agent_id), "deleted": deleted},
        )
        return deleted

    async def count_by_document(self, document_id: UUID) -> int:
        return await embedding_crud.count_by_document(self.db, document_id)

    async def count_by_agent(self, agent_id: UUID) -> int:
        return await embedding_crud.count_by_agent(self.db, agent_id)

    async def index_count_by_document(self, document_id: UUID) -> int:
        return await self._vector_index.count({"documentId": str(document_id)})

    async def index_count_by_agent(self, agent_id: UUID) -> int:
        return await self._vector_index.count({"agentId": str(agent_id)})

    async def find_by_document(self, document_id: UUID) -> Sequence[EmbeddingModel]:
        """Catalog rows of a document ordered by chunk_index."""
        return await embedding_crud.get_by_document(self.db, document_id)

    async def find_by_id(self, embedding_id: UUID) -> EmbeddingModel | None:
        return await embedding_crud.get_by_id(self.db, embedding_id)

    async def find_by_ids(self, embedding_ids: Sequence[UUID]) -> dict[UUID, EmbeddingModel]:
        """Catalog rows keyed by id; missing ids are absent."""
        rows = await embedding_crud.get_by_ids(self.db, embedding_ids)
        return {row.id: row for row in rows}

    async def get_stats(self, agent_id: UUID) -> dict[str, int]:
        """
        Knowledge-base statistics for an agent.

        Returns:
            dict: total_embeddings, total_documents, average_chunks_per_doc,
                total_tokens
        """
        return await embedding_crud.get_stats(self.db, agent_id)

    async def check_document_consistency(self, document_id: UUID) -> ConsistencyReport:
        """
        Compare catalog and index counts for a document.

        Used by reconciliation after a failed dual write.
        """
        report = ConsistencyReport(
            document_id=str(document_id),
            catalog_count=await self.count_by_document(document_id),
            index_count=await self.index_count_by_document(document_id),
        )
        if not report.consistent:
            logger.warning(
                f"{__name__}:check_document_consistency - Catalog and index disagree",
                extra=report.model_dump(),
            )
        return report
