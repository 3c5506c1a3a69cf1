"""
Embedding catalog CRUD operations.

Relational side of the embedding dual write: chunk content, counts and
metadata keyed by the same UUID as the vector index point.

Dependencies: sqlalchemy, agent_rag.boundary.db.models.embedding_model
System role: Embedding catalog persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agent_rag.boundary.db.CRUD.base_crud import BaseCRUD
from agent_rag.boundary.db.models.embedding_model import EmbeddingModel


class EmbeddingCRUD(BaseCRUD[EmbeddingModel]):
    """
    CRUD operations for EmbeddingModel.

    Extends BaseCRUD with bulk insert, per-document and per-agent
    queries, and aggregate statistics.
    """

    def __init__(self) -> None:
        """Initialize EmbeddingCRUD with EmbeddingModel."""
        super().__init__(EmbeddingModel)

    async def create_many(
        self,
        session: AsyncSession,
        rows: Sequence[dict[str, Any]],
    ) -> list[EmbeddingModel]:
        """
        Insert several catalog rows in one flush.

        Args:
            session: Async database session
            rows: Field dicts; each must carry its client-generated id

        Returns:
            list[EmbeddingModel]: Inserted rows in input order
        """
        instances = [EmbeddingModel(**row) for row in rows]
        session.add_all(instances)
        await session.flush()
        return instances

    async def get_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[EmbeddingModel]:
        """
        Retrieve all rows of a document ordered by chunk_index.

        Args:
            session: Async database session
            document_id: Source document UUID

        Returns:
            Sequence of EmbeddingModels
        """
        stmt = (
            select(EmbeddingModel)
            .where(EmbeddingModel.document_id == document_id)
            .order_by(EmbeddingModel.chunk_index.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_agent(
        self,
        session: AsyncSession,
        agent_id: UUID,
        limit: int = 100,
    ) -> Sequence[EmbeddingModel]:
        """
        Retrieve the most recent rows of an agent.

        Args:
            session: Async database session
            agent_id: Owning agent UUID
            limit: Maximum number of rows

        Returns:
            Sequence of EmbeddingModels, newest first
        """
        stmt = (
            select(EmbeddingModel)
            .where(EmbeddingModel.agent_id == agent_id)
            .order_by(EmbeddingModel.created_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        """Count catalog rows of a document."""
        stmt = select(func.count(EmbeddingModel.id)).where(
            EmbeddingModel.document_id == document_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def count_by_agent(self, session: AsyncSession, agent_id: UUID) -> int:
        """Count catalog rows of an agent."""
        stmt = select(func.count(EmbeddingModel.id)).where(
            EmbeddingModel.agent_id == agent_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def delete_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        """
        Delete all rows of a document.

        Returns:
            int: Number of deleted rows
        """
        stmt = delete(EmbeddingModel).where(EmbeddingModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount

    async def delete_by_agent(self, session: AsyncSession, agent_id: UUID) -> int:
        """
        Delete all rows of an agent.

        Returns:
            int: Number of deleted rows
        """
        stmt = delete(EmbeddingModel).where(EmbeddingModel.agent_id == agent_id)
        result = await session.execute(stmt)
        return result.rowcount

    async def get_stats(self, session: AsyncSession, agent_id: UUID) -> dict[str, int]:
        """
        Aggregate statistics for an agent's knowledge base.

        Args:
            session: Async database session
            agent_id: Owning agent UUID

        Returns:
            dict: total_embeddings, total_documents, average_chunks_per_doc,
                total_tokens
        """
        stmt = select(
            func.count(func.distinct(EmbeddingModel.document_id)),
            func.count(EmbeddingModel.id),
            func.coalesce(func.sum(EmbeddingModel.token_count), 0),
        ).where(EmbeddingModel.agent_id == agent_id)
        result = await session.execute(stmt)
        total_documents, total_embeddings, total_tokens = result.one()

        average = round(total_embeddings / total_documents) if total_documents else 0
        return {
            "total_embeddings": int(total_embeddings),
            "total_documents": int(total_documents),
            "average_chunks_per_doc": int(average),
            "total_tokens": int(total_tokens),
        }


embedding_crud = EmbeddingCRUD()
