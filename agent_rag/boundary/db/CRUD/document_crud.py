"""
Document CRUD operations.

Status transitions and counters for the ingestion lifecycle.

Dependencies: sqlalchemy, agent_rag.boundary.db.models.document_model
System role: Document persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agent_rag.boundary.db.CRUD.base_crud import BaseCRUD
from agent_rag.boundary.db.models.document_model import DocumentModel, DocumentStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with agent filtering and status updates.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_by_agent_id(
        self,
        session: AsyncSession,
        agent_id: UUID,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve all documents of an agent.

        Args:
            session: Async database session
            agent_id: Owning agent UUID

        Returns:
            Sequence of DocumentModels belonging to the agent
        """
        stmt = select(DocumentModel).where(DocumentModel.agent_id == agent_id)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: DocumentStatus,
        error_message: str | None = None,
    ) -> DocumentModel | None:
        """
        Update document processing status.

        Args:
            session: Async database session
            id: Document UUID
            status: New processing status
            error_message: Error details if status is FAILED

        Returns:
            Updated DocumentModel if found, None otherwise
        """
        update_fields = {"status": status}
        if error_message is not None:
            update_fields["error_message"] = error_message[:2048]
        return await self.update_by_id(session, id, **update_fields)

    async def mark_processing(self, session: AsyncSession, id: UUID) -> DocumentModel | None:
        """Mark document as picked up by the ingestion worker."""
        return await self.update_by_id(
            session, id, status=DocumentStatus.PROCESSING, error_message=None
        )

    async def mark_completed(
        self,
        session: AsyncSession,
        id: UUID,
        chunk_count: int,
        embedding_count: int,
    ) -> DocumentModel | None:
        """
        Mark document as successfully processed.

        Args:
            session: Async database session
            id: Document UUID
            chunk_count: Chunks produced by the chunker
            embedding_count: Catalog rows written

        Returns:
            Updated DocumentModel if found, None otherwise
        """
        return await self.update_by_id(
            session,
            id,
            status=DocumentStatus.COMPLETED,
            chunk_count=chunk_count,
            embedding_count=embedding_count,
        )

    async def mark_failed(
        self,
        session: AsyncSession,
        id: UUID,
        error_message: str,
    ) -> DocumentModel | None:
        """
        Mark document as failed with error details.

        Args:
            session: Async database session
            id: Document UUID
            error_message: Human-readable error description

        Returns:
            Updated DocumentModel if found, None otherwise
        """
        return await self.update_status(session, id, DocumentStatus.FAILED, error_message)


document_crud = DocumentCRUD()
