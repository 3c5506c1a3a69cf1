"""
Persistence task: writes one embedding batch through the dual write.

Dependencies: agent_rag.application.services.embedding_service (injected)
System role: Third stage of document ingestion pipeline
"""

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from ..models import EmbeddingBatch, EmbeddingCreate

if TYPE_CHECKING:
    from agent_rag.application.services.embedding_service import EmbeddingService

logger = logging.getLogger(__name__)


class PersistenceTask:
    """Convert embedded chunks into catalog rows plus index points."""

    def __init__(self, embedding_service: "EmbeddingService", model: str) -> None:
        self._embedding_service = embedding_service
        self._model = model

    def to_create_items(
        self,
        agent_id: UUID,
        document_id: UUID,
        batch: EmbeddingBatch,
    ) -> list[EmbeddingCreate]:
        return [
            EmbeddingCreate(
                agent_id=agent_id,
                document_id=document_id,
                chunk_index=item.chunk_index,
                content=item.chunk.content,
                token_count=item.chunk.token_count,
                start_position=item.chunk.start_position,
                end_position=item.chunk.end_position,
                model=self._model,
                metadata=item.chunk.metadata.model_dump(exclude_none=True),
                vector=item.vector,
            )
            for item in batch.items
        ]

    async def persist(
        self,
        agent_id: UUID,
        document_id: UUID,
        batch: EmbeddingBatch,
    ) -> int:
        """
        Write a batch to catalog and index.

        Returns:
            int: Rows written
        """
        rows = await self._embedding_service.create_bulk(
            self.to_create_items(agent_id, document_id, batch)
        )
        logger.info(
            f"{__name__}:persist - Stored batch {batch.batch_number}",
            extra={
                "document_id": str(document_id),
                "rows": len(rows),
                "dropped": batch.dropped,
            },
        )
        return len(rows)
