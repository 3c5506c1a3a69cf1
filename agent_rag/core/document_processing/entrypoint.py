"""
Document pipeline orchestrator.

Coordinates chunking, batched embedding, and per-batch persistence for a
single document. One run per document; a document that already has
catalog rows is skipped.

Dependencies: All task modules, agent_rag.boundary.db
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from agent_rag.boundary.db.CRUD.document_crud import document_crud
from agent_rag.core.exceptions import DocumentNotFoundError, DocumentProcessingError

from .models import PipelineResult
from .tasks import ChunkingTask, EmbeddingTask, PersistenceTask

if TYPE_CHECKING:
    from agent_rag.application.services.embedding_service import EmbeddingService

logger = logging.getLogger(__name__)


class DocumentPipeline:
    """Orchestrate document ingestion: chunk -> embed (batched) -> dual write."""

    def __init__(
        self,
        db: AsyncSession,
        embedding_service: "EmbeddingService",
        chunking_task: ChunkingTask,
        embedding_task: EmbeddingTask,
    ) -> None:
        """
        Initialize pipeline with its tasks.

        Args:
            db: AsyncSession; the pipeline commits after every batch
            embedding_service: Dual-write persistence
            chunking_task: Token-window chunker
            embedding_task: Batched embedding generator
        """
        self.db = db
        self._embedding_service = embedding_service
        self._chunking_task = chunking_task
        self._embedding_task = embedding_task
        self._persistence_task = PersistenceTask(embedding_service, embedding_task.model)

    async def process(self, document_id: UUID) -> PipelineResult:
        """
        Process a document through the full pipeline.

        Each batch is committed on its own, so a failure in a later batch
        leaves earlier batches persisted. Cleanup of such partial state is
        the caller's decision.

        Args:
            document_id: Document UUID

        Returns:
            PipelineResult: Counts and timing; skipped=True if already embedded

        Raises:
            DocumentNotFoundError: Unknown document
            DocumentProcessingError: Document has no extracted text
            EmbeddingError: Provider failure
            VectorStoreError: Index write failure
            CatalogError: Catalog write failure
        """
        start_time = time.perf_counter()

        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))

        existing = await self._embedding_service.count_by_document(document_id)
        if existing > 0:
            logger.info(
                f"{__name__}:process - Document already embedded, skipping",
                extra={"document_id": str(document_id), "existing": existing},
            )
            return PipelineResult(
                document_id=str(document_id),
                chunk_count=document.chunk_count or existing,
                embedding_count=existing,
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
                skipped=True,
            )

        if document.extracted_text is None:
            raise DocumentProcessingError(
                "Document has no extracted text",
                document_id=str(document_id),
            )

        chunks = self._chunking_task.chunk(document.extracted_text, document.doc_metadata)
        logger.info(
            f"{__name__}:process - Chunked document",
            extra={"document_id": str(document_id), "chunks": len(chunks)},
        )

        embedding_count = 0
        async for batch in self._embedding_task.embed_chunks(chunks):
            embedding_count += await self._persistence_task.persist(
                document.agent_id, document.id, batch
            )
            await self.db.commit()

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:process - Document processed",
            extra={
                "document_id": str(document_id),
                "chunks": len(chunks),
                "embeddings": embedding_count,
                "elapsed_ms": round(elapsed_ms, 1),
            },
        )
        return PipelineResult(
            document_id=str(document_id),
            chunk_count=len(chunks),
            embedding_count=embedding_count,
            processing_time_ms=elapsed_ms,
        )
