"""
Document service orchestrator.

Coordinates ingestion dispatch, processing with status tracking, and
cascade deletion of a document's embeddings.

Dependencies: agent_rag.boundary.db, agent_rag.core, agent_rag.workers
System role: Document management orchestration
"""

import logging
import uuid
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from agent_rag.application.services.embedding_service import EmbeddingService
from agent_rag.application.services.job_service import JobService
from agent_rag.application.services.vector_search_service import VectorSearchService
from agent_rag.boundary.db.CRUD.document_crud import document_crud
from agent_rag.boundary.db.models.document_model import DocumentStatus
from agent_rag.boundary.db.models.embedding_model import EmbeddingModel
from agent_rag.boundary.db.models.job_model import JobType
from agent_rag.core.document_processing.entrypoint import DocumentPipeline
from agent_rag.core.document_processing.models import PipelineResult
from agent_rag.core.exceptions import DocumentNotFoundError
from agent_rag.observability.log_utils import log_exception_with_context
from agent_rag.workers import INGEST_DOCUMENT_TASK, celery_app

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Document service orchestrator.

    Handles the document side of the RAG lifecycle: enqueue, process,
    delete. Search cache entries of the owning agent are invalidated
    whenever its embeddings change.
    """

    def __init__(
        self,
        db: AsyncSession,
        pipeline: DocumentPipeline,
        embedding_service: EmbeddingService,
        search_service: VectorSearchService,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document and job tracking
            pipeline: Ingestion pipeline bound to the same session
            embedding_service: Dual-write persistence
            search_service: Used for cache invalidation
        """
        self.db = db
        self._pipeline = pipeline
        self._embedding_service = embedding_service
        self._search_service = search_service
        self._job_service = JobService(db)

    async def _get_document_or_raise(self, document_id: UUID):
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        return document

    async def enqueue_processing(self, document_id: UUID) -> UUID:
        """
        Queue a document for background ingestion.

        The job row is committed before dispatch so the worker can find it.

        Args:
            document_id: Document UUID

        Returns:
            UUID: Job id for status polling

        Raises:
            DocumentNotFoundError: Unknown document
        """
        await self._get_document_or_raise(document_id)

        task_id = str(uuid.uuid4())
        job_id = await self._job_service.create_job(
            JobType.DOCUMENT_INGESTION,
            task_id=task_id,
            document_id=document_id,
        )
        await self.db.commit()

        celery_app.send_task(
            INGEST_DOCUMENT_TASK,
            args=[str(document_id), str(job_id)],
            task_id=task_id,
        )
        logger.info(
            f"{__name__}:enqueue_processing - Ingestion queued",
            extra={"document_id": str(document_id), "job_id": str(job_id), "task_id": task_id},
        )
        return job_id

    async def process_document(self, document_id: UUID) -> PipelineResult:
        """
        Run ingestion for a document and record the outcome.

        Steps:
        1. Mark PROCESSING
        2. Run the pipeline (per-batch commits)
        3. Mark COMPLETED with counts and invalidate the agent's search cache
        On failure: purge whatever the run persisted from both stores so a
        retry starts from scratch, mark FAILED, re-raise.

        Args:
            document_id: Document UUID

        Returns:
            PipelineResult: Pipeline outcome

        Raises:
            DocumentNotFoundError: Unknown document
            AgentRagException: Any pipeline failure, after cleanup
        """
        document = await self._get_document_or_raise(document_id)
        agent_id = document.agent_id

        await document_crud.mark_processing(self.db, document_id)
        await self.db.commit()

        try:
            result = await self._pipeline.process(document_id)
        except Exception as e:
            await self.db.rollback()
            log_exception_with_context(
                logger,
                f"{__name__}:process_document - Ingestion failed",
                e,
                document_id=str(document_id),
            )
            await self._purge_partial(document_id)
            await document_crud.mark_failed(self.db, document_id, str(e))
            await self.db.commit()
            raise

        if result.skipped:
            await document_crud.update_status(self.db, document_id, DocumentStatus.COMPLETED)
            await self.db.commit()
            return result

        await document_crud.mark_completed(
            self.db,
            document_id,
            chunk_count=result.chunk_count,
            embedding_count=result.embedding_count,
        )
        await self.db.commit()
        await self._search_service.invalidate_agent(agent_id)
        return result

    async def _purge_partial(self, document_id: UUID) -> None:
        """Remove embeddings a failed run left behind. Failures are logged."""
        try:
            deleted = await self._embedding_service.delete_by_document(document_id)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            log_exception_with_context(
                logger,
                f"{__name__}:_purge_partial - Cleanup failed, document may be partially embedded",
                e,
                document_id=str(document_id),
            )
            return
        if deleted:
            logger.info(
                f"{__name__}:_purge_partial - Removed partial embeddings",
                extra={"document_id": str(document_id), "deleted": deleted},
            )

    async def delete_document(self, document_id: UUID) -> int:
        """
        Delete a document's embeddings from index and catalog.

        The document row itself belongs to the caller's lifecycle.

        Returns:
            int: Catalog rows deleted

        Raises:
            DocumentNotFoundError: Unknown document
            VectorStoreError, CatalogError: Either store failed
        """
        document = await self._get_document_or_raise(document_id)
        deleted = await self._embedding_service.delete_by_document(document_id)
        await document_crud.update_by_id(self.db, document_id, embedding_count=0)
        await self.db.commit()
        await self._search_service.invalidate_agent(document.agent_id)
        return deleted

    async def delete_agent_embeddings(self, agent_id: UUID) -> int:
        """
        Delete every embedding of an agent from index and catalog.

        Returns:
            int: Catalog rows deleted
        """
        deleted = await self._embedding_service.delete_by_agent(agent_id)
        await self.db.commit()
        await self._search_service.invalidate_agent(agent_id)
        return deleted

    async def get_document_embeddings(self, document_id: UUID) -> Sequence[EmbeddingModel]:
        """Catalog rows of a document ordered by chunk_index."""
        return await self._embedding_service.find_by_document(document_id)
