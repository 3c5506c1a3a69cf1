"""
Document ingestion Celery task.

Task: ingest_document(document_id, job_id)
Flow: mark job running -> chunk -> embed -> dual write -> update document
and job status

Dependencies: celery, agent_rag.dependencies, agent_rag.workers
System role: Background document processing task
"""

import asyncio
import logging
from uuid import UUID

from agent_rag.dependencies import ServiceContainer
from agent_rag.observability.correlation import clear_correlation_id, set_correlation_id
from agent_rag.workers import INGEST_DOCUMENT_TASK, celery_app

logger = logging.getLogger(__name__)


async def run_ingestion(
    document_id: UUID,
    job_id: UUID,
    container: ServiceContainer | None = None,
) -> dict:
    """
    Process one document and record the outcome on its job.

    A fresh container per run: asyncio.run gives every task its own event
    loop and pooled connections cannot cross loops.

    Args:
        document_id: Document to ingest
        job_id: Job row created at enqueue time
        container: Optional pre-built container (tests)

    Returns:
        dict: Serialized PipelineResult

    Raises:
        AgentRagException: Pipeline failure, after the job is marked FAILED
    """
    container = container or ServiceContainer()
    await container.startup()
    try:
        async with container.session_factory() as db:
            job_service = container.job_service(db)
            await job_service.mark_job_running(job_id)
            await db.commit()

            try:
                result = await container.document_service(db).process_document(document_id)
            except Exception as e:
                await db.rollback()
                await job_service.mark_job_failed(
                    job_id,
                    {"error_type": type(e).__name__, "error_msg": str(e)},
                )
                await db.commit()
                raise

            payload = result.model_dump()
            await job_service.mark_job_completed(job_id, payload)
            await db.commit()
            return payload
    finally:
        await container.shutdown()


@celery_app.task(bind=True, name=INGEST_DOCUMENT_TASK)
def ingest_document(self, document_id: str, job_id: str) -> dict:
    """
    Ingest document asynchronously.

    Not auto-retried: a failed run purges its partial output and marks the
    document FAILED, so a retry is an explicit re-enqueue.

    Args:
        document_id: Document UUID as string
        job_id: Job UUID as string

    Returns:
        dict: Ingestion result with chunk and embedding counts
    """
    set_correlation_id(self.request.id)
    logger.info(
        f"{__name__}:ingest_document - Starting ingestion",
        extra={"document_id": document_id, "job_id": job_id},
    )
    try:
        return asyncio.run(run_ingestion(UUID(document_id), UUID(job_id)))
    finally:
        clear_correlation_id()
