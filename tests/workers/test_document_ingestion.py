"""
Test suite for the document ingestion task.

run_ingestion executes against a ServiceContainer of in-memory clients;
the Celery task itself is exercised with run_ingestion patched.

System role: Verification of background ingestion
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from agent_rag.application.services import JobService
from agent_rag.boundary.cache import InMemorySearchCache
from agent_rag.boundary.db.models import DocumentStatus, JobType
from agent_rag.configs import Settings
from agent_rag.core.document_processing.configs import DocumentPipelineSettings
from agent_rag.core.exceptions import DocumentProcessingError
from agent_rag.dependencies import ServiceContainer
from agent_rag.workers.tasks.document_ingestion import ingest_document, run_ingestion

DOCUMENT_TEXT = "# Onboarding\n" + "new hires receive a laptop on day one " * 10


@pytest.fixture
def container(session_factory, vector_index, fake_embeddings, chunking_task) -> ServiceContainer:
    """Provide container wired entirely to in-memory clients."""
    return ServiceContainer(
        settings=Settings(),
        pipeline_settings=DocumentPipelineSettings(),
        session_factory=session_factory,
        vector_index=vector_index,
        cache=InMemorySearchCache(),
        embeddings=fake_embeddings,
        chunking_task=chunking_task,
    )


@pytest.fixture
def create_job(test_async_db):
    """Provide helper creating a committed ingestion job."""

    async def _create(document_id) -> uuid.UUID:
        job_id = await JobService(test_async_db).create_job(
            JobType.DOCUMENT_INGESTION, task_id=str(uuid.uuid4()), document_id=document_id
        )
        await test_async_db.commit()
        return job_id

    return _create


class TestRunIngestion:
    """Test suite for run_ingestion()."""

    @pytest.mark.asyncio
    async def test_success_should_complete_job_and_document(
        self, container, session_factory, vector_index, make_document, create_job
    ) -> None:
        # Arrange
        document = await make_document(extracted_text=DOCUMENT_TEXT)
        job_id = await create_job(document.id)

        # Act
        payload = await run_ingestion(document.id, job_id, container=container)

        # Assert
        assert payload["document_id"] == str(document.id)
        assert payload["chunk_count"] == 1
        assert payload["embedding_count"] == 1
        async with session_factory() as db:
            status = await JobService(db).get_job_status(job_id)
            refreshed = await container.document_service(db).get_document_embeddings(document.id)
        assert status["status"] == "completed"
        assert status["progress"] == 100
        assert status["result"]["embedding_count"] == 1
        assert len(refreshed) == 1
        assert vector_index.booted is False

    @pytest.mark.asyncio
    async def test_failure_should_mark_job_failed_and_reraise(
        self, container, session_factory, test_async_db, make_document, create_job
    ) -> None:
        # Arrange
        document = await make_document(extracted_text=None)
        job_id = await create_job(document.id)

        # Act
        with pytest.raises(DocumentProcessingError):
            await run_ingestion(document.id, job_id, container=container)

        # Assert
        async with session_factory() as db:
            status = await JobService(db).get_job_status(job_id)
        assert status["status"] == "failed"
        assert status["result"]["error_type"] == "DocumentProcessingError"
        await test_async_db.refresh(document)
        assert document.status == DocumentStatus.FAILED


class TestIngestDocumentTask:
    """Test suite for the Celery task wrapper."""

    def test_task_should_run_ingestion_with_uuids(self) -> None:
        # Arrange
        document_id = uuid.uuid4()
        job_id = uuid.uuid4()
        expected = {"document_id": str(document_id), "chunk_count": 2}

        # Act
        with patch(
            "agent_rag.workers.tasks.document_ingestion.run_ingestion",
            new=AsyncMock(return_value=expected),
        ) as mock_run:
            result = ingest_document.apply(args=[str(document_id), str(job_id)]).get()

        # Assert
        assert result == expected
        mock_run.assert_awaited_once_with(document_id, job_id)

    def test_task_should_clear_correlation_id(self) -> None:
        with patch(
            "agent_rag.workers.tasks.document_ingestion.run_ingestion",
            new=AsyncMock(return_value={}),
        ), patch(
            "agent_rag.workers.tasks.document_ingestion.clear_correlation_id",
            new=MagicMock(),
        ) as mock_clear:
            ingest_document.apply(args=[str(uuid.uuid4()), str(uuid.uuid4())]).get()

        mock_clear.assert_called_once()
