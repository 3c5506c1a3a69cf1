"""
Job service orchestrator.

Tracks background ingestion jobs so callers can poll for completion.

Dependencies: agent_rag.boundary.db.CRUD, agent_rag.boundary.db.models
System role: Job management orchestration
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from agent_rag.boundary.db.CRUD.job_crud import job_crud
from agent_rag.boundary.db.models.job_model import JobStatus, JobType


class JobService:
    """
    Job service orchestrator.

    Manages job lifecycle for background tasks with status tracking.
    """

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize job service.

        Args:
            db: AsyncSession for database operations
        """
        self.db = db

    async def create_job(
        self,
        job_type: JobType,
        task_id: str,
        document_id: UUID | None = None,
    ) -> UUID:
        """
        Create new job record for background task tracking.

        Args:
            job_type: Type of job
            task_id: Celery task id the job is dispatched under
            document_id: Document the job works on

        Returns:
            UUID: Created job ID
        """
        job = await job_crud.create(
            self.db,
            task_id=task_id,
            type=job_type,
            document_id=document_id,
            status=JobStatus.PENDING,
            progress=0,
            result={},
        )
        return job.id

    async def mark_job_running(self, job_id: UUID) -> None:
        await job_crud.mark_running(self.db, job_id)

    async def update_progress(self, job_id: UUID, progress: int) -> None:
        """Record progress (0-100) on a running job."""
        await job_crud.update_status(self.db, job_id, JobStatus.RUNNING, progress=progress)

    async def mark_job_completed(self, job_id: UUID, result_data: dict) -> None:
        await job_crud.mark_completed(self.db, job_id, result_data)

    async def mark_job_failed(self, job_id: UUID, error_details: dict) -> None:
        await job_crud.mark_failed(self.db, job_id, error_details)

    async def get_job_status(self, job_id: UUID) -> dict:
        """
        Get job status details for polling.

        Args:
            job_id: Job UUID

        Returns:
            dict: Job status information

        Raises:
            ValueError: If job doesn't exist
        """
        job = await job_crud.get_by_id(self.db, job_id)
        if not job:
            raise ValueError(f"Job {job_id} does not exist")

        return {
            "id": str(job.id),
            "task_id": job.task_id,
            "type": job.type.value,
            "document_id": str(job.document_id) if job.document_id else None,
            "status": job.status.value,
            "progress": job.progress,
            "result": job.result,
            "created_at": job.created_at.isoformat(),
            "updated_at": job.updated_at.isoformat(),
        }
