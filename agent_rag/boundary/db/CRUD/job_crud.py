"""
Job CRUD operations.

Status and progress updates for background ingestion jobs.

Dependencies: sqlalchemy, agent_rag.boundary.db.models.job_model
System role: Job persistence operations for async task tracking
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from agent_rag.boundary.db.CRUD.base_crud import BaseCRUD
from agent_rag.boundary.db.models.job_model import JobModel, JobStatus


class JobCRUD(BaseCRUD[JobModel]):
    """CRUD operations for JobModel."""

    def __init__(self) -> None:
        """Initialize JobCRUD with JobModel."""
        super().__init__(JobModel)

    async def update_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: JobStatus,
        progress: int | None = None,
        result_data: dict | None = None,
    ) -> JobModel | None:
        """
        Update job status with optional progress and result.

        Args:
            session: Async database session
            id: Job UUID
            status: New status
            progress: Progress percentage (0-100)
            result_data: Result payload or error details

        Returns:
            Updated JobModel if found, None otherwise
        """
        update_fields: dict = {"status": status}
        if progress is not None:
            update_fields["progress"] = max(0, min(100, progress))
        if result_data is not None:
            update_fields["result"] = result_data
        return await self.update_by_id(session, id, **update_fields)

    async def mark_running(self, session: AsyncSession, id: UUID) -> JobModel | None:
        """Mark job as running."""
        return await self.update_status(session, id, JobStatus.RUNNING, progress=0)

    async def mark_completed(
        self,
        session: AsyncSession,
        id: UUID,
        result_data: dict,
    ) -> JobModel | None:
        """Mark job as completed with its result payload."""
        return await self.update_status(
            session, id, JobStatus.COMPLETED, progress=100, result_data=result_data
        )

    async def mark_failed(
        self,
        session: AsyncSession,
        id: UUID,
        error_details: dict,
    ) -> JobModel | None:
        """Mark job as failed with error details."""
        return await self.update_status(
            session, id, JobStatus.FAILED, result_data=error_details
        )


job_crud = JobCRUD()
