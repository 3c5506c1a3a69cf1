"""
Job ORM model.

Tracks background task execution for document ingestion so that failures
have a queryable channel instead of a log line.

Dependencies: sqlalchemy, agent_rag.boundary.db.base
System role: Async job tracking for background tasks
"""

import enum
import uuid

from sqlalchemy import Enum, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agent_rag.boundary.db.base import Base, JSONType, UUIDMixin, TimestampMixin


class JobType(str, enum.Enum):
    """Background job types."""

    DOCUMENT_INGESTION = "document_ingestion"


class JobStatus(str, enum.Enum):
    """
    Task execution states.

    PENDING: Enqueued, awaiting worker pickup
    RUNNING: Worker processing the task
    COMPLETED: Succeeded; result holds the pipeline summary
    FAILED: Failed; result holds error details
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class JobModel(Base, UUIDMixin, TimestampMixin):
    """
    Job ORM model linking queued tasks to their outcome.

    Attributes:
        task_id: Celery task id (unique)
        type: Job classification
        document_id: Document the job operates on
        status: Current execution state
        progress: Percentage complete (0-100)
        result: Pipeline summary on success, error details on failure
    """

    __tablename__ = "jobs"

    task_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    type: Mapped[JobType] = mapped_column(
        Enum(JobType, native_enum=False),
        nullable=False,
    )

    document_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )

    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, native_enum=False),
        nullable=False,
        default=JobStatus.PENDING,
    )

    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    result: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
