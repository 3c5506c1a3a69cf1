"""
Document ORM model.

Holds extracted text and ingestion status for documents attached to an
agent. Text extraction happens upstream; this table is the pipeline input.

Dependencies: sqlalchemy, agent_rag.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum
import uuid

from sqlalchemy import Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agent_rag.boundary.db.base import Base, JSONType, UUIDMixin, TimestampMixin


class DocumentStatus(str, enum.Enum):
    """
    Document processing lifecycle states.

    PENDING: Uploaded, awaiting ingestion task
    PROCESSING: Worker is chunking and embedding
    COMPLETED: Chunks stored in catalog and vector index
    FAILED: Ingestion error; error_message holds details
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion pipeline state.

    Lifecycle: PENDING -> PROCESSING -> COMPLETED or FAILED.

    Attributes:
        agent_id: Owning agent (cascade delete)
        name: Original filename
        extracted_text: Plain text produced by the extraction step
        status: Current processing state
        chunk_count: Chunks produced by the last successful run
        embedding_count: Catalog rows written by the last successful run
        error_message: Human-readable error if FAILED
        doc_metadata: Document-level hints (page_number, section, language)
    """

    __tablename__ = "documents"

    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("agents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    extracted_text: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False),
        nullable=False,
        default=DocumentStatus.PENDING,
    )

    chunk_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    embedding_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    error_message: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    doc_metadata: Mapped[dict | None] = mapped_column(JSONType, nullable=True)

    agent = relationship("AgentModel", back_populates="documents")
