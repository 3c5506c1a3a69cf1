"""
Embedding ORM model.

One row per chunk. The row id is also the point id in the vector index,
so the two stores correlate without a mapping table. Vectors are not
stored relationally.

Dependencies: sqlalchemy, agent_rag.boundary.db.base
System role: Authoritative catalog of chunk content and metadata
"""

import uuid

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agent_rag.boundary.db.base import Base, JSONType, UUIDMixin, TimestampMixin


class EmbeddingModel(Base, UUIDMixin, TimestampMixin):
    """
    Embedding catalog row.

    Attributes:
        agent_id: Owning agent (cascade delete)
        document_id: Source document (cascade delete)
        chunk_index: Position of the chunk in the document's chunk list
        content: Sanitized, trimmed chunk text (never empty)
        token_count: Tokens in the chunk window
        start_position: First token offset (inclusive)
        end_position: Last token offset (exclusive)
        model: Embedding model that produced the vector
        chunk_metadata: heading, keywords, page_number, section, language

    Constraints:
        (document_id, chunk_index) unique
    """

    __tablename__ = "embeddings"
    __table_args__ = (
        UniqueConstraint("document_id", "chunk_index", name="uq_embeddings_document_chunk"),
        Index("ix_embeddings_agent_document", "agent_id", "document_id"),
        Index("ix_embeddings_agent_chunk", "agent_id", "chunk_index"),
    )

    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("agents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    token_count: Mapped[int] = mapped_column(Integer, nullable=False)
    start_position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    end_position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    model: Mapped[str] = mapped_column(String(255), nullable=False)
    chunk_metadata: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
