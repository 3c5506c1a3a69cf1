"""
Input model for the embedding dual write.

Dependencies: pydantic
System role: Contract between the ingestion pipeline and EmbeddingService
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class EmbeddingCreate(BaseModel):
    """Fields for one catalog row plus its optional vector."""

    agent_id: UUID
    document_id: UUID
    chunk_index: int = Field(ge=0)
    content: str = Field(min_length=1)
    token_count: int = Field(ge=0)
    start_position: int = Field(ge=0)
    end_position: int = Field(ge=0)
    model: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    vector: list[float] | None = Field(
        default=None,
        description="When None, only the catalog row is written",
    )

    def catalog_fields(self) -> dict[str, Any]:
        """Column values for EmbeddingModel, without id and vector."""
        return {
            "agent_id": self.agent_id,
            "document_id": self.document_id,
            "chunk_index": self.chunk_index,
            "content": self.content,
            "token_count": self.token_count,
            "start_position": self.start_position,
            "end_position": self.end_position,
            "model": self.model,
            "chunk_metadata": self.metadata,
        }
