"""
Vector index schemas.

Pydantic models for points written to and hits read from the vector
index. Payload field names are camelCase on the wire so that existing
collections and payload indexes (agentId, documentId) stay compatible.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VectorPayload(BaseModel):
    """
    Payload stored alongside each vector.

    agent_id and document_id are filterable (keyword payload indexes).
    content duplicates the catalog text so search hits are self-contained.
    """

    model_config = ConfigDict(populate_by_name=True)

    agent_id: str = Field(alias="agentId", description="Owning agent for tenant isolation")
    document_id: str = Field(alias="documentId", description="Source document")
    chunk_index: int = Field(alias="chunkIndex", description="Position of the chunk in the document")
    content: str = Field(description="Chunk text")
    token_count: int = Field(alias="tokenCount", description="Chunk size in tokens")


class VectorPoint(BaseModel):
    """Single point for upsert. id is shared with the catalog row."""

    id: str = Field(description="Point id (UUID string, equal to EmbeddingModel.id)")
    vector: list[float] = Field(description="Embedding vector")
    payload: VectorPayload

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the Qdrant points API."""
        return {
            "id": self.id,
            "vector": self.vector,
            "payload": self.payload.model_dump(by_alias=True),
        }


class VectorSearchHit(BaseModel):
    """Single result from vector search."""

    id: str = Field(description="Point id")
    score: float = Field(description="Similarity score")
    payload: dict[str, Any] = Field(default_factory=dict, description="Raw point payload")
