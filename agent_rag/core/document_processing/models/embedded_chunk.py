"""
Embedding batch models.

Dependencies: pydantic
System role: Output of EmbeddingTask, input of PersistenceTask
"""

from pydantic import BaseModel, Field

from .chunk import TextChunk


class EmbeddedChunk(BaseModel):
    """A surviving chunk paired with its vector."""

    chunk_index: int = Field(description="Position of the chunk in the full document chunk list")
    chunk: TextChunk = Field(description="Chunk with sanitized content")
    vector: list[float] = Field(description="Embedding vector")


class EmbeddingBatch(BaseModel):
    """One provider call worth of embedded chunks."""

    batch_number: int = Field(description="Zero-based batch ordinal within the run")
    items: list[EmbeddedChunk] = Field(default_factory=list)
    dropped: int = Field(default=0, description="Chunks removed because sanitized content was empty")
