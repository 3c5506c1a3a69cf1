"""
Chunk domain models for document processing pipeline.

Dependencies: pydantic
System role: Data structure for document chunks in ingestion pipeline
"""

from pydantic import BaseModel, Field


class ChunkMetadata(BaseModel):
    """Structural metadata derived from chunk text plus copied document fields."""

    heading: str | None = Field(default=None, description="Detected heading line")
    keywords: list[str] = Field(default_factory=list, description="Top frequent words")
    page_number: int | None = Field(default=None, description="Copied from document metadata")
    section: str | None = Field(default=None, description="Copied from document metadata")
    language: str | None = Field(default=None, description="Copied from document metadata")


class TextChunk(BaseModel):
    """Token-windowed slice of a document."""

    content: str = Field(description="Decoded and trimmed chunk text")
    token_count: int = Field(description="Tokens in the window")
    start_position: int = Field(description="Token offset of the window start (inclusive)")
    end_position: int = Field(description="Token offset of the window end (exclusive)")
    metadata: ChunkMetadata = Field(default_factory=ChunkMetadata)
