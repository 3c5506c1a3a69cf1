"""
Pipeline result model for document processing.

Represents the outcome of processing a document through the pipeline.

Dependencies: pydantic
System role: Return type for DocumentPipeline.process()
"""

from pydantic import BaseModel, Field


class PipelineResult(BaseModel):
    """Result of document processing pipeline execution."""

    document_id: str = Field(description="Unique document identifier")
    chunk_count: int = Field(description="Number of chunks generated")
    embedding_count: int = Field(description="Number of embeddings persisted")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")
    skipped: bool = Field(
        default=False,
        description="True when the document already had embeddings and no work was done",
    )
