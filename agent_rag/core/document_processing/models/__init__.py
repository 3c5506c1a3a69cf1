"""
Models for document processing pipeline.

Exports: TextChunk, ChunkMetadata, EmbeddedChunk, EmbeddingBatch,
EmbeddingCreate, PipelineResult
"""

from .chunk import ChunkMetadata, TextChunk
from .embedded_chunk import EmbeddedChunk, EmbeddingBatch
from .embedding_create import EmbeddingCreate
from .pipeline_result import PipelineResult

__all__ = [
    "ChunkMetadata",
    "TextChunk",
    "EmbeddedChunk",
    "EmbeddingBatch",
    "EmbeddingCreate",
    "PipelineResult",
]
