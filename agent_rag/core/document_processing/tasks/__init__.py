"""
Pipeline tasks for document processing.

Exports: ChunkingTask, EmbeddingTask, PersistenceTask, sanitize
"""

from .chunking_task import (
    ChunkingTask,
    detect_heading,
    extract_keywords,
    normalize_document_metadata,
)
from .embedding_task import EmbeddingTask, sanitize
from .persistence_task import PersistenceTask

__all__ = [
    "ChunkingTask",
    "detect_heading",
    "extract_keywords",
    "normalize_document_metadata",
    "EmbeddingTask",
    "sanitize",
    "PersistenceTask",
]
