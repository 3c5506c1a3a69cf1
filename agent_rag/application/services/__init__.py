"""Service orchestrators."""

from .document_service import DocumentService
from .embedding_service import ConsistencyReport, EmbeddingService
from .job_service import JobService
from .vector_search_service import SearchResult, VectorSearchService

__all__ = [
    "ConsistencyReport",
    "DocumentService",
    "EmbeddingService",
    "JobService",
    "SearchResult",
    "VectorSearchService",
]
