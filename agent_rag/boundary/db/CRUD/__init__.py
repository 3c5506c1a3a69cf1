"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from agent_rag.boundary.db.CRUD import embedding_crud

    rows = await embedding_crud.get_by_document(db, document_id)
"""

from agent_rag.boundary.db.CRUD.base_crud import BaseCRUD
from agent_rag.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from agent_rag.boundary.db.CRUD.embedding_crud import EmbeddingCRUD, embedding_crud
from agent_rag.boundary.db.CRUD.job_crud import JobCRUD, job_crud

__all__ = [
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
    "EmbeddingCRUD",
    "embedding_crud",
    "JobCRUD",
    "job_crud",
]
