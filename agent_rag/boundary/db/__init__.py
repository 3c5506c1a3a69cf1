"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Connection management
  - AgentModel, DocumentModel, EmbeddingModel, JobModel: Domain entities
  - document_crud, embedding_crud, job_crud: CRUD operation singletons

Dependencies: sqlalchemy, agent_rag.configs
System role: Relational catalog adapter
"""

from agent_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin
from agent_rag.boundary.db.connection import get_async_engine, get_async_session_factory
from agent_rag.boundary.db.models import (
    AgentModel,
    DocumentModel,
    DocumentStatus,
    EmbeddingModel,
    JobModel,
    JobStatus,
    JobType,
)
from agent_rag.boundary.db.CRUD import (
    BaseCRUD,
    DocumentCRUD,
    EmbeddingCRUD,
    JobCRUD,
    document_crud,
    embedding_crud,
    job_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_engine",
    "get_async_session_factory",
    "AgentModel",
    "DocumentModel",
    "DocumentStatus",
    "EmbeddingModel",
    "JobModel",
    "JobStatus",
    "JobType",
    "BaseCRUD",
    "DocumentCRUD",
    "EmbeddingCRUD",
    "JobCRUD",
    "document_crud",
    "embedding_crud",
    "job_crud",
]
