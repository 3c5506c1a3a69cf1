"""
Database models package.

Exports:
  - AgentModel: Tenant owning documents and embeddings
  - DocumentModel, DocumentStatus: Ingestion input and status
  - EmbeddingModel: Chunk catalog row (id shared with the vector index)
  - JobModel, JobStatus, JobType: Background job tracking

Dependencies: sqlalchemy, agent_rag.boundary.db.base
System role: Database model definitions for domain entities
"""

from agent_rag.boundary.db.models.agent_model import AgentModel
from agent_rag.boundary.db.models.document_model import DocumentModel, DocumentStatus
from agent_rag.boundary.db.models.embedding_model import EmbeddingModel
from agent_rag.boundary.db.models.job_model import JobModel, JobStatus, JobType

__all__ = [
    "AgentModel",
    "DocumentModel",
    "DocumentStatus",
    "EmbeddingModel",
    "JobModel",
    "JobStatus",
    "JobType",
]
