"""
Vector index boundary.

Exports:
  - VectorIndex: Backend interface
  - QdrantVectorIndex: Qdrant REST adapter
  - get_vector_index(): Factory
  - VectorPoint, VectorPayload, VectorSearchHit: Wire schemas
"""

from agent_rag.boundary.vdb.qdrant_index import QdrantVectorIndex, build_filter
from agent_rag.boundary.vdb.vector_index import VectorIndex
from agent_rag.boundary.vdb.vector_schemas import VectorPayload, VectorPoint, VectorSearchHit
from agent_rag.boundary.vdb.vector_store_factory import get_vector_index

__all__ = [
    "VectorIndex",
    "QdrantVectorIndex",
    "build_filter",
    "get_vector_index",
    "VectorPayload",
    "VectorPoint",
    "VectorSearchHit",
]
