"""
Vector index factory.

Depends on VECTOR_STORE_STORE_TYPE environment variable.

Dependencies: agent_rag.boundary.vdb, agent_rag.configs
System role: Vector index instantiation and selection
"""

import logging

from agent_rag.boundary.vdb.qdrant_index import QdrantVectorIndex
from agent_rag.boundary.vdb.vector_index import VectorIndex
from agent_rag.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)


def get_vector_index(settings: VectorStoreSettings) -> VectorIndex:
    """
    Factory function to get a vector index for the configured backend.

    The returned index is not booted; callers own its lifecycle.

    Args:
        settings: Vector store configuration

    Returns:
        VectorIndex: Configured vector index instance

    Raises:
        ValueError: If store_type is not supported
    """
    store_type = settings.store_type.lower()

    if store_type == "qdrant":
        logger.info(
            f"{__name__}:get_vector_index - Creating Qdrant index",
            extra={"collection": settings.collection_name},
        )
        return QdrantVectorIndex(settings)

    raise ValueError(f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. Must be 'qdrant'.")
