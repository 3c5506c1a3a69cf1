"""
Embedding provider factory.

Dependencies: langchain_aws, langchain_google_genai, agent_rag.configs
System role: Embedding provider instantiation and selection
"""

import logging

from langchain_aws import BedrockEmbeddings
from langchain_core.embeddings import Embeddings

from agent_rag.configs.embedding import EmbeddingSettings

from .embeddings_wrapper import FixedDimensionEmbeddings

logger = logging.getLogger(__name__)


def get_embeddings(settings: EmbeddingSettings) -> Embeddings:
    """
    Build the configured embedding provider.

    Args:
        settings: Embedding configuration

    Returns:
        Embeddings: LangChain embeddings client

    Raises:
        ValueError: If provider is not supported
    """
    provider = settings.provider.lower()

    if provider == "google":
        return FixedDimensionEmbeddings(
            model=settings.model,
            output_dimensionality=settings.dimension,
        )

    if provider == "bedrock":
        logger.info(
            f"{__name__}:get_embeddings - Creating Bedrock embeddings",
            extra={"model_id": settings.model, "region": settings.region},
        )
        return BedrockEmbeddings(
            model_id=settings.model,
            region_name=settings.region,
        )

    raise ValueError(
        f"Invalid EMBEDDING_PROVIDER: {provider}. Must be 'google' or 'bedrock'."
    )
